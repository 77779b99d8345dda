"""
Aggregate rating of a recipe.

A recipe's rating is derived from its comments: the mean rating of the
comments that are approved and carry a rating, rounded to one decimal.
It is recomputed whenever that set changes (comment approval or rejection)
and stored on the recipe in the same commit.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from recipe_share import models

logger = logging.getLogger(__name__)

ONE_DECIMAL = Decimal("0.1")


def recompute_rating(comments: Iterable[models.Comment]) -> float:
    ratings = [c.rating for c in comments if c.approved and c.rating is not None]
    if not ratings:
        return 0.0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


def refresh_recipe_rating(recipe: models.Recipe) -> float:
    """
    Update the cached rating on the recipe. The caller commits.
    """
    recipe.rating = recompute_rating(recipe.comments)
    logger.debug(f"Recipe {recipe.id} rating recomputed to {recipe.rating}")
    return recipe.rating
