"""
Who may read which recipe and which of its comments.

Approved recipes are public. A pending recipe is readable only by its owner
and by admins. Anonymous requesters (None) are neither.
"""

from typing import List, Optional

from sqlalchemy import or_

from recipe_share import models


def is_owner(recipe: models.Recipe, requester: Optional[models.User]) -> bool:
    return requester is not None and recipe.owner_id == requester.id


def is_admin(requester: Optional[models.User]) -> bool:
    return requester is not None and requester.is_admin


def can_view(recipe: models.Recipe, requester: Optional[models.User]) -> bool:
    if recipe.status:
        return True
    return is_owner(recipe, requester) or is_admin(requester)


def visible_recipes_clause(requester: Optional[models.User]):
    """
    SQL form of can_view for list queries. Returns None when no restriction
    applies (admins).
    """
    if is_admin(requester):
        return None
    if requester is None:
        return models.Recipe.status.is_(True)
    return or_(models.Recipe.status.is_(True), models.Recipe.owner_id == requester.id)


def visible_comments(
    recipe: models.Recipe, requester: Optional[models.User], detail: bool = False
) -> List[models.Comment]:
    """
    Comments to include when serving a recipe.

    The detail view only ever shows approved comments, even to the owner and
    admins; they review pending comments through the moderation queue.
    In listings the owner and admins also see pending comments.
    """
    if not detail and (is_owner(recipe, requester) or is_admin(requester)):
        return list(recipe.comments)
    return [c for c in recipe.comments if c.approved]
