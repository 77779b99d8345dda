# filters.py
# Builds the filter and sort criteria of the recipe listing from query parameters.

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import asc, desc, func, or_
from sqlalchemy.orm import Query, Session

from recipe_share import models
from recipe_share.core.exceptions import AuthenticationRequired, NotFoundError
from recipe_share.visibility import visible_recipes_clause

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    'name': models.Recipe.name,
    'uploadDate': models.Recipe.upload_date,
    'username': models.Recipe.owner_username,
}

LIKE_ESCAPE = "\\"


class RecipeSearch:
    """
    Untrusted listing parameters, as received in the query string.
    Comma separated values are kept raw and split when the query is built.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        classification: Optional[str] = None,
        ingredient: Optional[str] = None,
        exclude_ingredient: Optional[str] = None,
        created_by: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = "asc",
        saved_by_user: bool = False,
        owner_id: Optional[UUID] = None,
    ):
        self.name = name
        self.classification = classification
        self.ingredient = ingredient
        self.exclude_ingredient = exclude_ingredient
        self.created_by = created_by
        self.sort_by = sort_by
        self.sort_order = sort_order
        self.saved_by_user = saved_by_user
        # Set by routes that already resolved the owner
        self.owner_id = owner_id

    def __repr__(self):
        params = {k: v for k, v in vars(self).items() if v not in (None, False)}
        return f"RecipeSearch({params})"


def split_csv(value: Optional[str], lower: bool = False) -> List[str]:
    if not value:
        return []
    items = [item.strip() for item in value.split(',')]
    if lower:
        items = [item.lower() for item in items]
    return [item for item in items if item]


def escape_like(term: str) -> str:
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _contains(column, term: str):
    return column.ilike(f"%{escape_like(term)}%", escape=LIKE_ESCAPE)


def _has_ingredient_in(names: List[str]):
    return models.Recipe.ingredients.any(func.lower(models.RecipeIngredient.name).in_(names))


def apply_filters(db: Session, query: Query, search: RecipeSearch, requester: Optional[models.User]) -> Query:
    if search.name:
        query = query.filter(or_(
            _contains(models.Recipe.name, search.name),
            _contains(models.Recipe.description, search.name),
            models.Recipe.ingredients.any(_contains(models.RecipeIngredient.name, search.name)),
        ))

    classifications = split_csv(search.classification, lower=True)
    if classifications:
        query = query.filter(func.lower(models.Recipe.classification).in_(classifications))

    # "ingredient" means at least one of the listed ingredients is present
    included = split_csv(search.ingredient, lower=True)
    if included:
        query = query.filter(_has_ingredient_in(included))

    excluded = split_csv(search.exclude_ingredient, lower=True)
    if excluded:
        query = query.filter(~_has_ingredient_in(excluded))

    if search.owner_id is not None:
        query = query.filter(models.Recipe.owner_id == search.owner_id)

    usernames = split_csv(search.created_by)
    if usernames:
        owners = db.query(models.User.id).filter(models.User.username.in_(usernames)).all()
        if not owners:
            logger.warning(f"None of the users {usernames} were found")
            raise NotFoundError("None of the requested users were found")
        query = query.filter(models.Recipe.owner_id.in_([owner.id for owner in owners]))

    if search.saved_by_user:
        if requester is None:
            raise AuthenticationRequired("Log in to list saved recipes")
        query = query.filter(models.Recipe.saved_by.any(models.SavedRecipe.user_id == requester.id))

    return query


def apply_sorting(query: Query, sort_by: Optional[str], sort_order: Optional[str]) -> Query:
    model_attr = SORT_FIELDS.get(sort_by) if sort_by else None
    if model_attr is None:
        if sort_by:
            logger.debug(f"Ignoring unsupported sort field '{sort_by}'")
        return query

    direction = desc if (sort_order or "").lower() == "desc" else asc
    return query.order_by(direction(model_attr))


def build_recipe_query(
    db: Session, query: Query, search: RecipeSearch, requester: Optional[models.User]
) -> Query:
    """
    Compose visibility, filters and sorting into a single query.
    """
    clause = visible_recipes_clause(requester)
    if clause is not None:
        query = query.filter(clause)
    query = apply_filters(db, query, search, requester)
    return apply_sorting(query, search.sort_by, search.sort_order)
