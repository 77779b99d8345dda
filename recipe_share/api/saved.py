"""
API routes for the current user's saved recipes.
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from recipe_share.db.session import get_db
from recipe_share import models, schemas, crud
from recipe_share.api.auth import get_current_user
from recipe_share.api.recipes import serialize_recipe
from recipe_share.visibility import can_view

router = APIRouter()

logger = logging.getLogger(__name__)


@router.post("/save", response_model=schemas.Message)
def save_recipe(
    saved_in: schemas.SavedRecipeRequest,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    Add a recipe to the current user's saved recipes.
    """
    db_recipe = crud.get_recipe_or_404(db, saved_in.recipe_id)
    if not can_view(db_recipe, current_user):
        raise HTTPException(status_code=403, detail="Not authorized to save this recipe")
    crud.add_saved_recipe(db, current_user.id, db_recipe.id)
    logger.debug(f"User {current_user.username} saved recipe {db_recipe.id}")
    return {"message": "Recipe saved"}


@router.post("/unsave", response_model=schemas.Message)
def unsave_recipe(
    saved_in: schemas.SavedRecipeRequest,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    Remove a recipe from the current user's saved recipes.
    Removing a recipe that is not saved is not an error.
    """
    crud.remove_saved_recipe(db, current_user.id, saved_in.recipe_id)
    return {"message": "Recipe removed from saved recipes"}


@router.get("/saved", response_model=List[schemas.Recipe], response_model_exclude_unset=True)
def get_saved_recipes(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    All recipes the current user has saved, oldest bookmark first.
    """
    recipes = crud.get_saved_recipes(db, current_user.id)
    saved_ids = {r.id for r in recipes}
    return [
        serialize_recipe(r, current_user, saved_ids)
        for r in recipes
        if can_view(r, current_user)
    ]
