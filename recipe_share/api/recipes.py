# api/recipes.py
# Handles all API endpoints related to recipes, their comments and moderation.

import logging
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session
from typing import Iterable, List, Optional

# Import local modules
from recipe_share import crud
from recipe_share import schemas
from recipe_share import models
from recipe_share import moderation
from recipe_share.db.session import get_db
from recipe_share.api.auth import get_current_user, get_current_admin, get_optional_user
from recipe_share.filters import RecipeSearch
from recipe_share.visibility import can_view, visible_comments

# Create an API router
router = APIRouter()

# Get a logger instance
logger = logging.getLogger(__name__)


def serialize_recipe(
    db_recipe: models.Recipe,
    requester: Optional[models.User],
    saved_ids: Optional[set] = None,
    detail: bool = False,
) -> schemas.Recipe:
    """
    Build the response for one recipe as seen by the requester: comments
    filtered by visibility and, for known requesters, the is_saved flag.
    """
    recipe = schemas.Recipe.model_validate(db_recipe)
    recipe.comments = [
        schemas.Comment.model_validate(c) for c in visible_comments(db_recipe, requester, detail=detail)
    ]
    if requester is not None and saved_ids is not None:
        recipe.is_saved = db_recipe.id in saved_ids
    return recipe


def serialize_recipes(
    db: Session, recipes: Iterable[models.Recipe], requester: Optional[models.User]
) -> List[schemas.Recipe]:
    saved_ids = crud.get_saved_recipe_ids(db, requester.id) if requester else None
    return [serialize_recipe(r, requester, saved_ids) for r in recipes]


def check_owner_or_admin(db_recipe: models.Recipe, current_user: models.User, action: str):
    if db_recipe.owner_id != current_user.id and not current_user.is_admin:
        logger.error(f"User {current_user.username} is not authorized to {action} recipe with ID: {db_recipe.id}")
        raise HTTPException(status_code=403, detail=f"Not authorized to {action} this recipe")


@router.post("/", response_model=schemas.Recipe, status_code=status.HTTP_201_CREATED,
             response_model_exclude_unset=True)
def create_recipe(
        recipe: schemas.RecipeCreate,
        db: Session = Depends(get_db),
        current_user: models.User = Depends(get_current_user)
):
    """
    Create a new recipe for the currently authenticated user.
    New recipes stay pending until an admin approves them.
    """
    logger.debug(f"User {current_user.username} is creating a new recipe.")
    db_recipe = crud.create_user_recipe(db=db, recipe=recipe, owner=current_user)
    return serialize_recipe(db_recipe, current_user)


@router.get("/", response_model=List[schemas.Recipe], response_model_exclude_unset=True)
def read_recipes(
        response: Response,
        name: Optional[str] = Query(default=None, description="Substring of the name, description or an ingredient"),
        classification: Optional[str] = Query(default=None, description="Comma-separated classifications"),
        ingredient: Optional[str] = Query(default=None, description="Comma-separated ingredients, any of them must be present"),
        exclude_ingredient: Optional[str] = Query(default=None, alias="excludeIngredient",
                                                  description="Comma-separated ingredients that must not be present"),
        created_by: Optional[str] = Query(default=None, alias="createdBy", description="Comma-separated usernames"),
        sort_by: Optional[str] = Query(default=None, alias="sortBy", description="One of: name, uploadDate, username"),
        sort_order: Optional[str] = Query(default="asc", alias="sortOrder", description="asc or desc"),
        saved_by_user: bool = Query(default=False, alias="savedByUser",
                                    description="Only recipes saved by the current user"),
        skip: int = Query(default=0, ge=0, description="Number of records to skip for pagination"),
        limit: int = Query(default=100, ge=1, le=1000, description="Maximum number of records to return (1-1000)"),
        db: Session = Depends(get_db),
        current_user: Optional[models.User] = Depends(get_optional_user)
):
    """
    Retrieve recipes with filtering and sorting.

    Anonymous callers only see approved recipes; owners also see their own
    pending recipes and admins see everything.

    Returns total count in `X-Total-Count` response header.
    """
    search = RecipeSearch(
        name=name,
        classification=classification,
        ingredient=ingredient,
        exclude_ingredient=exclude_ingredient,
        created_by=created_by,
        sort_by=sort_by,
        sort_order=sort_order,
        saved_by_user=saved_by_user,
    )
    logger.debug(f"Fetching recipes with {search}, skip={skip}, limit={limit}.")
    recipes, total_count = crud.get_recipes(db, search=search, requester=current_user, skip=skip, limit=limit)
    response.headers["X-Total-Count"] = str(total_count)
    return serialize_recipes(db, recipes, current_user)


# --- Moderation queues (must be declared before /{recipe_id}) ---

@router.get("/pending", response_model=List[schemas.Recipe], response_model_exclude_unset=True)
def read_pending_recipes(
        db: Session = Depends(get_db),
        current_user: models.User = Depends(get_current_admin)
):
    """
    Recipes waiting for approval. Admin only.
    """
    recipes = moderation.pending_recipes(db, current_user)
    return serialize_recipes(db, recipes, current_user)


@router.get("/comments/pending", response_model=List[schemas.PendingComment])
def read_pending_comments(
        db: Session = Depends(get_db),
        current_user: models.User = Depends(get_current_admin)
):
    """
    Unapproved comments across all recipes. Admin only.
    """
    return moderation.pending_comments(db, current_user)


@router.get("/user/{username}", response_model=List[schemas.Recipe], response_model_exclude_unset=True)
def read_user_recipes(
        username: str,
        db: Session = Depends(get_db),
        current_user: Optional[models.User] = Depends(get_optional_user)
):
    """
    Recipes created by a user. Pending ones are only listed for the user
    themselves and for admins.
    """
    owner = crud.get_user_by_username(db, username=username)
    if owner is None:
        raise HTTPException(status_code=404, detail="User not found")
    recipes, _ = crud.get_recipes(db, search=RecipeSearch(owner_id=owner.id), requester=current_user)
    return serialize_recipes(db, recipes, current_user)


@router.get("/{recipe_id}", response_model=schemas.Recipe, response_model_exclude_unset=True)
def read_recipe(
        recipe_id: UUID,
        db: Session = Depends(get_db),
        current_user: Optional[models.User] = Depends(get_optional_user)
):
    """
    Retrieve a single recipe by its ID.
    """
    logger.debug(f"Fetching recipe with ID: {recipe_id}")
    db_recipe = crud.get_recipe_or_404(db, recipe_id)
    if not can_view(db_recipe, current_user):
        logger.warning(f"Recipe {recipe_id} is pending and not visible to the requester")
        raise HTTPException(status_code=403, detail="Not authorized to view this recipe")
    saved_ids = crud.get_saved_recipe_ids(db, current_user.id) if current_user else None
    return serialize_recipe(db_recipe, current_user, saved_ids, detail=True)


@router.put("/{recipe_id}", response_model=schemas.Recipe, response_model_exclude_unset=True)
def update_recipe(
        recipe_id: UUID,
        recipe: schemas.RecipeUpdate,
        db: Session = Depends(get_db),
        current_user: models.User = Depends(get_current_user)
):
    """
    Update a recipe. Only the owner of the recipe or an admin can perform this action.
    """
    logger.debug(f"User {current_user.username} is updating recipe with ID: {recipe_id}")
    db_recipe = crud.get_recipe_or_404(db, recipe_id)
    check_owner_or_admin(db_recipe, current_user, "update")
    db_recipe = crud.update_recipe(db=db, db_recipe=db_recipe, recipe_update=recipe)
    return serialize_recipe(db_recipe, current_user)


@router.delete("/{recipe_id}", response_model=schemas.Message)
def delete_recipe(
        recipe_id: UUID,
        db: Session = Depends(get_db),
        current_user: models.User = Depends(get_current_user)
):
    """
    Delete a recipe. Only the owner of the recipe or an admin can perform this action.
    """
    logger.debug(f"User {current_user.username} is deleting recipe with ID: {recipe_id}")
    db_recipe = crud.get_recipe_or_404(db, recipe_id)
    check_owner_or_admin(db_recipe, current_user, "delete")
    crud.delete_recipe(db=db, db_recipe=db_recipe)
    return {"message": "Recipe deleted"}


# --- Comment Endpoints ---

@router.post("/{recipe_id}/comments", response_model=schemas.Comment, status_code=status.HTTP_201_CREATED)
def create_comment(
    recipe_id: UUID,
    comment: schemas.CommentCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """
    Add a comment to a recipe. It stays hidden until an admin approves it.
    """
    return moderation.add_comment(db, recipe_id, comment, current_user)


# --- Admin Tasks ---

@router.patch("/{recipe_id}/comments/{comment_id}/approve", response_model=schemas.Comment)
def approve_comment(
    recipe_id: UUID,
    comment_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_admin)
):
    """
    Approve a comment so it becomes visible. Admin only.
    """
    return moderation.approve_comment(db, recipe_id, comment_id, current_user)


@router.delete("/{recipe_id}/comments/{comment_id}/reject", response_model=schemas.Message)
def reject_comment(
    recipe_id: UUID,
    comment_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_admin)
):
    """
    Reject a comment. It is permanently deleted. Admin only.
    """
    moderation.reject_comment(db, recipe_id, comment_id, current_user)
    return {"message": "Comment deleted"}


@router.patch("/{recipe_id}/approve", response_model=schemas.Recipe, response_model_exclude_unset=True)
def approve_recipe(
    recipe_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_admin)
):
    """
    Approve a recipe, making it publicly visible. Admin only.
    """
    db_recipe = moderation.approve_recipe(db, recipe_id, current_user)
    return serialize_recipe(db_recipe, current_user)


@router.delete("/{recipe_id}/reject", response_model=schemas.Message)
def reject_recipe(
    recipe_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_admin)
):
    """
    Reject a pending recipe. It is deleted from the system. Admin only.
    """
    moderation.reject_recipe(db, recipe_id, current_user)
    return {"message": "Recipe rejected and deleted"}
