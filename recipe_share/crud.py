# crud.py
# Contains the functions for Create, Read, Update, Delete (CRUD) operations.

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID

from passlib.context import CryptContext
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from recipe_share import models
from recipe_share import schemas
from recipe_share.core.config import settings
from recipe_share.core.exceptions import NotFoundError, ValidationError
from recipe_share.core.images import DEFAULT_CONTENT_TYPE
from recipe_share.filters import RecipeSearch, build_recipe_query

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Get a logger instance
logger = logging.getLogger(__name__)


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


# --- User CRUD Functions ---
def get_user(db: Session, user_id: UUID):
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_email(db: Session, email: str):
    return db.query(models.User).filter(models.User.email == email).first()


def get_user_by_username(db: Session, username: str):
    return db.query(models.User).filter(models.User.username == username).first()


def create_user(db: Session, user: schemas.UserCreate, role: models.UserRole = models.UserRole.USER):
    hashed_password = get_password_hash(user.password)
    db_user = models.User(
        username=user.username,
        email=user.email,
        hashed_password=hashed_password,
        role=role,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def set_user_password(db: Session, user: models.User, new_password: str):
    user.hashed_password = get_password_hash(new_password)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


# --- Password Reset Token Functions ---
def create_reset_token(db: Session, user_id: UUID) -> models.ResetToken:
    """
    Issue a 6 character one-time reset code for the user. Earlier codes of
    the user and expired codes of anyone are deleted first.
    """
    now = datetime.now(timezone.utc)
    db.query(models.ResetToken).filter(
        or_(models.ResetToken.user_id == user_id, models.ResetToken.expires_at < now)
    ).delete(synchronize_session="fetch")
    token = models.ResetToken(
        user_id=user_id,
        code=secrets.token_hex(3),
        expires_at=now + timedelta(minutes=settings.RESET_CODE_EXPIRE_MINUTES),
    )
    db.add(token)
    db.commit()
    db.refresh(token)
    return token


def get_valid_reset_token(db: Session, code: str) -> Optional[models.ResetToken]:
    token = db.query(models.ResetToken).filter(models.ResetToken.code == code).first()
    if token is None:
        return None
    expires_at = token.expires_at
    # SQLite hands datetimes back without tzinfo
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    if expires_at < datetime.now(timezone.utc):
        logger.debug(f"Reset code for user {token.user_id} has expired")
        return None
    return token


def delete_reset_token(db: Session, token: models.ResetToken):
    db.delete(token)
    db.commit()


# --- Recipe CRUD Functions ---
def _recipe_query(db: Session):
    return db.query(models.Recipe).options(
        selectinload(models.Recipe.ingredients),
        selectinload(models.Recipe.steps).selectinload(models.Step.photos),
        selectinload(models.Recipe.frontpage_photos),
        selectinload(models.Recipe.comments),
    )


def get_recipe(db: Session, recipe_id: UUID):
    """
    Retrieve a single recipe with its ingredients, steps, photos and comments.
    """
    logger.debug(f"Retrieving recipe with id {recipe_id}")
    return _recipe_query(db).filter(models.Recipe.id == recipe_id).first()


def get_recipe_or_404(db: Session, recipe_id: UUID) -> models.Recipe:
    db_recipe = get_recipe(db, recipe_id=recipe_id)
    if db_recipe is None:
        logger.warning(f"Recipe with ID {recipe_id} not found.")
        raise NotFoundError("Recipe not found")
    return db_recipe


def get_recipes(
    db: Session,
    search=None,
    requester: Optional[models.User] = None,
    skip: int = 0,
    limit: Optional[int] = None,
):
    """
    Retrieve recipes matching a RecipeSearch, restricted to what the
    requester may see. Returns (recipes, total_count).
    """
    if search is None:
        search = RecipeSearch()
    logger.debug(f"Retrieving recipes for {search} skipping {skip}, up to limit {limit}")
    query = build_recipe_query(db, _recipe_query(db), search, requester)
    total_count = query.count()
    query = query.offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all(), total_count


def get_pending_recipes(db: Session):
    return _recipe_query(db).filter(models.Recipe.status.is_(False)).order_by(models.Recipe.upload_date).all()


def get_pending_comments(db: Session):
    return (
        db.query(models.Comment)
        .options(selectinload(models.Comment.recipe))
        .filter(models.Comment.approved.is_(False))
        .order_by(models.Comment.created_at)
        .all()
    )


def _build_images(images: List[schemas.ImageCreate]) -> List[models.Image]:
    return [
        models.Image(position=i, data=img.data, content_type=img.content_type or DEFAULT_CONTENT_TYPE)
        for i, img in enumerate(images)
    ]


def _build_ingredients(ingredients: List[schemas.IngredientCreate]) -> List[models.RecipeIngredient]:
    return [
        models.RecipeIngredient(position=i, name=item.name, amount=item.amount, unit=item.unit.value)
        for i, item in enumerate(ingredients)
    ]


def _build_steps(steps: List[schemas.StepCreate]) -> List[models.Step]:
    return [
        models.Step(position=i, description=item.description, photos=_build_images(item.photos))
        for i, item in enumerate(steps)
    ]


def create_user_recipe(db: Session, recipe: schemas.RecipeCreate, owner: models.User):
    """
    Create a new pending recipe with its ingredients, steps and photos.
    The whole aggregate is built in memory and committed once.
    """
    logger.debug(f"Creating recipe '{recipe.name}' for user {owner.username}")
    db_recipe = models.Recipe(
        owner_id=owner.id,
        owner_username=owner.username,
        name=recipe.name,
        classification=recipe.classification.value,
        description=recipe.description,
        portions=recipe.portions,
        status=False,
        rating=0.0,
        upload_date=datetime.now(timezone.utc),
        ingredients=_build_ingredients(recipe.ingredients),
        steps=_build_steps(recipe.steps),
        frontpage_photos=_build_images(recipe.frontpage_photos),
    )
    db.add(db_recipe)
    db.commit()
    db.refresh(db_recipe)
    return db_recipe


def update_recipe(db: Session, db_recipe: models.Recipe, recipe_update: schemas.RecipeUpdate):
    """
    Update an existing recipe. Only fields present in the request change;
    child collections that are present are replaced as a whole.
    Moderation status and rating are never touched here.
    """
    fields = recipe_update.model_fields_set
    logger.debug(f"Updating recipe {db_recipe.id} fields: {sorted(fields)}")

    for key in ("name", "description", "portions"):
        if key in fields and getattr(recipe_update, key) is not None:
            setattr(db_recipe, key, getattr(recipe_update, key))
    if "classification" in fields and recipe_update.classification is not None:
        db_recipe.classification = recipe_update.classification.value
    if "ingredients" in fields and recipe_update.ingredients is not None:
        db_recipe.ingredients = _build_ingredients(recipe_update.ingredients)
    if "steps" in fields and recipe_update.steps is not None:
        db_recipe.steps = _build_steps(recipe_update.steps)
    if "frontpage_photos" in fields and recipe_update.frontpage_photos is not None:
        db_recipe.frontpage_photos = _build_images(recipe_update.frontpage_photos)

    db.add(db_recipe)
    db.commit()
    db.refresh(db_recipe)
    return db_recipe


def delete_recipe(db: Session, db_recipe: models.Recipe):
    """
    Delete a recipe from the database.
    The cascade options on the model delete its children and remove it
    from every user's saved recipes.
    """
    logger.debug(f"Deleting recipe {db_recipe.id}")
    db.delete(db_recipe)
    db.commit()
    return db_recipe


def save_recipe(db: Session, db_recipe: models.Recipe):
    """
    Persist a recipe after an in-memory change to the aggregate.
    """
    db.add(db_recipe)
    db.commit()
    db.refresh(db_recipe)
    return db_recipe


# --- Saved Recipe Functions ---
def get_saved_recipe_ids(db: Session, user_id: UUID) -> set:
    rows = db.query(models.SavedRecipe.recipe_id).filter(models.SavedRecipe.user_id == user_id).all()
    return {row.recipe_id for row in rows}


def is_recipe_saved(db: Session, user_id: UUID, recipe_id: UUID) -> bool:
    return (
        db.query(models.SavedRecipe)
        .filter(models.SavedRecipe.user_id == user_id, models.SavedRecipe.recipe_id == recipe_id)
        .first()
        is not None
    )


def add_saved_recipe(db: Session, user_id: UUID, recipe_id: UUID):
    if is_recipe_saved(db, user_id, recipe_id):
        raise ValidationError("Recipe already saved")
    db_item = models.SavedRecipe(user_id=user_id, recipe_id=recipe_id, saved_at=datetime.now(timezone.utc))
    db.add(db_item)
    db.commit()
    return db_item


def remove_saved_recipe(db: Session, user_id: UUID, recipe_id: UUID) -> int:
    deleted = (
        db.query(models.SavedRecipe)
        .filter(models.SavedRecipe.user_id == user_id, models.SavedRecipe.recipe_id == recipe_id)
        .delete(synchronize_session="fetch")
    )
    db.commit()
    return deleted


def get_saved_recipes(db: Session, user_id: UUID):
    return (
        _recipe_query(db)
        .join(models.SavedRecipe, models.SavedRecipe.recipe_id == models.Recipe.id)
        .filter(models.SavedRecipe.user_id == user_id)
        .order_by(models.SavedRecipe.saved_at)
        .all()
    )
