"""
Moderation workflow for recipes and comments.

Recipes:  pending --approve--> approved   (stable, no way back)
          pending --reject---> deleted    (hard delete)
Comments: unapproved --approve--> approved
          unapproved --reject---> deleted (removed from its recipe)

Every transition is admin-only and checks that first. Comment transitions
recompute the recipe rating before the recipe is committed.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from recipe_share import crud, models, schemas
from recipe_share.core.exceptions import AuthenticationRequired, ForbiddenError, NotFoundError
from recipe_share.rating import refresh_recipe_rating
from recipe_share.visibility import can_view

logger = logging.getLogger(__name__)


def require_admin(user: Optional[models.User]) -> models.User:
    """
    The one admin-capability check used before any moderation action.
    """
    if user is None:
        raise AuthenticationRequired()
    if not user.is_admin:
        logger.warning(f"User {user.username} attempted a moderation action without admin role")
        raise ForbiddenError("Admin role required")
    return user


def _find_comment(db_recipe: models.Recipe, comment_id: UUID) -> models.Comment:
    for comment in db_recipe.comments:
        if comment.id == comment_id:
            return comment
    logger.warning(f"Comment {comment_id} not found on recipe {db_recipe.id}")
    raise NotFoundError("Comment not found")


# --- Recipes ---

def approve_recipe(db: Session, recipe_id: UUID, actor: models.User) -> models.Recipe:
    require_admin(actor)
    db_recipe = crud.get_recipe_or_404(db, recipe_id)
    if not db_recipe.status:
        db_recipe.status = True
        db_recipe = crud.save_recipe(db, db_recipe)
        logger.info(f"Recipe {recipe_id} approved by {actor.username}")
    return db_recipe


def reject_recipe(db: Session, recipe_id: UUID, actor: models.User) -> None:
    require_admin(actor)
    db_recipe = crud.get_recipe_or_404(db, recipe_id)
    crud.delete_recipe(db, db_recipe)
    logger.info(f"Recipe {recipe_id} rejected and deleted by {actor.username}")


def pending_recipes(db: Session, actor: models.User) -> List[models.Recipe]:
    require_admin(actor)
    return crud.get_pending_recipes(db)


# --- Comments ---

def add_comment(
    db: Session, recipe_id: UUID, comment_in: schemas.CommentCreate, author: models.User
) -> models.Comment:
    """
    Attach a new, unapproved comment to a recipe the author can see.
    Unapproved comments do not affect the rating, so it is left as is.
    """
    db_recipe = crud.get_recipe_or_404(db, recipe_id)
    if not can_view(db_recipe, author):
        raise ForbiddenError("Not authorized to comment on this recipe")

    comment = models.Comment(
        author_id=author.id,
        author_username=author.username,
        text=comment_in.text,
        rating=comment_in.rating,
        approved=False,
        created_at=models.utcnow(),
    )
    db_recipe.comments.append(comment)
    crud.save_recipe(db, db_recipe)
    db.refresh(comment)
    logger.debug(f"User {author.username} commented on recipe {recipe_id}")
    return comment


def approve_comment(
    db: Session, recipe_id: UUID, comment_id: UUID, actor: models.User
) -> models.Comment:
    require_admin(actor)
    db_recipe = crud.get_recipe_or_404(db, recipe_id)
    comment = _find_comment(db_recipe, comment_id)
    comment.approved = True
    refresh_recipe_rating(db_recipe)
    crud.save_recipe(db, db_recipe)
    db.refresh(comment)
    logger.info(f"Comment {comment_id} on recipe {recipe_id} approved by {actor.username}")
    return comment


def reject_comment(db: Session, recipe_id: UUID, comment_id: UUID, actor: models.User) -> models.Recipe:
    require_admin(actor)
    db_recipe = crud.get_recipe_or_404(db, recipe_id)
    comment = _find_comment(db_recipe, comment_id)
    db_recipe.comments.remove(comment)
    refresh_recipe_rating(db_recipe)
    db_recipe = crud.save_recipe(db, db_recipe)
    logger.info(f"Comment {comment_id} on recipe {recipe_id} rejected by {actor.username}")
    return db_recipe


def pending_comments(db: Session, actor: models.User) -> List[schemas.PendingComment]:
    require_admin(actor)
    return [
        schemas.PendingComment(
            recipe_id=comment.recipe_id,
            recipe_name=comment.recipe.name,
            comment_id=comment.id,
            text=comment.text,
            rating=comment.rating,
            author_id=comment.author_id,
            author_username=comment.author_username,
            created_at=comment.created_at,
        )
        for comment in crud.get_pending_comments(db)
    ]
