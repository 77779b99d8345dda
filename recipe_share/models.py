# models.py
# Defines the SQLAlchemy ORM models for the database tables.

import uuid
from datetime import datetime, timezone
from sqlalchemy import (
    Boolean, Column, ForeignKey, Integer, String, Text, Enum, DateTime, Float, LargeBinary
)
from sqlalchemy.orm import relationship
from sqlalchemy.types import Uuid
from recipe_share.db.session import Base
import enum


def utcnow():
    return datetime.now(timezone.utc)


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class Classification(str, enum.Enum):
    BREAKFAST = "Desayuno"
    LUNCH = "Almuerzo"
    DINNER = "Cena"
    TEA_TIME = "Merienda"
    SNACK = "Snack"
    VEGAN = "Vegano"
    VEGETARIAN = "Vegetariano"
    GLUTEN_FREE = "Sin TACC"
    OTHER = "Otro"


class IngredientUnit(str, enum.Enum):
    GRAMS = "g"
    KILOGRAMS = "kg"
    UNITS = "unidades"
    CUPS = "tazas"
    MILLILITERS = "ml"
    TABLESPOONS = "cucharadas"
    TEASPOONS = "cucharaditas"
    PINCH = "pizca"
    LITERS = "litros"
    CUBIC_CENTIMETERS = "cc"


class User(Base):
    """
    User model for the 'users' table.
    """
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(UserRole), default=UserRole.USER, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    recipes = relationship("Recipe", back_populates="owner")
    saved_recipes = relationship("SavedRecipe", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN

    @property
    def saved_recipe_ids(self):
        return {saved.recipe_id for saved in self.saved_recipes}

    def __str__(self):
        return f"{self.id}: {self.username}"


class Recipe(Base):
    """
    Recipe model for the 'recipes' table.

    The recipe is an aggregate root: ingredients, steps, images and comments
    are owned by it and only persisted through it.
    """
    __tablename__ = "recipes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), index=True, nullable=False)
    # Snapshot of the owner's username at creation time
    owner_username = Column(String, index=True, nullable=False)

    name = Column(String(30), index=True, nullable=False)
    classification = Column(String, index=True, nullable=False)
    description = Column(String(200), nullable=False)
    portions = Column(Integer, nullable=False)

    # Moderation: False until an admin approves the recipe
    status = Column(Boolean, default=False, nullable=False, index=True)
    # Cached aggregate of approved comment ratings, see rating.py
    rating = Column(Float, default=0.0, nullable=False)

    upload_date = Column(DateTime, default=utcnow, index=True)

    # Relationships
    owner = relationship("User", back_populates="recipes")

    ingredients = relationship(
        "RecipeIngredient", back_populates="recipe", cascade="all, delete-orphan",
        order_by="RecipeIngredient.position"
    )
    steps = relationship(
        "Step", back_populates="recipe", cascade="all, delete-orphan",
        order_by="Step.position"
    )
    frontpage_photos = relationship(
        "Image", back_populates="recipe", cascade="all, delete-orphan",
        order_by="Image.position"
    )
    comments = relationship(
        "Comment", back_populates="recipe", cascade="all, delete-orphan",
        order_by="Comment.created_at"
    )
    saved_by = relationship("SavedRecipe", back_populates="recipe", cascade="all, delete-orphan")

    def __str__(self):
        return f"{self.id}: {self.name}, by {self.owner_username}"


class RecipeIngredient(Base):
    """
    An ingredient line of a recipe.
    """
    __tablename__ = "recipe_ingredients"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    recipe_id = Column(Uuid(as_uuid=True), ForeignKey("recipes.id"), index=True)
    position = Column(Integer, nullable=False, default=0)

    name = Column(String, index=True, nullable=False)
    amount = Column(Float, nullable=False)
    unit = Column(String, nullable=False)

    recipe = relationship("Recipe", back_populates="ingredients")


class Step(Base):
    """
    A preparation step of a recipe.
    """
    __tablename__ = "steps"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    recipe_id = Column(Uuid(as_uuid=True), ForeignKey("recipes.id"), index=True)
    position = Column(Integer, nullable=False, default=0)
    description = Column(Text, nullable=False)

    recipe = relationship("Recipe", back_populates="steps")
    photos = relationship(
        "Image", back_populates="step", cascade="all, delete-orphan",
        order_by="Image.position"
    )


class Image(Base):
    """
    Binary image owned either by a recipe (front page photo) or by a step.
    """
    __tablename__ = "images"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    recipe_id = Column(Uuid(as_uuid=True), ForeignKey("recipes.id"), nullable=True, index=True)
    step_id = Column(Uuid(as_uuid=True), ForeignKey("steps.id"), nullable=True, index=True)
    position = Column(Integer, nullable=False, default=0)

    data = Column(LargeBinary, nullable=False)
    content_type = Column(String, nullable=False)

    recipe = relationship("Recipe", back_populates="frontpage_photos")
    step = relationship("Step", back_populates="photos")


class Comment(Base):
    """
    A user comment on a recipe. Hidden until approved by an admin.
    """
    __tablename__ = "comments"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    recipe_id = Column(Uuid(as_uuid=True), ForeignKey("recipes.id"), index=True, nullable=False)
    author_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), index=True, nullable=False)
    author_username = Column(String, nullable=False)

    text = Column(String(500), nullable=False)
    rating = Column(Integer, nullable=True)
    approved = Column(Boolean, default=False, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)

    recipe = relationship("Recipe", back_populates="comments")
    author = relationship("User")


class SavedRecipe(Base):
    """
    Bookmark of a recipe by a user. Composite key gives set semantics.
    """
    __tablename__ = "saved_recipes"
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), primary_key=True)
    recipe_id = Column(Uuid(as_uuid=True), ForeignKey("recipes.id"), primary_key=True, index=True)
    saved_at = Column(DateTime, default=utcnow)

    user = relationship("User", back_populates="saved_recipes")
    recipe = relationship("Recipe", back_populates="saved_by")


class ResetToken(Base):
    """
    One-time password reset code.
    """
    __tablename__ = "reset_tokens"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    code = Column(String, index=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)

    user = relationship("User")
