# schemas.py
# Defines the Pydantic models (schemas) for data validation and serialization.

from pydantic import AliasChoices, BaseModel, EmailStr, ConfigDict, Field, field_validator, model_validator
from typing import List, Optional, Any
from uuid import UUID
from datetime import datetime
from recipe_share.models import Classification, IngredientUnit, UserRole
from recipe_share.core.images import decode_image, encode_image, DEFAULT_CONTENT_TYPE

MAX_PHOTOS = 3

# --- Image Schemas ---
class ImageCreate(BaseModel):
    """
    Image sent by a client. `data` is base64 or a data URI; after validation
    it holds the decoded bytes.
    """
    data: bytes
    content_type: Optional[str] = None

    @model_validator(mode='before')
    @classmethod
    def decode_payload(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("data"), str):
            raw, uri_type = decode_image(data["data"])
            return {
                "data": raw,
                "content_type": data.get("content_type") or uri_type or DEFAULT_CONTENT_TYPE,
            }
        return data

class Image(BaseModel):
    data: str
    content_type: str

    @field_validator('data', mode='before')
    @classmethod
    def encode_payload(cls, value: Any) -> Any:
        if isinstance(value, (bytes, bytearray)):
            return encode_image(bytes(value))
        return value

    model_config = ConfigDict(from_attributes=True)

# --- Ingredient Schemas ---
class IngredientBase(BaseModel):
    name: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    unit: IngredientUnit

class IngredientCreate(IngredientBase):
    pass

class Ingredient(IngredientBase):
    model_config = ConfigDict(from_attributes=True)

# --- Step Schemas ---
class StepCreate(BaseModel):
    description: str = Field(..., min_length=1)
    photos: List[ImageCreate] = Field(default_factory=list, max_length=MAX_PHOTOS)

class Step(BaseModel):
    description: str
    photos: List[Image] = []
    model_config = ConfigDict(from_attributes=True)

# --- Comment Schemas ---
class CommentCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=500)
    # Comments without a rating do not count towards the recipe rating
    rating: Optional[int] = Field(default=None, ge=1, le=5)

class Comment(BaseModel):
    id: UUID
    author_id: UUID
    author_username: str
    text: str
    rating: Optional[int] = None
    approved: bool
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)

class PendingComment(BaseModel):
    recipe_id: UUID
    recipe_name: str
    comment_id: UUID
    text: str
    rating: Optional[int] = None
    author_id: UUID
    author_username: str
    created_at: datetime

# --- User Schemas ---
class UserBase(BaseModel):
    username: str = Field(..., min_length=1)
    email: EmailStr

class UserCreate(UserBase):
    password: str = Field(..., min_length=1)

class UserPublic(BaseModel):
    id: UUID
    username: str
    model_config = ConfigDict(from_attributes=True)

class User(UserBase):
    id: UUID
    role: UserRole
    created_at: Optional[datetime] = None
    saved_recipe_ids: List[UUID] = []
    model_config = ConfigDict(from_attributes=True)

# --- Recipe Schemas ---
class RecipeBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=30)
    classification: Classification
    description: str = Field(..., min_length=1, max_length=200)
    portions: int = Field(..., gt=0)

class RecipeCreate(RecipeBase):
    ingredients: List[IngredientCreate]
    steps: List[StepCreate]
    frontpage_photos: List[ImageCreate] = Field(default_factory=list, max_length=MAX_PHOTOS)

class RecipeUpdate(BaseModel):
    """
    Partial update: only fields present in the request are replaced.
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=30)
    classification: Optional[Classification] = None
    description: Optional[str] = Field(default=None, min_length=1, max_length=200)
    portions: Optional[int] = Field(default=None, gt=0)
    ingredients: Optional[List[IngredientCreate]] = None
    steps: Optional[List[StepCreate]] = None
    frontpage_photos: Optional[List[ImageCreate]] = Field(default=None, max_length=MAX_PHOTOS)

class Recipe(RecipeBase):
    id: UUID
    owner_id: UUID
    username: str = Field(validation_alias=AliasChoices("owner_username", "username"))
    classification: str
    status: bool
    rating: float
    upload_date: datetime
    ingredients: List[Ingredient] = []
    steps: List[Step] = []
    frontpage_photos: List[Image] = []
    comments: List[Comment] = []
    # Only set when the requester is known
    is_saved: Optional[bool] = None

    model_config = ConfigDict(from_attributes=True)

# --- Saved Recipe Schemas ---
class SavedRecipeRequest(BaseModel):
    recipe_id: UUID = Field(..., alias="recipeId")
    model_config = ConfigDict(populate_by_name=True)

# --- Password Reset Schemas ---
class PasswordResetRequest(BaseModel):
    email: EmailStr

class ResetCodeVerify(BaseModel):
    reset_code: str = Field(..., alias="resetCode", min_length=1)
    model_config = ConfigDict(populate_by_name=True)

class PasswordReset(BaseModel):
    reset_code: str = Field(..., alias="resetCode", min_length=1)
    new_password: str = Field(..., alias="newPassword", min_length=1)
    model_config = ConfigDict(populate_by_name=True)

# --- Generic ---
class Message(BaseModel):
    message: str

# --- Token Schemas ---
class Token(BaseModel):
    access_token: str
    token_type: str

class TokenData(BaseModel):
    user_id: Optional[str] = None
