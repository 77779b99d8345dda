# api/auth.py
# Handles user authentication, registration, token generation and password reset.

import logging
from datetime import timedelta, datetime, timezone
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from jose import JWTError, jwt
from sqlalchemy.orm import Session

# Import local modules
from recipe_share import crud
from recipe_share import schemas
from recipe_share import models
from recipe_share.db.session import get_db
from recipe_share.core.config import settings
from recipe_share.core.email import send_reset_code
from recipe_share.core.rate_limit import limiter
from recipe_share.moderation import require_admin

# OAuth2 scheme definitions. The optional one lets anonymous callers through.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)

# Create an API router
router = APIRouter()

# Get a logger instance
logger = logging.getLogger(__name__)


# --- Utility Functions for JWT ---

def create_access_token(data: dict, expires_delta: timedelta | None = None):
    """
    Creates a new JWT access token.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=15)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def _user_from_token(token: str, db: Session) -> models.User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        token_data = schemas.TokenData(user_id=payload.get("sub"))
        if token_data.user_id is None:
            logger.error("Token has no subject")
            raise credentials_exception
        user_id = UUID(token_data.user_id)
    except (JWTError, ValueError):
        logger.error("Invalid Auth Token")
        raise credentials_exception

    user = crud.get_user(db, user_id=user_id)
    if user is None:
        logger.error("Could not find user")
        raise credentials_exception
    logger.debug(f"Found user: {user.username}")
    return user


# --- Dependencies for Getting Current User ---

async def get_current_user(
    request: Request, token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)
):
    """
    Decodes the JWT token to get the current user.
    This function is a dependency that can be used to protect endpoints.
    """
    user = _user_from_token(token, db)
    request.state.user = user
    return user


async def get_optional_user(
    request: Request, token: Optional[str] = Depends(optional_oauth2_scheme), db: Session = Depends(get_db)
) -> Optional[models.User]:
    """
    Like get_current_user, but anonymous requests yield None.
    A token that is present but invalid is still rejected.
    """
    if not token:
        return None
    user = _user_from_token(token, db)
    request.state.user = user
    return user


async def get_current_admin(current_user: models.User = Depends(get_current_user)):
    return require_admin(current_user)


# --- Authentication Endpoints ---

@router.post("/register", response_model=schemas.User, status_code=status.HTTP_201_CREATED)
def register(user: schemas.UserCreate, db: Session = Depends(get_db)):
    """
    Register a new user with the default 'user' role.
    """
    if crud.get_user_by_email(db, email=user.email):
        logger.warning(f"Registration with existing email {user.email}")
        raise HTTPException(status_code=400, detail="Email already registered")
    if crud.get_user_by_username(db, username=user.username):
        logger.warning(f"Registration with existing username {user.username}")
        raise HTTPException(status_code=400, detail="Username already taken")
    return crud.create_user(db, user)


@router.post("/token", response_model=schemas.Token)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def login(request: Request, form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """
    Endpoint to log in a user and get an access token. The username field
    carries the email address.
    """
    user = crud.get_user_by_email(db, email=form_data.username)
    if not user or not crud.verify_password(form_data.password, user.hashed_password):
        logger.warning("Incorrect password")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": str(user.id)}, expires_delta=access_token_expires
    )
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/me", response_model=schemas.User)
def read_current_user(current_user: models.User = Depends(get_current_user)):
    """
    Get the profile of the logged-in user.
    """
    return current_user


# --- Password Reset Endpoints ---

@router.post("/request-reset", response_model=schemas.Message)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def request_password_reset(
    request: Request, reset_request: schemas.PasswordResetRequest, db: Session = Depends(get_db)
):
    """
    Email a one-time reset code to a registered user.
    """
    user = crud.get_user_by_email(db, email=reset_request.email)
    if not user:
        raise HTTPException(status_code=400, detail="Email not registered")

    token = crud.create_reset_token(db, user.id)
    send_reset_code(user.email, token.code)
    return {"message": "A reset code has been sent to your email"}


@router.post("/verify-reset-code", response_model=schemas.Message)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def verify_reset_code(request: Request, verify: schemas.ResetCodeVerify, db: Session = Depends(get_db)):
    """
    Check that a reset code exists and has not expired.
    """
    if crud.get_valid_reset_token(db, verify.reset_code) is None:
        raise HTTPException(status_code=400, detail="Invalid or expired reset code")
    return {"message": "Reset code verified"}


@router.post("/reset-password", response_model=schemas.Message)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def reset_password(request: Request, reset: schemas.PasswordReset, db: Session = Depends(get_db)):
    """
    Set a new password using a reset code. The code can only be used once.
    """
    token = crud.get_valid_reset_token(db, reset.reset_code)
    if token is None:
        raise HTTPException(status_code=400, detail="Invalid or expired reset code")

    user = crud.get_user(db, user_id=token.user_id)
    if not user:
        raise HTTPException(status_code=400, detail="User not found")

    crud.set_user_password(db, user, reset.new_password)
    crud.delete_reset_token(db, token)
    return {"message": "Password reset successfully"}
