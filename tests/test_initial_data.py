import pytest

from recipe_share import crud, models
from recipe_share.core.config import settings
from recipe_share.core.exceptions import AuthenticationRequired, ForbiddenError
from recipe_share.initial_data import init_db
from recipe_share.moderation import require_admin
from tests.utils import create_user


def test_init_db_creates_admin(db):
    user = init_db(db)
    assert user.email == settings.FIRST_SUPERUSER_EMAIL
    assert user.is_admin
    assert crud.verify_password(settings.FIRST_SUPERUSER_PASSWORD, user.hashed_password)


def test_init_db_is_idempotent(db):
    first = init_db(db)
    second = init_db(db)
    assert first.id == second.id
    assert db.query(models.User).count() == 1


def test_init_db_promotes_existing_user(db):
    user = create_user(db, "someone")
    user.email = settings.FIRST_SUPERUSER_EMAIL
    db.commit()

    promoted = init_db(db)
    assert promoted.id == user.id
    assert promoted.role == models.UserRole.ADMIN


def test_require_admin(db):
    admin = create_user(db, "boss", is_admin=True)
    regular = create_user(db, "cook")

    assert require_admin(admin) is admin
    with pytest.raises(ForbiddenError):
        require_admin(regular)
    with pytest.raises(AuthenticationRequired):
        require_admin(None)
