from datetime import datetime, timedelta

from fastapi.testclient import TestClient

from recipe_share import crud, models
from recipe_share.filters import RecipeSearch, apply_sorting
from tests.utils import get_auth_headers, create_approved_recipe, create_user


def names(response):
    assert response.status_code == 200, response.text
    return [r["name"] for r in response.json()]


def seed(client, db):
    zoe = get_auth_headers(client, db, "zoe")
    ana = get_auth_headers(client, db, "ana")
    admin = get_auth_headers(client, db, "admin", is_admin=True)
    create_approved_recipe(client, zoe, admin, name="Banana Cake")
    create_approved_recipe(client, ana, admin, name="Zucchini Bread")
    create_approved_recipe(client, zoe, admin, name="Apple Pie")


def test_sort_by_name_ascending(client: TestClient, db):
    seed(client, db)
    response = client.get("/recipes/", params={"sortBy": "name"})
    assert names(response) == ["Apple Pie", "Banana Cake", "Zucchini Bread"]


def test_sort_by_name_descending(client: TestClient, db):
    seed(client, db)
    response = client.get("/recipes/", params={"sortBy": "name", "sortOrder": "desc"})
    assert names(response) == ["Zucchini Bread", "Banana Cake", "Apple Pie"]


def test_unknown_sort_order_is_ascending(client: TestClient, db):
    seed(client, db)
    response = client.get("/recipes/", params={"sortBy": "name", "sortOrder": "sideways"})
    assert names(response) == ["Apple Pie", "Banana Cake", "Zucchini Bread"]


def test_sort_by_username(client: TestClient, db):
    seed(client, db)
    response = client.get("/recipes/", params={"sortBy": "username", "sortOrder": "desc"})
    assert [r["username"] for r in response.json()] == ["zoe", "zoe", "ana"]


def test_sort_by_upload_date(client: TestClient, db):
    seed(client, db)
    # Spread the upload dates so the order does not depend on clock resolution
    base = datetime(2024, 1, 1)
    for offset, name in enumerate(["Zucchini Bread", "Apple Pie", "Banana Cake"]):
        recipe = db.query(models.Recipe).filter(models.Recipe.name == name).one()
        recipe.upload_date = base + timedelta(days=offset)
    db.commit()

    response = client.get("/recipes/", params={"sortBy": "uploadDate"})
    assert names(response) == ["Zucchini Bread", "Apple Pie", "Banana Cake"]

    response = client.get("/recipes/", params={"sortBy": "uploadDate", "sortOrder": "desc"})
    assert names(response) == ["Banana Cake", "Apple Pie", "Zucchini Bread"]


def test_unknown_sort_field_returns_default_order(client: TestClient, db):
    seed(client, db)
    unsorted = names(client.get("/recipes/"))
    response = client.get("/recipes/", params={"sortBy": "calories"})
    assert names(response) == unsorted


def test_apply_sorting_ignores_unknown_field(db):
    query = db.query(models.Recipe)
    assert apply_sorting(query, "calories", "desc") is query
    assert apply_sorting(query, None, "asc") is query


def test_get_recipes_sorted_by_name(db):
    owner = create_user(db, "cook")
    for name in ["Zucchini Bread", "Apple Pie", "Banana Cake"]:
        db.add(models.Recipe(
            owner_id=owner.id,
            owner_username=owner.username,
            name=name,
            classification="Otro",
            description="x",
            portions=1,
            status=True,
        ))
    db.commit()

    recipes, total = crud.get_recipes(db, search=RecipeSearch(sort_by="name"))
    assert total == 3
    assert [r.name for r in recipes] == ["Apple Pie", "Banana Cake", "Zucchini Bread"]
