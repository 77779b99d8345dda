from fastapi.testclient import TestClient

from recipe_share import crud, models, schemas

# base64 of the 8 byte PNG signature
PNG_B64 = "iVBORw0KGgo="


def create_user(db, username, password="password", is_admin=False):
    user_in = schemas.UserCreate(username=username, email=f"{username}@example.com", password=password)
    role = models.UserRole.ADMIN if is_admin else models.UserRole.USER
    return crud.create_user(db, user_in, role=role)


def get_auth_headers(client: TestClient, db, username, password="password", is_admin=False):
    # Directly create user in DB
    user = crud.get_user_by_username(db, username=username)
    if user is None:
        user = create_user(db, username, password=password, is_admin=is_admin)

    # Login
    response = client.post(
        "/auth/token",
        data={"username": user.email, "password": password},
    )
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


def recipe_payload(name="Test Recipe", ingredients=None, **overrides):
    if ingredients is None:
        ingredients = [{"name": "Harina", "amount": 500, "unit": "g"}]
    data = {
        "name": name,
        "classification": "Almuerzo",
        "description": "Una receta de prueba.",
        "portions": 4,
        "ingredients": ingredients,
        "steps": [{"description": "Mezclar todo", "photos": []}],
    }
    data.update(overrides)
    return data


def create_dummy_recipe(client, headers, name="Test Recipe", **kwargs):
    response = client.post("/recipes/", json=recipe_payload(name, **kwargs), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def create_approved_recipe(client, owner_headers, admin_headers, name="Test Recipe", **kwargs):
    recipe = create_dummy_recipe(client, owner_headers, name=name, **kwargs)
    response = client.patch(f"/recipes/{recipe['id']}/approve", headers=admin_headers)
    assert response.status_code == 200, response.text
    return response.json()


def ingredient(name, amount=1, unit="unidades"):
    return {"name": name, "amount": amount, "unit": unit}
