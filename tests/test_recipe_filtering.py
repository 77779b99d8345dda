import pytest
from fastapi.testclient import TestClient

from recipe_share.filters import escape_like, split_csv
from tests.utils import get_auth_headers, create_approved_recipe, ingredient


@pytest.fixture
def catalog(client: TestClient, db):
    """
    Three approved recipes by two users:
      Salsa       alice  Almuerzo  tomato, garlic
      Sopa        alice  Cena      onion, carrot
      Ensalada    bob    Vegano    tomato, onion
    """
    alice = get_auth_headers(client, db, "alice")
    bob = get_auth_headers(client, db, "bob")
    admin = get_auth_headers(client, db, "admin", is_admin=True)

    salsa = create_approved_recipe(
        client, alice, admin, name="Salsa",
        ingredients=[ingredient("Tomato"), ingredient("Garlic")],
        classification="Almuerzo", description="Salsa roja picante",
    )
    sopa = create_approved_recipe(
        client, alice, admin, name="Sopa",
        ingredients=[ingredient("Onion"), ingredient("Carrot")],
        classification="Cena", description="Sopa de verduras",
    )
    ensalada = create_approved_recipe(
        client, bob, admin, name="Ensalada",
        ingredients=[ingredient("Tomato"), ingredient("Onion")],
        classification="Vegano", description="Fresca y simple",
    )
    return {"salsa": salsa["id"], "sopa": sopa["id"], "ensalada": ensalada["id"]}


def ids(response):
    assert response.status_code == 200, response.text
    return {r["id"] for r in response.json()}


def test_no_filters_lists_everything(client: TestClient, catalog):
    response = client.get("/recipes/")
    assert ids(response) == set(catalog.values())
    assert response.headers["X-Total-Count"] == "3"


def test_filter_by_name(client: TestClient, catalog):
    assert ids(client.get("/recipes/", params={"name": "sopa"})) == {catalog["sopa"]}


def test_name_matches_description_and_ingredients(client: TestClient, catalog):
    # "picante" only appears in the Salsa description
    assert ids(client.get("/recipes/", params={"name": "picante"})) == {catalog["salsa"]}
    # "carr" only appears in an ingredient of Sopa
    assert ids(client.get("/recipes/", params={"name": "carr"})) == {catalog["sopa"]}


def test_name_wildcards_are_literal(client: TestClient, catalog):
    assert ids(client.get("/recipes/", params={"name": "%"})) == set()
    assert ids(client.get("/recipes/", params={"name": "_"})) == set()


def test_filter_by_classification_is_case_insensitive(client: TestClient, catalog):
    assert ids(client.get("/recipes/", params={"classification": "almuerzo"})) == {catalog["salsa"]}
    assert ids(client.get("/recipes/", params={"classification": "CENA,vegano"})) == {
        catalog["sopa"], catalog["ensalada"]
    }


def test_filter_by_any_ingredient(client: TestClient, catalog):
    response = client.get("/recipes/", params={"ingredient": "garlic,carrot"})
    assert ids(response) == {catalog["salsa"], catalog["sopa"]}


def test_ingredient_match_is_exact_name(client: TestClient, catalog):
    assert ids(client.get("/recipes/", params={"ingredient": "tom"})) == set()


def test_include_and_exclude_ingredients(client: TestClient, catalog):
    response = client.get("/recipes/", params={"ingredient": "tomato,onion", "excludeIngredient": "garlic"})
    # Salsa has tomato but also garlic
    assert ids(response) == {catalog["sopa"], catalog["ensalada"]}


def test_exclude_only(client: TestClient, catalog):
    response = client.get("/recipes/", params={"excludeIngredient": "Tomato"})
    assert ids(response) == {catalog["sopa"]}


def test_filter_by_creator(client: TestClient, catalog):
    assert ids(client.get("/recipes/", params={"createdBy": "bob"})) == {catalog["ensalada"]}
    assert ids(client.get("/recipes/", params={"createdBy": "alice,bob"})) == set(catalog.values())


def test_filter_by_unknown_creator(client: TestClient, catalog):
    response = client.get("/recipes/", params={"createdBy": "nobody"})
    assert response.status_code == 404


def test_combined_filters(client: TestClient, catalog):
    response = client.get("/recipes/", params={"createdBy": "alice", "ingredient": "onion"})
    assert ids(response) == {catalog["sopa"]}


def test_pagination_keeps_total_count(client: TestClient, catalog):
    response = client.get("/recipes/", params={"skip": 1, "limit": 1, "sortBy": "name"})
    assert response.status_code == 200
    assert [r["name"] for r in response.json()] == ["Salsa"]
    assert response.headers["X-Total-Count"] == "3"


def test_split_csv():
    assert split_csv(None) == []
    assert split_csv(" Tomato, ,Onion ") == ["Tomato", "Onion"]
    assert split_csv("Tomato,ONION", lower=True) == ["tomato", "onion"]


def test_escape_like():
    assert escape_like("50%_off") == "50\\%\\_off"
