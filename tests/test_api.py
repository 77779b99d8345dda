from fastapi.testclient import TestClient


def test_read_root(client: TestClient):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to the Recipe Sharing API!"}


def test_docs_redirect(client: TestClient):
    response = client.get("/docs")
    assert response.status_code == 200


def test_cors_headers(client: TestClient):
    # Simulate a cross-origin request by setting the Origin header
    headers = {"Origin": "http://localhost:3000"}
    response = client.get("/", headers=headers)
    assert response.status_code == 200
    # The Access-Control-Expose-Headers header should be present and contain X-Total-Count
    assert "access-control-expose-headers" in response.headers
    assert "X-Total-Count" in response.headers["access-control-expose-headers"]


def test_security_headers(client: TestClient):
    response = client.get("/")
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_domain_errors_are_json(client: TestClient):
    # NotFoundError raised by the filter engine goes through the app handler
    response = client.get("/recipes/", params={"createdBy": "nobody"})
    assert response.status_code == 404
    assert response.json() == {"detail": "None of the requested users were found"}
