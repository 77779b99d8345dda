import pytest
import json
import itertools
from fastapi import FastAPI, Request
from starlette.testclient import TestClient
from unittest.mock import patch, MagicMock
from recipe_share.core.logging_middleware import StructuredLoggingMiddleware
from recipe_share.models import UserRole

# Setup a simple app for testing middleware
app = FastAPI()
app.add_middleware(StructuredLoggingMiddleware)


@app.get("/normal")
async def normal_request():
    return {"message": "ok"}


@app.get("/error")
async def error_request():
    raise ValueError("planned error")


@app.get("/authenticated")
async def authenticated_request(request: Request):
    # Simulate what the auth dependency does
    user = MagicMock()
    user.id = "123-uuid"
    user.username = "cook"
    user.role = UserRole.ADMIN
    request.state.user = user
    return {"message": "authenticated"}


client = TestClient(app)


@pytest.fixture
def mock_logger():
    with patch("recipe_share.core.logging_middleware.structured_logger") as mock:
        yield mock


def test_logs_error_request(mock_logger):
    # BaseHTTPMiddleware re-raises, the middleware must log before that
    with pytest.raises(ValueError):
        client.get("/error")

    assert mock_logger.info.called
    log_data = json.loads(mock_logger.info.call_args[0][0])

    assert log_data["status_code"] == 500
    assert "planned error" in log_data["error"]


def test_logs_slow_request(mock_logger):
    with patch("recipe_share.core.logging_middleware.time") as mock_time:
        mock_time.perf_counter.side_effect = [1000.0, 1000.6]
        mock_time.time.return_value = 1700000000.0

        client.get("/normal")

    assert mock_logger.info.called
    log_data = json.loads(mock_logger.info.call_args[0][0])

    # 1000.6 - 1000.0 = 0.6s = 600ms
    assert log_data["duration_ms"] >= 500
    assert log_data["path"] == "/normal"
    assert log_data["user_id"] is None


def test_logs_authenticated_user(mock_logger):
    with patch("recipe_share.core.logging_middleware.time") as mock_time:
        # Slow request to force log
        mock_time.perf_counter.side_effect = [1000.0, 1000.6]
        mock_time.time.return_value = 1700000000.0

        client.get("/authenticated")

    assert mock_logger.info.called
    log_data = json.loads(mock_logger.info.call_args[0][0])

    assert log_data["user_id"] == "123-uuid"
    assert log_data["username"] == "cook"
    assert log_data["user_role"] == "admin"


def test_samples_normal_request(mock_logger):
    # Force random below SAMPLE_RATE and time to be fast
    with (
        patch("recipe_share.core.logging_middleware.random.random", return_value=0.01),
        patch("recipe_share.core.logging_middleware.time") as mock_time,
    ):
        mock_time.perf_counter.side_effect = [100.0, 100.1]  # 100ms
        mock_time.time.return_value = 1700000000.0

        client.get("/normal")

    assert mock_logger.info.called


def test_ignores_normal_request(mock_logger):
    with (
        patch("recipe_share.core.logging_middleware.random.random", return_value=0.10),
        patch("recipe_share.core.logging_middleware.time") as mock_time,
    ):
        # Use iterator to avoid StopIteration if framework makes extra calls
        mock_time.perf_counter.side_effect = itertools.count(start=100.0, step=0.1)
        mock_time.time.return_value = 1700000000.0

        client.get("/normal")

    assert not mock_logger.info.called


def test_should_log_rules():
    middleware = StructuredLoggingMiddleware(app=MagicMock())
    with patch("recipe_share.core.logging_middleware.random.random", return_value=0.99):
        assert middleware.should_log(503, 1.0)
        assert middleware.should_log(200, 750.0)
        assert not middleware.should_log(200, 10.0)
