"""
Test Configuration and Fixtures

- Environment is set before any application module reads settings
- Every test starts with an empty in-memory store
- `client` is a TestClient over the test app (lifespan wires the DI container)
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# `settings` is built at import time of src.platform.config.core_setting
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    os.environ['STORAGE_BACKEND'] = 'memory'
    os.environ.setdefault('SEATS_PER_SHOWTIME', '100')
    os.environ.setdefault('SEAT_RESERVATION_MAX_ATTEMPTS', '5')

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)


_early_setup_test_environment()

from collections.abc import Generator  # noqa: E402
from typing import Any  # noqa: E402

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402

from src.platform.config.di import cleanup  # noqa: E402


@pytest.fixture(autouse=True)
def reset_container_singletons() -> Generator[None, None, None]:
    """Fresh in-memory store (and database handle) for every test"""
    cleanup()
    yield
    cleanup()


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    from test.test_main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def movie_payload() -> dict[str, Any]:
    return {
        'title': 'Inception',
        'genre': 'Sci-Fi',
        'duration': 148,
        'rating': 8.8,
        'releaseYear': 2010,
    }


@pytest.fixture
def create_movie(client: TestClient, movie_payload: dict[str, Any]) -> dict[str, Any]:
    response = client.post('/movies', json=movie_payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def showtime_payload(create_movie: dict[str, Any]) -> dict[str, Any]:
    return {
        'movieId': create_movie['id'],
        'theater': 'Cinema 1',
        'startTime': '2025-04-01T18:00:00Z',
        'endTime': '2025-04-01T20:00:00Z',
        'price': 45.5,
    }


@pytest.fixture
def create_showtime(client: TestClient, showtime_payload: dict[str, Any]) -> dict[str, Any]:
    response = client.post('/showtimes', json=showtime_payload)
    assert response.status_code == 201, response.text
    return response.json()
