from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path
from urllib.parse import urlsplit

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from studyposts.client import CoursesClient  # noqa: E402
from studyposts.server import app  # noqa: E402

BASE_URL = "http://studyposts.test"


class FlaskResponse:
    """The slice of ``requests.Response`` that CoursesClient reads."""

    def __init__(self, response) -> None:
        self._response = response
        self.status_code = response.status_code
        self.ok = response.status_code < 400
        self.reason = response.status.split(" ", 1)[1] if " " in response.status else ""

    def json(self):
        data = self._response.get_json(silent=True)
        if data is None:
            raise ValueError("response body is not JSON")
        return data


class FlaskSession:
    """Route ``session.request`` calls into a Flask test client."""

    def __init__(self, test_client) -> None:
        self.test_client = test_client
        self.calls: list[tuple[str, str]] = []

    def request(self, method, url, json=None, timeout=None):
        path = urlsplit(url).path
        self.calls.append((method, path))
        if json is None:
            response = self.test_client.open(path, method=method)
        else:
            response = self.test_client.open(path, method=method, json=json)
        return FlaskResponse(response)


@pytest.fixture
def db_file(tmp_path: Path) -> str:
    return str(tmp_path / "db.json")


@pytest.fixture
def http(db_file: str) -> Iterator:
    previous = app.config["DB_FILE"]
    app.config.update(TESTING=True, DB_FILE=db_file)
    try:
        yield app.test_client()
    finally:
        app.config["DB_FILE"] = previous


@pytest.fixture
def session(http) -> FlaskSession:
    return FlaskSession(http)


@pytest.fixture
def api(session: FlaskSession) -> CoursesClient:
    return CoursesClient(base_url=BASE_URL, session=session, timeout=1)
