from __future__ import annotations

import os
from typing import Any

import pytest
from fastapi.testclient import TestClient


def pytest_configure() -> None:
    # Settings are cached on first import; pin them before the app is loaded.
    os.environ["ENVIRONMENT"] = "test"
    os.environ["JWT_SECRET_KEY"] = "test-secret"
    os.environ["MONGODB_DB"] = "job_portal_test"
    os.environ["ENFORCE_COMPANY_OWNERSHIP"] = "false"
    os.environ["DEBUG"] = "false"
    os.environ["LOG_LEVEL"] = "WARNING"


class FakeMediaStore:
    """Stands in for Cloudinary: records uploads and hands back predictable URLs."""

    def __init__(self) -> None:
        self.uploads: list[Any] = []
        self.fail_with: str | None = None

    def upload(self, data_uri) -> str:
        from app.core.exceptions import MediaUploadFailed

        if self.fail_with:
            raise MediaUploadFailed(self.fail_with)
        self.uploads.append(data_uri)
        return f"https://media.test/{len(self.uploads)}"


@pytest.fixture()
def db() -> Any:
    import mongomock

    from app.db import mongodb

    mongodb.set_mongo_client(mongomock.MongoClient())
    yield mongodb.get_mongo_db()
    mongodb.set_mongo_client(None)


@pytest.fixture()
def media() -> FakeMediaStore:
    return FakeMediaStore()


@pytest.fixture()
def client(db: Any, media: FakeMediaStore) -> Any:
    from app.main import app
    from app.services.media_service import get_media_store

    app.dependency_overrides[get_media_store] = lambda: media
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(client: Any):
    """Register an account through the API and return its credentials."""
    counter = {"n": 0}

    def _make(role: str = "recruiter", **overrides: str) -> dict[str, str]:
        counter["n"] += 1
        form = {
            "fullname": f"{role.title()} {counter['n']}",
            "email": f"{role}{counter['n']}@example.com",
            "phoneNumber": f"98765432{counter['n']:02d}",
            "password": "SecretPass123",
            "role": role,
        }
        form.update(overrides)
        resp = client.post("/api/v1/user/register", data=form)
        assert resp.status_code == 201, resp.text
        return {**form, "_id": resp.json()["user"]["_id"]}

    return _make


@pytest.fixture()
def login(client: Any):
    """Log a registered user in; the session cookie lands in the client's jar."""

    def _login(user: dict[str, str]) -> Any:
        resp = client.post(
            "/api/v1/user/login",
            json={"email": user["email"], "password": user["password"], "role": user["role"]},
        )
        assert resp.status_code == 200, resp.text
        return resp

    return _login


@pytest.fixture()
def recruiter(make_user, login) -> dict[str, str]:
    user = make_user("recruiter")
    login(user)
    return user


@pytest.fixture()
def company(client: Any, recruiter: dict[str, str]) -> dict[str, Any]:
    resp = client.post("/api/v1/company/register", json={"companyName": "Acme Corp"})
    assert resp.status_code == 201, resp.text
    return resp.json()["company"]


@pytest.fixture()
def job_payload(company: dict[str, Any]) -> dict[str, Any]:
    return {
        "title": "Backend Engineer",
        "description": "Build and run our APIs",
        "requirements": "Python,MongoDB,Docker",
        "salary": "120000",
        "location": "Remote",
        "jobType": "Full-time",
        "experience": "2",
        "position": 3,
        "companyId": company["_id"],
    }
