"""
Shared fixtures: a fresh app per test on an in-memory mongomock database,
with the Cloudinary uploader replaced by a recorder.
"""

import cloudinary.uploader
import mongomock
import pytest

from instaclone import create_app
from instaclone.db import get_db


@pytest.fixture
def uploads(monkeypatch):
    """Every call made to the image host, as ``(path, options)``."""
    calls = []

    def fake_upload(path, **options):
        calls.append((path, options))
        return {"secure_url": f"https://res.cloudinary.com/demo/image/upload/v1/img{len(calls)}.png"}

    monkeypatch.setattr(cloudinary.uploader, "upload", fake_upload)
    return calls


@pytest.fixture
def app(tmp_path, uploads):
    return create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test-session-secret",
            "RESET_SECRET_KEY": "test-reset-secret",
            "DB_NAME": "insta_test",
            "UPLOAD_FOLDER": str(tmp_path / "uploads"),
            "COOKIE_SECURE": False,
            "SOCKET_CORS_ORIGINS": "*",
        },
        mongo_client=mongomock.MongoClient(),
    )


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    with app.app_context():
        yield get_db()
