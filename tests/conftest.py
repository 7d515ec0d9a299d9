"""Shared pytest fixtures for the Freshmarket test suite."""

from __future__ import annotations

from typing import Callable, Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from freshmarket.config import get_settings
from freshmarket.db.catalog import create_catalog_item
from freshmarket.db.repository import reset_repository_state
from freshmarket.db.users import approve_vendor, create_user
from freshmarket.models.catalog import CatalogItem
from freshmarket.models.users import User
from freshmarket.server import deps
from freshmarket.server.app import create_app


class RecordingWorker:
    """Stand-in for the notification worker that only records submissions."""

    def __init__(self) -> None:
        self.submitted = []

    def submit(self, order) -> None:
        self.submitted.append(order)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Ensure each test uses an isolated SQLite database location."""

    db_path = tmp_path / "test_freshmarket.db"
    monkeypatch.setenv("FRESHMARKET_DATABASE_PATH", str(db_path))
    monkeypatch.setenv("FRESHMARKET_UPLOAD_DIR", str(tmp_path / "uploads"))
    get_settings.cache_clear()
    reset_repository_state()
    yield
    reset_repository_state()
    monkeypatch.delenv("FRESHMARKET_DATABASE_PATH", raising=False)
    monkeypatch.delenv("FRESHMARKET_UPLOAD_DIR", raising=False)
    get_settings.cache_clear()


@pytest.fixture()
def notification_worker() -> RecordingWorker:
    return RecordingWorker()


@pytest.fixture()
def app(notification_worker) -> Generator[FastAPI, None, None]:
    """Create a new FastAPI app instance for each test and reset overrides."""

    application = create_app()
    application.dependency_overrides[deps.get_notification_worker] = lambda: notification_worker
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> TestClient:
    """Return a test client bound to the FastAPI app."""

    return TestClient(app)


@pytest.fixture()
def make_vendor() -> Callable[..., User]:
    """Create vendor accounts, approved unless told otherwise."""

    counter = {"n": 0}

    def _make(
        *,
        approved: bool = True,
        phone_number: str | None = "+96550001234",
        notification_preference: str = "sms",
    ) -> User:
        counter["n"] += 1
        vendor = create_user(
            email=f"vendor{counter['n']}@example.com",
            role="vendor",
            phone_number=phone_number,
            notification_preference=notification_preference,
        )
        return approve_vendor(vendor.id) if approved else vendor

    return _make


@pytest.fixture()
def vendor(make_vendor) -> User:
    return make_vendor()


@pytest.fixture()
def buyer() -> User:
    return create_user(email="buyer@example.com", role="buyer")


@pytest.fixture()
def admin() -> User:
    return create_user(email="admin@example.com", role="admin")


@pytest.fixture()
def apple() -> CatalogItem:
    return create_catalog_item(name="Apple", category="fruit")


@pytest.fixture()
def cucumber() -> CatalogItem:
    return create_catalog_item(name="Cucumber", category="vegetable")
