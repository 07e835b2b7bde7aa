from __future__ import annotations

from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

from apex_inventory.app import create_app
from apex_inventory.config import Settings
from apex_inventory.inventory import InventoryManager, ItemFields
from apex_inventory.storage import SnapshotStore


def make_fields(
    name: str = "Cap",
    sku: str = "NEW-1",
    category: str = "Apparel",
    price: float = 9.99,
    quantity: int = 5,
    image_url: str | None = None,
) -> ItemFields:
    return ItemFields(
        name=name,
        sku=sku,
        category=category,
        price=price,
        quantity=quantity,
        image_url=image_url,
    )


@pytest.fixture()
def storage_path(tmp_path: Path) -> Path:
    return tmp_path / "inventory.json"


@pytest.fixture()
def manager(storage_path: Path) -> InventoryManager:
    inventory = InventoryManager(store=SnapshotStore(storage_path))
    inventory.initialize()
    return inventory


@pytest.fixture()
def app(storage_path: Path) -> Flask:
    settings = Settings(storage_path=storage_path, environment="test")
    flask_app = create_app(settings=settings)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()
