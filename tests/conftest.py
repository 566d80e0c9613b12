"""Shared test fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from services.catalog import InMemoryCatalog
from services.sku_generator import GenerationConfig, Product, Variant


@pytest.fixture
def config() -> GenerationConfig:
    """Default settings: slug parent SKUs, attribute variant fragments."""
    return GenerationConfig()


@pytest.fixture
def shirt() -> Product:
    """A variable product with two variants."""
    return Product(
        id=10,
        slug="shirt",
        existing_sku="OLD-SHIRT",
        type="variable",
        variants=[
            Variant(id=11, attributes={"color": "Deep Blue", "size": "M"}),
            Variant(id=12, attributes={"color": "Red", "size": "L"}),
        ],
    )


@pytest.fixture
def catalog_data() -> dict[str, Any]:
    """Raw catalog records as they would appear in a catalog JSON file."""
    return {
        "products": [
            {"id": 1, "slug": "blue%20mug", "sku": "MUG-OLD", "type": "simple"},
            {"id": 2, "slug": "hoodie", "sku": "", "type": "variable"},
        ],
        "variants": [
            {
                "id": 21,
                "parent_id": 2,
                "attributes": {"size": "L", "color": "Black"},
                "status": "publish",
                "menu_order": 2,
            },
            {
                "id": 22,
                "parent_id": 2,
                "attributes": {"size": "S", "color": "Black"},
                "status": "private",
                "menu_order": 1,
            },
        ],
    }


@pytest.fixture
def catalog(catalog_data: dict[str, Any]) -> InMemoryCatalog:
    """In-memory catalog with one simple and one variable product."""
    return InMemoryCatalog.from_dict(catalog_data)
