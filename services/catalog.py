"""Product data source and SKU persistence sink.

``ProductSource`` and ``SkuSink`` are the narrow interfaces the SKU
service talks to.  ``InMemoryCatalog`` implements both over plain
records and can be loaded from / saved to a JSON file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel

from exceptions import ProductNotFoundError
from services.sku_generator import Product, Variant

logger = logging.getLogger(__name__)


class ProductSource(Protocol):
    def list_product_ids(self) -> list[int | str]: ...

    def load_product(self, product_id: int | str) -> Product: ...


class SkuSink(Protocol):
    def save_product_sku(self, product_id: int | str, sku: str) -> None: ...

    def save_variant_sku(self, variant_id: int | str, sku: str) -> None: ...


# ---------------------------------------------------------------------------
# Stored records
# ---------------------------------------------------------------------------


class ProductRecord(BaseModel):
    id: int | str
    slug: str = ""
    sku: str = ""
    type: str = "simple"


class VariantRecord(BaseModel):
    id: int | str
    parent_id: int | str
    attributes: dict[str, str | None] = {}
    status: str = "publish"
    menu_order: int = 0
    sku: str = ""


def _sort_key(record: VariantRecord) -> tuple[int, str]:
    return (record.menu_order, str(record.id))


# ---------------------------------------------------------------------------
# In-memory catalog
# ---------------------------------------------------------------------------


class InMemoryCatalog:
    """Dict-backed catalog implementing ``ProductSource`` and ``SkuSink``."""

    def __init__(
        self,
        products: list[ProductRecord] | None = None,
        variants: list[VariantRecord] | None = None,
    ) -> None:
        self.products: dict[int | str, ProductRecord] = {p.id: p for p in products or []}
        self.variants: dict[int | str, VariantRecord] = {v.id: v for v in variants or []}

    # -- ProductSource -----------------------------------------------------

    def list_product_ids(self) -> list[int | str]:
        return list(self.products)

    def find_product_id(self, raw: str) -> int | str:
        """Match a command-line product id against stored int or str ids."""
        if raw in self.products:
            return raw
        if raw.removeprefix("-").isdecimal() and int(raw) in self.products:
            return int(raw)
        msg = f"Product {raw!r} not found"
        raise ProductNotFoundError(msg)

    def variants_of(self, parent_id: int | str) -> list[VariantRecord]:
        """Return every variant of *parent_id*, whatever its status.

        Filtering to published variants would silently skip out-of-stock
        or private variations when SKUs are regenerated.
        """
        return sorted(
            (v for v in self.variants.values() if v.parent_id == parent_id),
            key=_sort_key,
        )

    def load_product(self, product_id: int | str) -> Product:
        """Return a snapshot of *product_id*.

        Raises ProductNotFoundError if the product does not exist.
        """
        record = self.products.get(product_id)
        if record is None:
            msg = f"Product {product_id!r} not found"
            raise ProductNotFoundError(msg)

        variants = None
        if record.type == "variable":
            variants = [
                Variant(id=v.id, attributes=v.attributes) for v in self.variants_of(record.id)
            ]
        return Product(
            id=record.id,
            slug=record.slug,
            existing_sku=record.sku,
            type=record.type,
            variants=variants,
        )

    # -- SkuSink -----------------------------------------------------------

    def save_product_sku(self, product_id: int | str, sku: str) -> None:
        record = self.products.get(product_id)
        if record is None:
            msg = f"Product {product_id!r} not found"
            raise ProductNotFoundError(msg)
        self.products[product_id] = record.model_copy(update={"sku": sku})

    def save_variant_sku(self, variant_id: int | str, sku: str) -> None:
        record = self.variants.get(variant_id)
        if record is None:
            msg = f"Variant {variant_id!r} not found"
            raise ProductNotFoundError(msg)
        self.variants[variant_id] = record.model_copy(update={"sku": sku})

    # -- JSON persistence --------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InMemoryCatalog:
        return cls(
            products=[ProductRecord.model_validate(p) for p in data.get("products", [])],
            variants=[VariantRecord.model_validate(v) for v in data.get("variants", [])],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "products": [p.model_dump() for p in self.products.values()],
            "variants": [v.model_dump() for v in self.variants.values()],
        }

    @classmethod
    def load(cls, path: str | Path) -> InMemoryCatalog:
        """Load a catalog from a JSON file."""
        data = json.loads(Path(path).read_text())
        return cls.from_dict(data)

    def save(self, path: str | Path) -> None:
        """Write the catalog back to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2) + "\n")
        logger.info("Catalog saved to %s", path)
