"""Tests for services.sku_service."""

from __future__ import annotations

from unittest.mock import MagicMock, call

import pytest

from exceptions import ConfigurationError, DataError, ProductNotFoundError
from services.catalog import InMemoryCatalog
from services.sku_generator import GenerationConfig, Product, SkuHooks, SkuResult
from services.sku_service import maybe_save_sku, persist_skus, regenerate_all

# =========================================================================
# persist_skus
# =========================================================================


class TestPersistSkus:
    def _result(self) -> SkuResult:
        return SkuResult(product_sku="cap", variant_skus={5: "cap-Red", 6: "cap-Blue"})

    def test_writes_everything_by_default(self) -> None:
        sink = MagicMock()
        written = persist_skus(1, self._result(), sink, GenerationConfig())
        assert written == 3
        sink.save_product_sku.assert_called_once_with(1, "cap")
        sink.save_variant_sku.assert_has_calls([call(5, "cap-Red"), call(6, "cap-Blue")])

    def test_simple_mode_none_skips_product_sku(self) -> None:
        sink = MagicMock()
        persist_skus(1, self._result(), sink, GenerationConfig(simple_mode="none"))
        sink.save_product_sku.assert_not_called()
        assert sink.save_variant_sku.call_count == 2

    def test_variant_mode_none_skips_variant_skus(self) -> None:
        sink = MagicMock()
        persist_skus(1, self._result(), sink, GenerationConfig(variant_mode="none"))
        sink.save_variant_sku.assert_not_called()
        sink.save_product_sku.assert_called_once_with(1, "cap")


# =========================================================================
# maybe_save_sku
# =========================================================================


class TestMaybeSaveSku:
    def test_simple_product(self, catalog: InMemoryCatalog) -> None:
        result = maybe_save_sku(1, catalog, catalog, GenerationConfig())
        assert result.product_sku == "blue mug"
        assert result.variant_skus == {}
        assert catalog.products[1].sku == "blue mug"

    def test_variable_product_saves_all_variants(self, catalog: InMemoryCatalog) -> None:
        cfg = GenerationConfig(force_attribute_sort=True)
        result = maybe_save_sku(2, catalog, catalog, cfg)
        assert result.variant_skus == {22: "hoodie-Black-S", 21: "hoodie-Black-L"}
        assert catalog.products[2].sku == "hoodie"
        assert catalog.variants[21].sku == "hoodie-Black-L"
        # private variants are regenerated too
        assert catalog.variants[22].sku == "hoodie-Black-S"

    def test_simple_mode_none_keeps_stored_sku(self, catalog: InMemoryCatalog) -> None:
        result = maybe_save_sku(1, catalog, catalog, GenerationConfig(simple_mode="none"))
        assert result.product_sku == "MUG-OLD"
        assert catalog.products[1].sku == "MUG-OLD"

    def test_variant_mode_none_leaves_variants(self, catalog: InMemoryCatalog) -> None:
        maybe_save_sku(2, catalog, catalog, GenerationConfig(variant_mode="none"))
        assert catalog.variants[21].sku == ""
        assert catalog.products[2].sku == "hoodie"

    def test_hooks_passed_through(self, catalog: InMemoryCatalog) -> None:
        hooks = SkuHooks(variant_sku=lambda composed, parent, fragment: composed.upper())
        maybe_save_sku(2, catalog, catalog, GenerationConfig(variant_mode="id"), hooks)
        assert catalog.variants[21].sku == "HOODIE-21"

    def test_missing_product(self, catalog: InMemoryCatalog) -> None:
        with pytest.raises(ProductNotFoundError):
            maybe_save_sku(404, catalog, catalog, GenerationConfig())

    def test_data_error_writes_nothing(self) -> None:
        source = MagicMock()
        source.load_product.return_value = Product(id=1, slug="cap", type="variable")
        sink = MagicMock()
        with pytest.raises(DataError):
            maybe_save_sku(1, source, sink, GenerationConfig())
        sink.save_product_sku.assert_not_called()
        sink.save_variant_sku.assert_not_called()

    def test_invalid_config_writes_nothing(self, catalog: InMemoryCatalog) -> None:
        cfg = GenerationConfig.model_construct(
            simple_mode="slug",
            variant_mode="sometimes",
            attribute_space_handling="keep",
            separator="-",
            force_attribute_sort=False,
        )
        with pytest.raises(ConfigurationError):
            maybe_save_sku(1, catalog, catalog, cfg)
        assert catalog.products[1].sku == "MUG-OLD"


# =========================================================================
# regenerate_all
# =========================================================================


class TestRegenerateAll:
    def test_every_product(self, catalog: InMemoryCatalog) -> None:
        results = regenerate_all(catalog, catalog, GenerationConfig(simple_mode="id"))
        assert set(results) == {1, 2}
        assert catalog.products[1].sku == "1"
        assert catalog.variants[22].sku == "2-S-Black"
