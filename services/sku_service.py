"""Generate SKUs for stored products and write them back.

Ties the pure generator to a product source and a persistence sink.
The product SKU is only written when simple generation is enabled and
variant SKUs only when variant generation is enabled; the full result
is returned either way.
"""

from __future__ import annotations

import logging

from services.catalog import ProductSource, SkuSink
from services.sku_generator import (
    GenerationConfig,
    SimpleMode,
    SkuHooks,
    SkuResult,
    VariantMode,
    generate_skus,
)

logger = logging.getLogger(__name__)


def persist_skus(
    product_id: int | str,
    result: SkuResult,
    sink: SkuSink,
    config: GenerationConfig,
) -> int:
    """Write the parts of *result* that *config* says we own.

    Returns the number of SKUs written.
    """
    written = 0
    if config.variant_mode != VariantMode.NONE:
        for variant_id, sku in result.variant_skus.items():
            sink.save_variant_sku(variant_id, sku)
            written += 1

    if config.simple_mode != SimpleMode.NONE:
        sink.save_product_sku(product_id, result.product_sku)
        written += 1

    return written


def maybe_save_sku(
    product_id: int | str,
    source: ProductSource,
    sink: SkuSink,
    config: GenerationConfig,
    hooks: SkuHooks | None = None,
) -> SkuResult:
    """Regenerate and store the SKUs of one product.

    Errors from the generator (ConfigurationError, DataError) and from
    the source (ProductNotFoundError) propagate before anything is written.
    """
    product = source.load_product(product_id)
    result = generate_skus(product, config, hooks)
    written = persist_skus(product.id, result, sink, config)
    logger.info("Saved %d SKU(s) for product %s", written, product.id)
    return result


def regenerate_all(
    source: ProductSource,
    sink: SkuSink,
    config: GenerationConfig,
    hooks: SkuHooks | None = None,
) -> dict[int | str, SkuResult]:
    """Run ``maybe_save_sku`` for every product the source knows about."""
    results: dict[int | str, SkuResult] = {}
    for product_id in source.list_product_ids():
        results[product_id] = maybe_save_sku(product_id, source, sink, config, hooks)
    return results
