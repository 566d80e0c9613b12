"""Deterministic SKU generation for products and their variants.

The three resolvers here are pure: they take a product snapshot and a
``GenerationConfig`` and return strings.  Reading settings, loading
products and writing the computed SKUs back are left to the caller
(see ``services.sku_service``).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum, StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from exceptions import ConfigurationError, DataError
from utils.sku import compose_variant_sku, decode_slug, join_attribute_values, replace_spaces

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class SimpleMode(StrEnum):
    NONE = "none"
    SLUG = "slug"
    ID = "id"


class VariantMode(StrEnum):
    NONE = "none"
    ATTRIBUTES = "attributes"
    ID = "id"


class SpaceHandling(StrEnum):
    KEEP = "keep"
    UNDERSCORE = "underscore"
    DASH = "dash"
    REMOVE = "remove"


class ProductType(StrEnum):
    SIMPLE = "simple"
    VARIABLE = "variable"
    EXTERNAL = "external"
    OTHER = "other"


def _coerce_enum(enum_cls: type[Enum], value: Any, setting: str) -> Any:
    """Return *value* as a member of *enum_cls* or raise ConfigurationError."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        msg = f"Invalid {setting} {value!r} (expected one of: {allowed})"
        raise ConfigurationError(msg) from None


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class GenerationConfig(BaseModel):
    """Validated SKU formatting options for a single generation run."""

    model_config = ConfigDict(frozen=True)

    simple_mode: SimpleMode = SimpleMode.SLUG
    variant_mode: VariantMode = VariantMode.ATTRIBUTES
    attribute_space_handling: SpaceHandling = SpaceHandling.KEEP
    separator: str = "-"
    force_attribute_sort: bool = False

    # ConfigurationError is not a ValueError, so pydantic lets it propagate
    # instead of wrapping it in a ValidationError.
    @field_validator("simple_mode", mode="before")
    @classmethod
    def _check_simple_mode(cls, value: Any) -> SimpleMode:
        return _coerce_enum(SimpleMode, value, "simple_mode")

    @field_validator("variant_mode", mode="before")
    @classmethod
    def _check_variant_mode(cls, value: Any) -> VariantMode:
        return _coerce_enum(VariantMode, value, "variant_mode")

    @field_validator("attribute_space_handling", mode="before")
    @classmethod
    def _check_space_handling(cls, value: Any) -> SpaceHandling:
        return _coerce_enum(SpaceHandling, value, "attribute_space_handling")


class Variant(BaseModel):
    """One variation of a variable product."""

    model_config = ConfigDict(frozen=True)

    id: int | str
    attributes: dict[str, str | None] = {}


class Product(BaseModel):
    """Read-only product snapshot supplied by the caller."""

    model_config = ConfigDict(frozen=True)

    id: int | str
    slug: str = ""
    existing_sku: str = ""
    type: ProductType = ProductType.SIMPLE
    variants: list[Variant] | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _unknown_type_is_other(cls, value: Any) -> ProductType:
        """Unrecognised product types are handled like simple products."""
        try:
            return ProductType(value)
        except ValueError:
            return ProductType.OTHER

    @property
    def is_variable(self) -> bool:
        return self.type is ProductType.VARIABLE


class SkuResult(BaseModel):
    """Computed SKUs for one product and its variants."""

    model_config = ConfigDict(frozen=True)

    product_sku: str
    variant_skus: dict[int | str, str] = {}


class SkuHooks(BaseModel):
    """Optional overrides, applied in field order.

    ``product_sku(value, product)`` runs after the parent SKU is resolved,
    ``variant_fragment(value, variant)`` after each fragment is resolved,
    and ``variant_sku(composed, product_sku, fragment)`` after composition.
    """

    model_config = ConfigDict(frozen=True)

    product_sku: Callable[[str, Product], str] | None = None
    variant_fragment: Callable[[str, Variant], str] | None = None
    variant_sku: Callable[[str, str, str], str] | None = None


_NO_HOOKS = SkuHooks()


def _validate_config(config: GenerationConfig) -> None:
    """Re-check enum settings on configs built without validation."""
    _coerce_enum(SimpleMode, config.simple_mode, "simple_mode")
    _coerce_enum(VariantMode, config.variant_mode, "variant_mode")
    _coerce_enum(SpaceHandling, config.attribute_space_handling, "attribute_space_handling")


# ---------------------------------------------------------------------------
# Resolvers
# ---------------------------------------------------------------------------


def resolve_product_sku(
    product: Product,
    config: GenerationConfig,
    hooks: SkuHooks | None = None,
) -> str:
    """Return the SKU for a simple product or the parent of a variable one."""
    hooks = hooks or _NO_HOOKS
    mode = _coerce_enum(SimpleMode, config.simple_mode, "simple_mode")

    if mode is SimpleMode.SLUG:
        sku = decode_slug(product.slug)
    elif mode is SimpleMode.ID:
        sku = str(product.id)
    else:
        sku = product.existing_sku

    if hooks.product_sku is not None:
        sku = hooks.product_sku(sku, product)
    return sku


def resolve_variant_fragment(
    variant: Variant,
    config: GenerationConfig,
    hooks: SkuHooks | None = None,
) -> str:
    """Return the variant-specific part of a variant SKU.

    Raises ConfigurationError when variant generation is switched off,
    since no fragment is defined in that mode.
    """
    hooks = hooks or _NO_HOOKS
    mode = _coerce_enum(VariantMode, config.variant_mode, "variant_mode")

    if mode is VariantMode.NONE:
        msg = "Variant fragments are not generated when variant_mode is 'none'"
        raise ConfigurationError(msg)

    if mode is VariantMode.ID:
        fragment = str(variant.id)
    else:
        handling = _coerce_enum(
            SpaceHandling, config.attribute_space_handling, "attribute_space_handling"
        )
        items = [
            (name, replace_spaces(value or "", handling))
            for name, value in variant.attributes.items()
        ]
        if config.force_attribute_sort:
            items.sort(key=lambda item: item[0])
        fragment = join_attribute_values((value for _, value in items), config.separator)

    if hooks.variant_fragment is not None:
        fragment = hooks.variant_fragment(fragment, variant)
    return fragment


def generate_skus(
    product: Product,
    config: GenerationConfig,
    hooks: SkuHooks | None = None,
) -> SkuResult:
    """Compute the product SKU and every variant SKU for *product*.

    Nothing is persisted; the caller decides what to write based on the
    configured modes.  Variants are processed in the order supplied and a
    repeated variant id overwrites the earlier entry.

    Raises ConfigurationError for invalid settings and DataError when a
    variable product arrives without its variants.
    """
    hooks = hooks or _NO_HOOKS
    _validate_config(config)

    wants_variants = product.is_variable and config.variant_mode != VariantMode.NONE
    if wants_variants and product.variants is None:
        msg = f"Variable product {product.id!r} has no variants collection"
        raise DataError(msg)

    product_sku = resolve_product_sku(product, config, hooks)
    variant_skus: dict[int | str, str] = {}

    if wants_variants:
        for variant in product.variants or []:
            fragment = resolve_variant_fragment(variant, config, hooks)
            composed = compose_variant_sku(product_sku, config.separator, fragment)
            if hooks.variant_sku is not None:
                composed = hooks.variant_sku(composed, product_sku, fragment)
            logger.debug("Variant %s of product %s -> %s", variant.id, product.id, composed)
            variant_skus[variant.id] = composed

    return SkuResult(product_sku=product_sku, variant_skus=variant_skus)
