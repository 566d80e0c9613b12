"""Application configuration loaded from environment variables."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, model_validator

from services.sku_generator import GenerationConfig, SimpleMode, SpaceHandling, VariantMode

load_dotenv()

_PROJECT_ROOT = Path(__file__).resolve().parent

logger = logging.getLogger(__name__)


def _enum_or_default(name: str, raw: str, allowed: type, default: str) -> str:
    """Return *raw* if it is a recognised value, else log and fall back."""
    value = raw.strip().lower()
    if value in {m.value for m in allowed}:
        return value
    logger.warning("%s=%r is not recognised — using %r", name, raw, default)
    return default


class Config(BaseModel):
    """Centralised app configuration backed by env vars."""

    # SKU generation
    sku_simple_mode: str = SimpleMode.SLUG.value
    sku_variant_mode: str = VariantMode.ATTRIBUTES.value
    sku_attribute_spaces: str = SpaceHandling.KEEP.value
    sku_separator: str = "-"
    sku_force_attribute_sort: bool = False

    # App paths
    catalog_path: str = str(_PROJECT_ROOT / "data" / "catalog.json")
    options_path: str = ""

    @model_validator(mode="after")
    def _warn_suspicious_fields(self) -> Config:
        """Log warnings for settings that produce odd-looking SKUs."""
        if not self.sku_separator:
            logger.warning("SKU_SEPARATOR is empty — variant SKUs will run together")
        elif self.sku_separator.strip() != self.sku_separator:
            logger.warning("SKU_SEPARATOR contains whitespace: %r", self.sku_separator)
        return self

    @classmethod
    def from_env(cls) -> Config:
        """Build config from environment variables."""
        return cls(
            sku_simple_mode=_enum_or_default(
                "SKU_SIMPLE_MODE", os.getenv("SKU_SIMPLE_MODE", "slug"), SimpleMode, "slug"
            ),
            sku_variant_mode=_enum_or_default(
                "SKU_VARIANT_MODE",
                os.getenv("SKU_VARIANT_MODE", "attributes"),
                VariantMode,
                "attributes",
            ),
            sku_attribute_spaces=_enum_or_default(
                "SKU_ATTRIBUTE_SPACES",
                os.getenv("SKU_ATTRIBUTE_SPACES", "keep"),
                SpaceHandling,
                "keep",
            ),
            sku_separator=os.getenv("SKU_SEPARATOR", "-"),
            sku_force_attribute_sort=os.getenv("SKU_FORCE_ATTRIBUTE_SORT", "false").lower()
            in ("1", "true", "yes"),
            catalog_path=os.getenv("CATALOG_PATH", str(_PROJECT_ROOT / "data" / "catalog.json")),
            options_path=os.getenv("OPTIONS_PATH", ""),
        )

    def generation_config(self) -> GenerationConfig:
        """Return the validated engine configuration for these settings."""
        return GenerationConfig(
            simple_mode=self.sku_simple_mode,
            variant_mode=self.sku_variant_mode,
            attribute_space_handling=self.sku_attribute_spaces,
            separator=self.sku_separator,
            force_attribute_sort=self.sku_force_attribute_sort,
        )


settings = Config.from_env()
