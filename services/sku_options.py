"""Host options store adapter for SKU generation settings.

The host keeps settings as flat string options.  This module upgrades
old option layouts, installs defaults, and turns the stored values into
a validated ``GenerationConfig``.  Stored values use the host's own
vocabulary (``never``/``slugs``/``ids``); the engine's enum values are
accepted as well.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, MutableMapping

from services.sku_generator import GenerationConfig, SimpleMode, SpaceHandling, VariantMode

logger = logging.getLogger(__name__)

CURRENT_VERSION = "2.0.0"

# Stores created before version tracking existed are treated as this release.
_UNVERSIONED = "1.2.2"

OPT_SIMPLE = "sku_generator_simple"
OPT_VARIATION = "sku_generator_variation"
OPT_ATTRIBUTE_SPACES = "sku_generator_attribute_spaces"
OPT_SEPARATOR = "sku_generator_separator"
OPT_FORCE_SORT = "sku_generator_force_sort"
OPT_VERSION = "sku_generator_version"
OPT_LEGACY_SELECT = "sku_generator_select"

OPTION_DEFAULTS: dict[str, str] = {
    OPT_SIMPLE: "slugs",
    OPT_VARIATION: "slugs",
    OPT_ATTRIBUTE_SPACES: "keep",
    OPT_SEPARATOR: "-",
    OPT_FORCE_SORT: "no",
}

_SIMPLE_VALUES = {
    "never": SimpleMode.NONE,
    "slugs": SimpleMode.SLUG,
    "ids": SimpleMode.ID,
}
_VARIATION_VALUES = {
    "never": VariantMode.NONE,
    "slugs": VariantMode.ATTRIBUTES,
    "ids": VariantMode.ID,
}

Options = MutableMapping[str, str]


# ---------------------------------------------------------------------------
# Migrations
# ---------------------------------------------------------------------------


def _migrate_select_option(options: Options) -> None:
    """Split the single pre-2.0 ``select`` option into simple/variation modes."""
    legacy = options.pop(OPT_LEGACY_SELECT, None)
    if legacy == "all":
        options[OPT_SIMPLE] = "slugs"
        options[OPT_VARIATION] = "slugs"
    elif legacy == "simple":
        options[OPT_SIMPLE] = "slugs"
        options[OPT_VARIATION] = "never"
    elif legacy == "variations":
        options[OPT_SIMPLE] = "never"
        options[OPT_VARIATION] = "slugs"


MIGRATIONS: list[tuple[str, Callable[[Options], None]]] = [
    ("2.0.0", _migrate_select_option),
]


def _version_key(version: str) -> tuple[int, ...]:
    """Parse ``"2.0.0"`` into ``(2, 0, 0)`` for ordering."""
    parts = []
    for part in version.strip().split("."):
        digits = "".join(ch for ch in part if ch.isdigit())
        parts.append(int(digits) if digits else 0)
    return tuple(parts)


def install(options: Options) -> list[str]:
    """Upgrade *options* in place and fill in missing defaults.

    Safe to call on every startup.  Returns the versions of the
    migrations that were applied.  An empty separator is a valid
    setting and is only filled in when the option is missing.
    """
    installed = str(options.get(OPT_VERSION) or _UNVERSIONED)
    applied: list[str] = []

    for version, migrate in MIGRATIONS:
        if _version_key(installed) < _version_key(version):
            migrate(options)
            applied.append(version)
            logger.warning("Upgraded SKU generator options from %s to %s", installed, version)

    if _version_key(installed) < _version_key(CURRENT_VERSION):
        options[OPT_VERSION] = CURRENT_VERSION

    for key, default in OPTION_DEFAULTS.items():
        if key == OPT_SEPARATOR:
            if options.get(key) is None:
                options[key] = default
        elif options.get(key) in (None, ""):
            options[key] = default

    return applied


# ---------------------------------------------------------------------------
# Configuration provider
# ---------------------------------------------------------------------------


def _option_text(options: Options, key: str, default: str) -> str:
    """Return a stored option as lower-case text.

    Files written by hand can hold JSON booleans or numbers; they are
    read as their string form.
    """
    value = options.get(key)
    if value is None or value == "":
        return default
    return str(value).strip().lower()


def _read_mode(options: Options, key: str, legacy: dict, enum_cls: type) -> str:
    raw = _option_text(options, key, OPTION_DEFAULTS[key])
    if raw in legacy:
        return legacy[raw].value
    if raw in {m.value for m in enum_cls}:
        return raw
    default = legacy[OPTION_DEFAULTS[key]].value
    logger.warning("Option %s=%r is not recognised — using %r", key, options.get(key), default)
    return default


def _read_space_handling(options: Options) -> str:
    raw = _option_text(options, OPT_ATTRIBUTE_SPACES, "keep")
    if raw in {m.value for m in SpaceHandling}:
        return raw
    logger.warning(
        "Option %s=%r is not recognised — using 'keep'",
        OPT_ATTRIBUTE_SPACES,
        options.get(OPT_ATTRIBUTE_SPACES),
    )
    return SpaceHandling.KEEP.value


def _read_force_sort(options: Options) -> bool:
    raw = _option_text(options, OPT_FORCE_SORT, "no")
    if raw in ("1", "true", "yes"):
        return True
    if raw not in ("0", "false", "no"):
        logger.warning(
            "Option %s=%r is not recognised — using 'no'", OPT_FORCE_SORT, options.get(OPT_FORCE_SORT)
        )
    return False


def config_from_options(options: Options) -> GenerationConfig:
    """Build a ``GenerationConfig`` from stored options.

    Unrecognised stored values are replaced by defaults here so they
    never reach the engine.  A missing separator falls back to ``-``;
    an explicitly empty one is kept.
    """
    separator = options.get(OPT_SEPARATOR)
    return GenerationConfig(
        simple_mode=_read_mode(options, OPT_SIMPLE, _SIMPLE_VALUES, SimpleMode),
        variant_mode=_read_mode(options, OPT_VARIATION, _VARIATION_VALUES, VariantMode),
        attribute_space_handling=_read_space_handling(options),
        separator="-" if separator is None else str(separator),
        force_attribute_sort=_read_force_sort(options),
    )
