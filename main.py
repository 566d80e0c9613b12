"""CLI entry point for the SKU generator."""

from __future__ import annotations

import functools
import json
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from config import settings
from exceptions import AppError
from services.sku_generator import GenerationConfig, SkuResult

logger = logging.getLogger(__name__)


def handle_errors(f):
    """Decorator that turns application errors into a message and exit code."""

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except AppError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(exc.exit_code)
        except FileNotFoundError as exc:
            print(f"Error: file not found: {exc.filename}", file=sys.stderr)
            sys.exit(1)
        except json.JSONDecodeError as exc:
            print(f"Error: invalid JSON: {exc}", file=sys.stderr)
            sys.exit(1)
        except ValidationError as exc:
            print(f"Error: invalid catalog: {exc}", file=sys.stderr)
            sys.exit(1)
        except (SystemExit, KeyboardInterrupt):
            raise
        except Exception:
            logger.exception("Unexpected error in %s", f.__name__)
            print("Error: internal error", file=sys.stderr)
            sys.exit(1)

    return wrapper


def _load_options(path: Path) -> dict[str, str]:
    """Load an options file, upgrade it, and write it back if it changed."""
    from services.sku_options import install

    options = json.loads(path.read_text()) if path.exists() else {}
    before = dict(options)
    applied = install(options)
    if options != before:
        path.write_text(json.dumps(options, indent=2, sort_keys=True) + "\n")
    for version in applied:
        print(f"Applied options migration {version}")
    return options


def _generation_config(ctx: click.Context) -> GenerationConfig:
    options_path = ctx.obj.get("options_path") if ctx.obj else None
    if options_path:
        from services.sku_options import config_from_options

        return config_from_options(_load_options(Path(options_path)))
    return settings.generation_config()


def _print_result(product_id: object, result: SkuResult) -> None:
    print(f"Product {product_id}: {result.product_sku!r}")
    for variant_id, sku in result.variant_skus.items():
        print(f"  variant {variant_id}: {sku!r}")


_catalog_option = click.option(
    "--catalog",
    "catalog_path",
    default=lambda: settings.catalog_path,
    show_default="CATALOG_PATH",
    help="Catalog JSON file.",
)


@click.group()
@click.option(
    "--options",
    "options_path",
    default=lambda: settings.options_path or None,
    help="Read settings from a host options JSON file instead of the environment.",
)
@click.pass_context
def cli(ctx: click.Context, options_path: str | None) -> None:
    """Deterministic product and variant SKU generator."""
    ctx.ensure_object(dict)
    ctx.obj["options_path"] = options_path


@cli.command()
@click.pass_context
@handle_errors
def show_config(ctx: click.Context) -> None:
    """Print the effective SKU generation settings."""
    config = _generation_config(ctx)
    print(f"Simple SKUs:       {config.simple_mode.value}")
    print(f"Variant SKUs:      {config.variant_mode.value}")
    print(f"Attribute spaces:  {config.attribute_space_handling.value}")
    print(f"Separator:         {config.separator!r}")
    print(f"Force attr. sort:  {'yes' if config.force_attribute_sort else 'no'}")


@cli.command()
@click.argument("product_id")
@_catalog_option
@click.pass_context
@handle_errors
def preview(ctx: click.Context, product_id: str, catalog_path: str) -> None:
    """Show the SKUs a product would get, without saving them."""
    from services.catalog import InMemoryCatalog
    from services.sku_generator import generate_skus

    config = _generation_config(ctx)
    catalog = InMemoryCatalog.load(catalog_path)
    pid = catalog.find_product_id(product_id)
    result = generate_skus(catalog.load_product(pid), config)
    _print_result(pid, result)


@cli.command()
@click.argument("product_id")
@_catalog_option
@click.pass_context
@handle_errors
def generate(ctx: click.Context, product_id: str, catalog_path: str) -> None:
    """Generate and save the SKUs of one product."""
    from services.catalog import InMemoryCatalog
    from services.sku_service import maybe_save_sku

    config = _generation_config(ctx)
    catalog = InMemoryCatalog.load(catalog_path)
    pid = catalog.find_product_id(product_id)
    result = maybe_save_sku(pid, catalog, catalog, config)
    catalog.save(catalog_path)
    _print_result(pid, result)


@cli.command()
@_catalog_option
@click.pass_context
@handle_errors
def generate_all(ctx: click.Context, catalog_path: str) -> None:
    """Regenerate and save SKUs for every product in the catalog."""
    from services.catalog import InMemoryCatalog
    from services.sku_service import regenerate_all

    config = _generation_config(ctx)
    catalog = InMemoryCatalog.load(catalog_path)
    results = regenerate_all(catalog, catalog, config)
    catalog.save(catalog_path)
    for pid, result in results.items():
        _print_result(pid, result)
    print(f"\nRegenerated SKUs for {len(results)} product(s)")


@cli.command()
@click.argument("options_file", type=click.Path(dir_okay=False))
@handle_errors
def migrate_options(options_file: str) -> None:
    """Upgrade a host options file and install missing defaults."""
    options = _load_options(Path(options_file))
    for key in sorted(options):
        print(f"  {key} = {options[key]!r}")


if __name__ == "__main__":
    cli()
