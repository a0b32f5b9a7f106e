"""CLI entry point for wp-api-docs."""

import functools
import logging
from contextlib import contextmanager
from pathlib import Path

import click

from wp_api_docs.collection.assembler import CollectionAssembler, Selection
from wp_api_docs.collection.base import Collection
from wp_api_docs.collection.postman import dump_collection, load_collection
from wp_api_docs.collection.registered import RouteDiscoverer
from wp_api_docs.config import GeneratorConfig, load_config
from wp_api_docs.detect import detect_format
from wp_api_docs.errors import DocgenError
from wp_api_docs.export import dump_json, dump_yaml
from wp_api_docs.host import load_snapshot
from wp_api_docs.openapi.converter import OpenApiConverter

COLLECTION_FILENAME = "postman_collection.json"
OPENAPI_FILENAME = "openapi.json"


def _split(value: str | None) -> list[str]:
    """Comma-separated selector; empty or missing means no selection."""
    if not value:
        return []
    return [s.strip() for s in value.split(",") if s.strip()]


@contextmanager
def _docgen_errors():
    try:
        yield
    except DocgenError as e:
        raise click.ClickException(str(e)) from e


def _emit(text: str, output: Path | None, label: str) -> None:
    if output is None:
        click.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"{label} saved to {output}", err=True)


def _encode(doc: dict, fmt: str, config: GeneratorConfig) -> str:
    return dump_yaml(doc) if fmt == "yaml" else dump_json(doc, indent=config.indent)


def selection_options(f):
    """Selectors shared by export and export-openapi."""

    @click.option("--pages", default=None, help="Comma-separated page slugs to include as individual requests.")
    @click.option("--categories", default=None, help="Comma-separated category slugs for posts by categories.")
    @click.option("--cpt", default=None, help="Comma-separated custom content types to include.")
    @click.option("--namespaces", default=None, help="Comma-separated registered route namespaces to include.")
    @click.option("--include-ecommerce/--no-include-ecommerce", default=True, help="Include the e-commerce REST API when active.")
    @click.option("--custom-fields/--no-custom-fields", default=True, help="Project custom fields in list requests when available.")
    @functools.wraps(f)
    def wrapper(*args, pages, categories, cpt, namespaces, include_ecommerce, custom_fields, **kwargs):
        types = _split(cpt)
        selection = Selection(
            page_slugs=_split(pages),
            category_slugs=_split(categories),
            custom_types=types,
            namespaces=_split(namespaces),
            include_ecommerce=include_ecommerce,
            rich_pages=custom_fields,
            rich_posts=custom_fields,
            rich_types=types if custom_fields else [],
        )
        return f(*args, selection=selection, **kwargs)

    return wrapper


def _assemble(snapshot_path: Path, selection: Selection) -> Collection:
    host = load_snapshot(snapshot_path)
    return CollectionAssembler(host).assemble(selection)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log progress and skipped operations.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML configuration file.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Path | None):
    """wp-api-docs: Postman collections and OpenAPI documents for a WordPress REST API."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    with _docgen_errors():
        ctx.obj = load_config(config_path)


@main.command()
@click.argument("snapshot", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output file. Prints to stdout when omitted.")
@selection_options
@click.pass_obj
def export(config: GeneratorConfig, snapshot: Path, output: Path | None, selection: Selection):
    """Export the Postman collection for a site snapshot."""
    with _docgen_errors():
        collection = _assemble(snapshot, selection)
        text = dump_json(dump_collection(collection), indent=config.indent)
    _emit(text, output, "Collection")


@main.command("export-openapi")
@click.argument("snapshot", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output file. Prints to stdout when omitted.")
@click.option("--format", "fmt", default="json", type=click.Choice(["json", "yaml"]), help="Output format.")
@selection_options
@click.pass_obj
def export_openapi(config: GeneratorConfig, snapshot: Path, output: Path | None, fmt: str, selection: Selection):
    """Export the OpenAPI 3.0 document for a site snapshot."""
    with _docgen_errors():
        collection = _assemble(snapshot, selection)
        doc = OpenApiConverter(base_url=config.base_url, api_version=config.api_version).convert(collection)
        text = _encode(doc, fmt, config)
    _emit(text, output, "OpenAPI spec")


@main.command()
@click.argument("collection_path", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output file. Prints to stdout when omitted.")
@click.option("--base-url", default=None, help="Server URL when the collection has no baseUrl variable.")
@click.option("--format", "fmt", default="json", type=click.Choice(["json", "yaml"]), help="Output format.")
@click.pass_obj
def convert(config: GeneratorConfig, collection_path: Path, output: Path | None, base_url: str | None, fmt: str):
    """Convert an existing Postman collection to OpenAPI 3.0."""
    with _docgen_errors():
        collection = load_collection(collection_path)
        doc = OpenApiConverter(base_url=base_url or config.base_url, api_version=config.api_version).convert(collection)
        text = _encode(doc, fmt, config)
    _emit(text, output, "OpenAPI spec")


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output directory for all generated files.")
@selection_options
@click.pass_obj
def run(config: GeneratorConfig, doc_path: Path, output: Path, selection: Selection):
    """Full pipeline: snapshot or collection -> collection + OpenAPI files."""
    fmt = detect_format(doc_path)
    click.echo(f"Reading {doc_path} (format: {fmt})...")
    if fmt == "openapi":
        raise click.ClickException(f"{doc_path} is already an OpenAPI document")

    files: dict[str, str] = {}
    with _docgen_errors():
        if fmt == "snapshot":
            collection = _assemble(doc_path, selection)
            files[COLLECTION_FILENAME] = dump_json(dump_collection(collection), indent=config.indent)
        else:
            collection = load_collection(doc_path)
        click.echo(f"Found {sum(1 for _ in collection.operations())} requests.")

        doc = OpenApiConverter(base_url=config.base_url, api_version=config.api_version).convert(collection)
        files[OPENAPI_FILENAME] = dump_json(doc, indent=config.indent)

    output.mkdir(parents=True, exist_ok=True)
    for filename, content in files.items():
        file_path = output / filename
        file_path.write_text(content, encoding="utf-8")
        click.echo(f"  Created {file_path}")

    click.echo(f"Done! Generated {len(files)} files in {output}")


@main.command()
@click.argument("snapshot", type=click.Path(exists=True, path_type=Path))
@click.option("--all", "show_all", is_flag=True, help="Include core and internal namespaces.")
def namespaces(snapshot: Path, show_all: bool):
    """List registered route namespaces that can be included."""
    with _docgen_errors():
        discoverer = RouteDiscoverer(load_snapshot(snapshot))
        names = discoverer.available_namespaces() if show_all else discoverer.includable_namespaces()
    for name in names:
        click.echo(name)
