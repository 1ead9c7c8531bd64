"""CLI principal (Typer).

Comandos:
- `resolve`: resuelve el deep-link de un elemento (con o sin red).
- `open`: abre el elemento en el navegador del sistema.
- `batch`: resuelve en lote referencias o un árbol de elementos y exporta JSON.
- `tree`: muestra un árbol de elementos filtrado, con el esquema local de cada uno.
- `doctor`: diagnóstico de configuración y conectividad.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from adapters.browser import SystemBrowser
from adapters.json_exporter import export_resolutions_json, resolution_to_dict
from cli.doctor import app as doctor_app
from cli.ui_components import build_element_tree, build_resolutions_table, print_banner
from core.config import AppSettings
from core.domain.errors import InvalidElementIdError, UnresolvableIntentError
from core.domain.intents import FolderType, JobType
from core.domain.models import ElementReference, ResolutionContext
from core.domain.registries import DEFINITION_TYPE_FILTERS
from core.interfaces.navigation import NavigationPort
from core.services.element_tree import ElementNode, filter_tree_with_ancestors, search_tree
from core.services.link_resolver import LinkResolution, LinkResolver, build_link_resolver
from core.services.navigation import DeferredNavigator, ImmediateNavigator

app = typer.Typer(no_args_is_help=True, help="Resolve and open Flex deep links.")
app.add_typer(doctor_app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_err_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
) -> None:
    _configure_logging(verbose)


def _build_context(
    job_type: JobType | None,
    folder_type: FolderType | None,
) -> ResolutionContext:
    return ResolutionContext(job_type=job_type, folder_type=folder_type)


def _print_warning(message: str) -> None:
    _err_console.print(f"[yellow]Warning:[/yellow] {message}")


def _print_error(error: Exception) -> None:
    _err_console.print(f"[red]Error:[/red] {error}")


@app.command()
def resolve(
    element_id: str = typer.Argument(..., help="Flex element id."),
    definition_id: Optional[str] = typer.Option(None, "--definition-id", help="Known template definition id."),
    domain_id: Optional[str] = typer.Option(None, "--domain-id", help="Coarse domain/category string."),
    schema_id: Optional[str] = typer.Option(None, "--schema-id", help="Free-form schema identifier."),
    view_hint: Optional[str] = typer.Option(None, "--view-hint", help="Force an intent, or 'auto'."),
    job_type: Optional[JobType] = typer.Option(None, "--job-type", case_sensitive=False),
    folder_type: Optional[FolderType] = typer.Option(None, "--folder-type", case_sensitive=False),
    offline: bool = typer.Option(False, "--offline", help="Use local hints only (no network)."),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
) -> None:
    """Resolve the deep-link URL of a Flex element."""

    resolver = build_link_resolver(AppSettings())
    reference = ElementReference(
        element_id=element_id,
        definition_id=definition_id,
        domain_id=domain_id,
        schema_id=schema_id,
        view_hint=view_hint,
    )
    context = _build_context(job_type, folder_type)

    try:
        if offline:
            resolution = resolver.describe(reference, context)
        else:
            resolution = asyncio.run(resolver.describe_async(reference, context))
    except InvalidElementIdError as exc:
        _print_error(exc)
        raise typer.Exit(code=2)

    if as_json:
        typer.echo(json.dumps(resolution_to_dict(resolution), ensure_ascii=False, sort_keys=True))
    else:
        _console.print(build_resolutions_table([resolution]))

    if not resolution.resolved:
        _print_error(UnresolvableIntentError(resolution.element_id))
        raise typer.Exit(code=1)


@app.command(name="open")
def open_element(
    element_id: str = typer.Argument(..., help="Flex element id."),
    definition_id: Optional[str] = typer.Option(None, "--definition-id"),
    domain_id: Optional[str] = typer.Option(None, "--domain-id"),
    view_hint: Optional[str] = typer.Option(None, "--view-hint"),
    display_name: Optional[str] = typer.Option(None, "--name", help="Label used in messages."),
    job_type: Optional[JobType] = typer.Option(None, "--job-type", case_sensitive=False),
    folder_type: Optional[FolderType] = typer.Option(None, "--folder-type", case_sensitive=False),
    immediate: bool = typer.Option(
        False,
        "--immediate",
        help="Resolve from local hints only and open right away.",
    ),
) -> None:
    """Open a Flex element in the system browser."""

    resolver = build_link_resolver(AppSettings())
    browser = SystemBrowser()
    reference = ElementReference(
        element_id=element_id,
        definition_id=definition_id,
        domain_id=domain_id,
        view_hint=view_hint,
        display_name=display_name,
    )
    context = _build_context(job_type, folder_type)

    navigator: NavigationPort = (
        ImmediateNavigator(resolver, browser) if immediate else DeferredNavigator(resolver, browser)
    )
    outcome = navigator.navigate(reference, context, on_error=_print_error, on_warning=_print_warning)
    if asyncio.iscoroutine(outcome):
        outcome = asyncio.run(outcome)

    if not outcome.succeeded:
        raise typer.Exit(code=1)
    _console.print(f"[green]Opened[/green] {element_id} ({outcome.value})")


def _looks_like_tree(items: list[Any]) -> bool:
    return any(isinstance(item, dict) and ("children" in item or "nodeId" in item) for item in items)


def definition_type_filter(name: str | None) -> Callable[[str | None], bool] | None:
    """Predicate over definitionId for `--definition-type`, or None for no filter."""

    if name is None or not name.strip():
        return None
    predicate = DEFINITION_TYPE_FILTERS.get(name.strip().lower())
    if predicate is None:
        choices = ", ".join(sorted(DEFINITION_TYPE_FILTERS))
        raise typer.BadParameter(f"unknown definition type {name!r} (expected one of: {choices})")
    return predicate


def _parse_items(data: Any) -> list[Any]:
    items = data.get("elements", []) if isinstance(data, dict) else data
    if not isinstance(items, list):
        raise typer.BadParameter("input must be a JSON list (or an object with an 'elements' list)")
    return items


def _parse_nodes(items: list[Any]) -> list[ElementNode]:
    try:
        return [ElementNode.model_validate(item) for item in items if isinstance(item, dict)]
    except ValidationError as exc:
        raise typer.BadParameter(f"invalid element entry: {exc.errors()[0]['msg']}") from exc


def load_references(
    data: Any,
    search: str | None = None,
    definition_type: str | None = None,
) -> list[ElementReference]:
    """Read a list of references, or an element tree, from parsed JSON."""

    items = _parse_items(data)
    by_definition = definition_type_filter(definition_type)

    if _looks_like_tree(items):
        references = [
            ElementReference.from_node(flat.node)
            for flat in search_tree(_parse_nodes(items), search)
            if flat.element_id
        ]
    else:
        try:
            references = [ElementReference.model_validate(item) for item in items if isinstance(item, dict)]
        except ValidationError as exc:
            raise typer.BadParameter(f"invalid element entry: {exc.errors()[0]['msg']}") from exc

        needle = (search or "").strip().lower()
        if needle:
            references = [
                ref
                for ref in references
                if needle in (ref.display_name or "").lower() or needle in (ref.document_number or "").lower()
            ]

    if by_definition is None:
        return references
    return [ref for ref in references if by_definition(ref.definition_id)]


async def _resolve_all(
    resolver: LinkResolver,
    references: list[ElementReference],
    context: ResolutionContext,
) -> list[LinkResolution]:
    async def one(ref: ElementReference) -> LinkResolution | None:
        try:
            return await resolver.describe_async(ref, context)
        except InvalidElementIdError as exc:
            _print_warning(str(exc))
            return None

    results = await asyncio.gather(*(one(ref) for ref in references))
    return [r for r in results if r is not None]


@app.command()
def batch(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON list of references or a tree."),
    output: Path = typer.Option(Path("reports") / "flex_links.json", "--output", "-o"),
    search: Optional[str] = typer.Option(None, "--search", help="Filter by display name or document number."),
    definition_type: Optional[str] = typer.Option(
        None,
        "--definition-type",
        help=f"Only elements of one document type ({', '.join(DEFINITION_TYPE_FILTERS)}).",
    ),
    job_type: Optional[JobType] = typer.Option(None, "--job-type", case_sensitive=False),
    folder_type: Optional[FolderType] = typer.Option(None, "--folder-type", case_sensitive=False),
    offline: bool = typer.Option(False, "--offline", help="Use local hints only (no network)."),
) -> None:
    """Resolve many elements at once and export the result as JSON."""

    print_banner(_console)

    data = json.loads(input_path.read_text(encoding="utf-8"))
    references = load_references(data, search, definition_type)
    resolver = build_link_resolver(AppSettings())
    context = _build_context(job_type, folder_type)

    if offline:
        resolutions = []
        for ref in references:
            try:
                resolutions.append(resolver.describe(ref, context))
            except InvalidElementIdError as exc:
                _print_warning(str(exc))
    else:
        resolutions = asyncio.run(_resolve_all(resolver, references, context))

    _console.print(build_resolutions_table(resolutions))
    path = export_resolutions_json(resolutions=resolutions, output_path=output)
    _console.print(f"[green]Exported[/green] {len(resolutions)} links to {path}")


@app.command()
def tree(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON element tree."),
    search: Optional[str] = typer.Option(None, "--search", help="Keep nodes whose name or document number matches."),
    definition_type: Optional[str] = typer.Option(
        None,
        "--definition-type",
        help=f"Keep nodes of one document type ({', '.join(DEFINITION_TYPE_FILTERS)}).",
    ),
    job_type: Optional[JobType] = typer.Option(None, "--job-type", case_sensitive=False),
    folder_type: Optional[FolderType] = typer.Option(None, "--folder-type", case_sensitive=False),
) -> None:
    """Show an element tree, keeping the ancestors of every match."""

    nodes = _parse_nodes(_parse_items(json.loads(input_path.read_text(encoding="utf-8"))))
    by_definition = definition_type_filter(definition_type)
    needle = (search or "").strip().lower()

    def matches(node: ElementNode) -> bool:
        if needle and not (
            needle in (node.display_name or "").lower() or needle in (node.document_number or "").lower()
        ):
            return False
        return by_definition is None or by_definition(node.effective_definition_id)

    if needle or by_definition is not None:
        nodes = filter_tree_with_ancestors(nodes, matches)
    if not nodes:
        _print_warning("no elements match the filters")
        raise typer.Exit(code=1)

    _console.print(build_element_tree(nodes, _build_context(job_type, folder_type)))


def run() -> None:
    app()
