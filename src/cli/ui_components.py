"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from core.domain.models import ElementReference, ResolutionContext
from core.services.classifier import classify_reference
from core.services.element_tree import ElementNode
from core.services.link_resolver import LinkResolution


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - Permite desactivar banner en modos no interactivos (JSON/pipelines).
    """

    title = Text("flexlink", style="bold cyan")
    subtitle = Text("Deep-links de Flex • Clasificación • Navegación", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_resolutions_table(resolutions: Iterable[LinkResolution]) -> Table:
    """Tabla Rich con el esquema elegido y el motivo por elemento."""

    table = Table(title="Flex links")
    table.add_column("Element", style="cyan", no_wrap=True)
    table.add_column("Intent", style="white")
    table.add_column("Reason", style="dim")
    table.add_column("Network", style="yellow")
    table.add_column("URL", style="magenta")
    for r in resolutions:
        table.add_row(
            r.element_id,
            r.intent.label() if r.intent else "[red]unresolved[/red]",
            r.reason.value,
            "yes" if r.used_network else "no",
            r.url or "-",
        )
    return table


def _node_label(node: ElementNode, context: ResolutionContext) -> Text:
    name = node.display_name or node.document_number or "(sin nombre)"
    label = Text(name, style="bold")
    element_id = node.primary_id
    if element_id is None:
        label.append("  sin id", style="red")
        return label
    intent = classify_reference(ElementReference.from_node(node), context)
    label.append(f"  {element_id}", style="cyan")
    label.append(f"  {intent.label()}", style="magenta")
    return label


def build_element_tree(
    nodes: Iterable[ElementNode],
    context: ResolutionContext | None = None,
    *,
    title: str = "Flex elements",
) -> Tree:
    """Árbol Rich con el esquema local (sin red) de cada elemento."""

    context = context or ResolutionContext()
    root = Tree(Text(title, style="bold cyan"))

    def add(branch: Tree, items: Iterable[ElementNode]) -> None:
        for node in items:
            add(branch.add(_node_label(node, context)), node.children)

    add(root, nodes)
    return root
