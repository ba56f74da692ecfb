"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en varios comandos.
"""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from core.domain.entities import Album, AlbumTemplate, Category
from core.domain.responses import ResponseEnvelope


def print_banner(console: Console, api_version: str) -> None:
    title = Text("smugmug-client", style="bold cyan")
    subtitle = Text(f"API JSON {api_version} • álbumes • categorías • subidas", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _cell(value: object) -> str:
    return "" if value is None else str(value)


def build_albums_table(albums: Iterable[Album], *, title: str = "Albums") -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Key", style="dim")
    table.add_column("Title", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Images", justify="right")
    for album in albums:
        table.add_row(
            _cell(album.id),
            _cell(album.key),
            _cell(album.title),
            _cell(album.category.name if album.category else None),
            _cell(album.image_count),
        )
    return table


def build_templates_table(templates: Iterable[AlbumTemplate]) -> Table:
    table = Table(title="Album templates")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Public", style="green")
    table.add_column("Sort", style="dim")
    for template in templates:
        table.add_row(
            _cell(template.id),
            _cell(template.name),
            _cell(template.is_public),
            _cell(template.sort_method),
        )
    return table


def build_categories_table(categories: Iterable[Category]) -> Table:
    table = Table(title="Categories")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Parent", style="dim")
    for category in categories:
        table.add_row(_cell(category.id), _cell(category.name), _cell(category.parent_category_id))
    return table


def build_category_tree(categories: Iterable[Category], *, label: str = "Tree") -> Tree:
    """Árbol categoría -> subcategoría -> álbum (`users.getTree`)."""

    root = Tree(Text(label, style="bold"))

    def _add(node: Tree, category: Category) -> None:
        branch = node.add(Text(f"{category.name or '?'} ({_cell(category.id)})", style="magenta"))
        for sub in category.sub_categories:
            _add(branch, sub)
        for album in category.albums:
            branch.add(Text(f"{album.title or '?'} [{_cell(album.id)}/{_cell(album.key)}]"))

    for category in categories:
        _add(root, category)
    return root


def build_response_panel(response: ResponseEnvelope) -> Panel:
    """Panel con el resumen del envelope (verde ok, rojo error del servicio)."""

    if response.is_error:
        body = Text()
        body.append(f"code: {_cell(response.error_code)}\n", style="bold")
        body.append(_cell(response.error_message))
        return Panel(body, title=Text("Service error", style="bold red"), border_style="red")
    title = Text(response.stat or "ok", style="bold green")
    return Panel(Text(response.summary()), title=title, border_style="green")
