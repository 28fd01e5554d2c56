"""Output formatters for CLI commands.

``-o table`` renders pods as one row each and a single workload as a
field/value table; ``-o json`` and ``-o yaml`` print the model data unchanged.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import StrEnum
from typing import Any

import yaml
from rich.console import Console
from rich.table import Table

# (field path, column header); paths may be dotted and may name model properties
Column = tuple[str, str]

# Too large for a table cell; shown by -o yaml/json
_ELIDED_FIELDS = {"template": "pod template, see -o yaml"}

_MAX_CELL_ITEMS = 3


class OutputFormat(StrEnum):
    """Supported output formats for CLI commands."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


def _dump(resource: Any) -> Any:
    if hasattr(resource, "model_dump"):
        return resource.model_dump(mode="json", exclude_none=True)
    return resource


def _owner_ref(value: dict[str, Any]) -> str:
    text = f"{value['kind']}/{value['name']}"
    return f"{text} (controller)" if value.get("controller") else text


def _is_owner_ref(value: Any) -> bool:
    return isinstance(value, dict) and "kind" in value and "name" in value


class Formatter(ABC):
    """Renders resources to a console."""

    def __init__(self, console: Console) -> None:
        self.console = console

    @abstractmethod
    def format_resource(self, resource: Any, title: str = "") -> None:
        """Render one resource."""

    @abstractmethod
    def format_list(
        self,
        resources: Sequence[Any],
        columns: list[Column],
        title: str = "",
    ) -> None:
        """Render several resources; ``columns`` only matters for tables."""


class TableFormatter(Formatter):
    """Rich table output."""

    def format_resource(self, resource: Any, title: str = "") -> None:
        table = Table(title=title or "Resource Details", show_header=True)
        table.add_column("Field", style="cyan", no_wrap=True)
        table.add_column("Value", overflow="fold")

        for field, value in _dump(resource).items():
            if field in _ELIDED_FIELDS:
                table.add_row(field, f"[dim]{_ELIDED_FIELDS[field]}[/dim]")
            else:
                table.add_row(field, self._format_value(value))

        self.console.print(table)

    def format_list(
        self,
        resources: Sequence[Any],
        columns: list[Column],
        title: str = "",
    ) -> None:
        table = Table(title=title, show_header=True)
        for _, header in columns:
            table.add_column(
                header,
                style="cyan" if header in ("Name", "Namespace") else None,
                overflow="fold",
            )

        for resource in resources:
            table.add_row(
                *(self._format_cell_value(self._get_value(resource, path)) for path, _ in columns)
            )

        self.console.print(table)
        noun = "pod" if len(resources) == 1 else "pods"
        self.console.print(f"\n[dim]Total: {len(resources)} {noun}[/dim]")

    def _format_value(self, value: Any) -> str:
        if value is None:
            return "[dim]-[/dim]"
        if isinstance(value, bool):
            return "[green]true[/green]" if value else "[red]false[/red]"
        if isinstance(value, list):
            if not value:
                return "[dim]none[/dim]"
            if all(_is_owner_ref(v) for v in value):
                return "\n".join(_owner_ref(v) for v in value)
            if all(isinstance(v, str) for v in value):
                return ", ".join(value)
            return json.dumps(value, indent=2, default=str)
        if isinstance(value, dict):
            return "\n".join(f"{k}={v}" for k, v in value.items()) or "[dim]none[/dim]"
        return str(value)

    def _format_cell_value(self, value: Any) -> str:
        if value is None or value == []:
            return "-"
        if isinstance(value, bool):
            return "Yes" if value else "No"
        if _is_owner_ref(value):
            return _owner_ref(value)
        if isinstance(value, list):
            shown = ", ".join(str(v) for v in value[:_MAX_CELL_ITEMS])
            hidden = len(value) - _MAX_CELL_ITEMS
            return f"{shown} (+{hidden})" if hidden > 0 else shown
        return str(value)

    def _get_value(self, resource: Any, field_path: str) -> Any:
        value = resource
        for key in field_path.split("."):
            value = value.get(key) if isinstance(value, dict) else getattr(value, key, None)
            if value is None:
                return None
        return value


class JsonFormatter(Formatter):
    """JSON output; lists are wrapped as ``{"data": [...], "total": n}``."""

    def format_resource(self, resource: Any, title: str = "") -> None:
        self.console.print_json(json.dumps(_dump(resource), default=str))

    def format_list(
        self,
        resources: Sequence[Any],
        columns: list[Column],
        title: str = "",
    ) -> None:
        data = [_dump(r) for r in resources]
        self.console.print_json(json.dumps({"data": data, "total": len(data)}, default=str))


class YamlFormatter(Formatter):
    """YAML output; lists are printed as a bare sequence."""

    def format_resource(self, resource: Any, title: str = "") -> None:
        self._print_yaml(_dump(resource))

    def format_list(
        self,
        resources: Sequence[Any],
        columns: list[Column],
        title: str = "",
    ) -> None:
        self._print_yaml([_dump(r) for r in resources])

    def _print_yaml(self, data: Any) -> None:
        text = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
        self.console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)


_FORMATTERS: dict[OutputFormat, type[Formatter]] = {
    OutputFormat.TABLE: TableFormatter,
    OutputFormat.JSON: JsonFormatter,
    OutputFormat.YAML: YamlFormatter,
}


def get_formatter(format_type: OutputFormat, console: Console | None = None) -> Formatter:
    """Formatter for ``format_type``, writing to ``console`` (stdout by default)."""
    return _FORMATTERS.get(format_type, TableFormatter)(console or Console())
