"""Render resource models to stdout in the configured output format.

Supported formats are listed in :class:`OutputFormat`:

* **json** -- the full model (relations included), 4-space indented, using
  the API's camelCase attribute names.
* **yaml** -- the same structure as YAML, key order preserved.
* **table** -- a bordered table. ``ID`` comes first, then every non-relation
  field in declaration order. Nothing is printed for zero rows.
* **tsv** -- the table rows joined by tabs, without a header line.
* **none** -- no output.

Any other format name raises :class:`~terrakube_cli.exceptions.RenderError`.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, IO, Sequence

import yaml
from pydantic import BaseModel
from rich import box
from rich.console import Console
from rich.table import Table

from terrakube_cli.exceptions import RenderError


class OutputFormat(str, Enum):
    """Enumeration of supported output formats."""

    JSON = "json"
    YAML = "yaml"
    TABLE = "table"
    TSV = "tsv"
    NONE = "none"


def render(writer: IO[str], data: Any, fmt: str, *, hide_nulls: bool = False) -> None:
    """Write *data* to *writer* in format *fmt*.

    Args:
        writer: Text stream receiving the output (normally ``sys.stdout``).
        data: A model, a list of models, or for json/yaml any
            JSON-serialisable value.
        fmt: Output format name.
        hide_nulls: Drop ``None`` attributes from json/yaml output.

    Raises:
        RenderError: For an unsupported format or a serialisation failure.
        TypeError: If table/tsv output is requested for data that is not a
            model or a list of models.
    """
    try:
        output_format = OutputFormat(fmt)
    except ValueError:
        raise RenderError(f"unsupported output format: {fmt!r}") from None

    if output_format == OutputFormat.NONE:
        return

    if output_format == OutputFormat.JSON:
        try:
            text = json.dumps(_to_plain(data, hide_nulls), indent=4, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise RenderError(f"failed to encode json: {exc}") from exc
        writer.write(text + "\n")
        return

    if output_format == OutputFormat.YAML:
        try:
            text = yaml.safe_dump(
                _to_plain(data, hide_nulls),
                sort_keys=False,
                allow_unicode=True,
                default_flow_style=False,
            )
        except yaml.YAMLError as exc:
            raise RenderError(f"failed to encode yaml: {exc}") from exc
        writer.write(text)
        return

    rows, headers = extract_rows(data)
    if output_format == OutputFormat.TSV:
        for row in rows:
            writer.write("\t".join(row) + "\n")
        return

    _print_table(writer, headers, rows)


def _to_plain(data: Any, hide_nulls: bool) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True, exclude_none=hide_nulls)
    if isinstance(data, (list, tuple)):
        return [_to_plain(item, hide_nulls) for item in data]
    return data


# ---------------------------------------------------------------------------
# Row extraction
# ---------------------------------------------------------------------------


def _header(field_name: str) -> str:
    return "".join(part.capitalize() for part in field_name.split("_"))


def _is_relation(info: Any) -> bool:
    extra = info.json_schema_extra
    return isinstance(extra, dict) and "relation" in extra


def format_cell(value: Any) -> str:
    """Format one table cell."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def extract_rows(data: Any) -> tuple[list[list[str]], list[str]]:
    """Flatten a model or a list of models into table rows.

    Columns are taken from the type of the first element, so lists must be
    homogeneous. Relation fields are skipped.

    Args:
        data: A model instance or a list/tuple of model instances.

    Returns:
        A ``(rows, headers)`` tuple. An empty list yields ``([], ["ID"])``.

    Raises:
        TypeError: If *data* is neither a model nor a sequence of models.
    """
    if isinstance(data, BaseModel):
        items: Sequence[Any] = [data]
    elif isinstance(data, (list, tuple)):
        items = data
    else:
        raise TypeError(f"cannot render {type(data).__name__} as rows")

    if not items:
        return [], ["ID"]

    first = items[0]
    if not isinstance(first, BaseModel):
        raise TypeError(f"cannot render {type(first).__name__} as rows")

    columns = [
        name
        for name, info in type(first).model_fields.items()
        if name != "id" and not _is_relation(info)
    ]
    headers = ["ID"] + [_header(name) for name in columns]

    rows = []
    for item in items:
        row = [format_cell(getattr(item, "id", ""))]
        row.extend(format_cell(getattr(item, name, None)) for name in columns)
        rows.append(row)
    return rows, headers


def _print_table(writer: IO[str], headers: list[str], rows: list[list[str]]) -> None:
    if not rows:
        return

    is_tty = hasattr(writer, "isatty") and writer.isatty()
    console = Console(
        file=writer,
        width=None if is_tty else 100_000,
        markup=False,
        emoji=False,
        highlight=False,
    )
    table = Table(box=box.MARKDOWN, show_header=True, header_style="bold")
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*row)
    console.print(table)
