"""
Report emitter for Patch Overview - turns patch records into rows and renders them.
"""

import csv
import io
from typing import Any, Dict, Iterable, List

from pydantic import BaseModel, ConfigDict, Field
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.models import PatchRecord, PatchStatus

COLUMNS = ["Module", "Source", "Patch applied"]
FORMATS = ["table", "json", "csv"]

STATUS_STYLES = {
    PatchStatus.APPLIED.value: "green",
    PatchStatus.NOT_APPLIED.value: "red",
    PatchStatus.UNSURE.value: "yellow",
}


class PatchRow(BaseModel):
    """One output row, serialized with the column titles as keys."""
    model_config = ConfigDict(populate_by_name=True)

    module: str = Field(..., alias="Module")
    source: str = Field(..., alias="Source")
    patch_applied: str = Field(..., alias="Patch applied")

    def as_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def build_rows(records: Iterable[PatchRecord]) -> List[PatchRow]:
    """One row per record, in the order given."""
    return [
        PatchRow(module=record.package, source=record.source, patch_applied=str(record.status))
        for record in records
    ]


def build_table(rows: List[PatchRow]) -> Table:
    table = Table(title="Composer patches")
    table.add_column("Module", style="cyan")
    table.add_column("Source", style="blue")
    table.add_column("Patch applied")

    for row in rows:
        style = STATUS_STYLES.get(row.patch_applied, "white")
        table.add_row(escape(row.module), escape(row.source), f"[{style}]{escape(row.patch_applied)}[/{style}]")
    return table


def render_csv(rows: List[PatchRow]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=COLUMNS, lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow(row.as_dict())
    return buffer.getvalue()


def emit(rows: List[PatchRow], format: str, console: Console):
    """Print `rows` to `console` in one of FORMATS."""
    if format == "table":
        console.print(build_table(rows))
    elif format == "json":
        console.print_json(data=[row.as_dict() for row in rows])
    elif format == "csv":
        console.out(render_csv(rows), end="", highlight=False)
    else:
        raise ValueError(f"Unsupported output format: {format}")
