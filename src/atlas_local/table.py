"""Plain-text table rendering.

Columns are left-aligned and padded to the widest cell plus four spaces, so
output stays readable without box drawing characters.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Sequence, TypeVar

T = TypeVar("T")

COLUMN_PADDING = 4


@dataclass
class Column(Generic[T]):
    """A table column: header plus a getter producing the cell text."""

    header: str
    value: Callable[[T], Any]


@dataclass
class Table(Generic[T]):
    """Renders rows of T as fixed-width text."""

    columns: list[Column[T]] = field(default_factory=list)

    def add_column(self, header: str, value: Callable[[T], Any]) -> "Table[T]":
        self.columns.append(Column(header, value))
        return self

    def render(self, rows: Sequence[T]) -> str:
        """Render the header row followed by one line per row."""
        cells = [[column.header for column in self.columns]]
        cells.extend([str(column.value(row)) for column in self.columns] for row in rows)

        widths = [
            max(len(line[index]) for line in cells) + COLUMN_PADDING
            for index in range(len(self.columns))
        ]
        return "\n".join(
            "".join(cell.ljust(width) for cell, width in zip(line, widths)) for line in cells
        )
