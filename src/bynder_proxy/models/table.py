# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Rectangular table produced by flattening records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping

import pandas as pd


@dataclass
class Table:
    """
    Ordered columns plus one mapping per row.

    Columns are de-duplicated and kept in the order they were first seen.
    A row only holds the columns its source record produced; a missing key
    renders as a blank cell.

    :param columns: Column names in first-seen order.
    :type columns: list[str]
    :param rows: Row mappings of column name to cell text.
    :type rows: list[dict[str, str]]

    Example::

        table = Table()
        table.add_row({"a": "1"})
        table.add_row({"b": "2"})
        table.columns  # ["a", "b"]
    """

    columns: List[str] = field(default_factory=list)
    rows: List[Dict[str, Any]] = field(default_factory=list)

    def add_row(self, row: Mapping[str, Any]) -> None:
        """Append a row and register any column it introduces."""
        known = set(self.columns)
        for column in row:
            if column not in known:
                self.columns.append(column)
                known.add(column)
        self.rows.append(dict(row))

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def to_dataframe(self) -> pd.DataFrame:
        """Return the table as a DataFrame; absent cells become empty strings."""
        df = pd.DataFrame(self.rows, columns=self.columns)
        return df.fillna("")

    def column_widths(self, padding: int = 2, max_width: int = 50) -> Dict[str, int]:
        """Width per column: longest cell text plus ``padding``, capped at ``max_width``."""
        widths: Dict[str, int] = {}
        for column in self.columns:
            longest = max((len(str(row[column])) for row in self.rows if column in row), default=0)
            widths[column] = min(longest + padding, max_width)
        return widths


__all__ = ["Table"]
