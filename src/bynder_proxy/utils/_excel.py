# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Internal spreadsheet writer"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Sequence, Tuple, Union

import pandas as pd

from ..models.table import Table

_MAX_SHEET_NAME = 31
_INVALID_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")


def sheet_name(name: str) -> str:
    """Make ``name`` acceptable as an Excel sheet name."""
    cleaned = _INVALID_SHEET_CHARS.sub(" ", name).strip() or "Sheet"
    return cleaned[:_MAX_SHEET_NAME]


def write_workbook(path: Union[str, Path], sheets: Sequence[Tuple[str, Table]]) -> Path:
    """Write one sheet per ``(name, table)`` pair to an ``.xlsx`` file.

    Cells are written as plain strings, including text starting with ``=``.
    Column widths follow the longest cell of each column (plus two characters,
    capped at 50). An empty table still produces its sheet with headers only.

    :param path: Destination file; overwritten if it exists.
    :param sheets: Sheet names and tables, in workbook order.
    :return: The path written.
    """
    if not sheets:
        raise ValueError("at least one sheet is required")
    target = Path(path)
    # Cell text is data: never turn it into formulas or hyperlinks.
    options = {"strings_to_formulas": False, "strings_to_urls": False}
    with pd.ExcelWriter(str(target), engine="xlsxwriter", engine_kwargs={"options": options}) as writer:
        for name, table in sheets:
            name = sheet_name(name)
            df = table.to_dataframe()
            df.to_excel(writer, index=False, sheet_name=name)
            ws = writer.sheets[name]
            for i, width in enumerate(table.column_widths().values()):
                ws.set_column(i, i, width)
    return target


__all__ = ["sheet_name", "write_workbook"]
