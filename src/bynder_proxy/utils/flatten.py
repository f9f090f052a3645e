# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Flatten schema-less records into a :class:`~bynder_proxy.models.table.Table`.

Each field of each record is classified by the first matching rule of an
ordered rule table. A rule turns one ``(field, value)`` pair into zero or more
``(column, cell)`` pairs, which lets nested maps fan out into synthetic
``<field>_<subkey>`` columns. Cells are always strings.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..models.metaproperty import Metaproperty
from ..models.table import Table
from ._formatting import format_file_size

logger = logging.getLogger(__name__)

Cell = Tuple[str, str]

#: Field-name prefix of media metaproperty values.
METAPROPERTY_PREFIX = "property_"

LIST_SEPARATOR = ", "


def display(value: Any) -> str:
    """Render a scalar (or nested value) as cell text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list, tuple)):
        return to_compact_json(value)
    return str(value)


def to_compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def join_values(values: Iterable[Any]) -> str:
    return LIST_SEPARATOR.join(display(v) for v in values)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


@dataclass(frozen=True)
class FieldRule:
    """
    One entry of the rule table.

    :param name: Rule name, for logging and debugging.
    :param matches: ``matches(field, value) -> bool``.
    :param expand: ``expand(field, value) -> iterable of (column, cell)``.
    """

    name: str
    matches: Callable[[str, Any], bool]
    expand: Callable[[str, Any], Iterable[Cell]]


def _empty(field: str, value: Any) -> Iterable[Cell]:
    return [(field, "")]


def _metaproperty(field: str, value: Any) -> Iterable[Cell]:
    if _is_sequence(value):
        return [(field, join_values(value))]
    if isinstance(value, Mapping):
        return [(field, to_compact_json(value))]
    return [(field, display(value))]


def _file_size(field: str, value: Any) -> Iterable[Cell]:
    return [(field, format_file_size(value))]


def _joined(field: str, value: Any) -> Iterable[Cell]:
    return [(field, join_values(value))]


def _sub_columns_raw(field: str, value: Mapping[str, Any]) -> Iterable[Cell]:
    return [(f"{field}_{key}", display(sub)) for key, sub in value.items()]


def _sub_columns(field: str, value: Mapping[str, Any]) -> Iterable[Cell]:
    cells: List[Cell] = []
    for key, sub in value.items():
        column = f"{field}_{key}"
        if _is_sequence(sub):
            cells.append((column, join_values(sub)))
        elif isinstance(sub, Mapping):
            cells.append((column, to_compact_json(sub)))
        else:
            cells.append((column, display(sub)))
    return cells


def _scalar(field: str, value: Any) -> Iterable[Cell]:
    return [(field, display(value))]


DEFAULT_RULES: Tuple[FieldRule, ...] = (
    FieldRule("null", lambda f, v: v is None, _empty),
    FieldRule("metaproperty", lambda f, v: f.startswith(METAPROPERTY_PREFIX), _metaproperty),
    FieldRule("file_size", lambda f, v: f == "fileSize", _file_size),
    FieldRule("tags", lambda f, v: f == "tags" and _is_sequence(v), _joined),
    FieldRule("thumbnails", lambda f, v: f == "thumbnails" and isinstance(v, Mapping), _sub_columns_raw),
    FieldRule("object", lambda f, v: isinstance(v, Mapping), _sub_columns),
    FieldRule("sequence", lambda f, v: _is_sequence(v), _joined),
    FieldRule("scalar", lambda f, v: True, _scalar),
)


class RecordFlattener:
    """
    Flattens records with an ordered rule table.

    :param rules: Rules tried in order for every field; the first match wins.
        The last rule should match everything.

    Example::

        table = RecordFlattener().flatten([{"a": 1}, {"b": 2}])
        table.columns  # ["a", "b"]
        table.rows     # [{"a": "1"}, {"b": "2"}]
    """

    def __init__(self, rules: Optional[Sequence[FieldRule]] = None) -> None:
        self.rules: Tuple[FieldRule, ...] = tuple(rules) if rules is not None else DEFAULT_RULES
        if not self.rules:
            raise ValueError("at least one rule is required")

    def flatten_record(self, record: Mapping[str, Any]) -> dict:
        row: dict = {}
        for field, value in record.items():
            field = str(field)
            rule = self._rule_for(field, value)
            for column, cell in rule.expand(field, value):
                row[column] = cell
        return row

    def flatten(self, records: Iterable[Mapping[str, Any]]) -> Table:
        table = Table()
        for record in records:
            if not isinstance(record, Mapping):
                logger.debug("Skipping non-object record of type %s", type(record).__name__)
                continue
            table.add_row(self.flatten_record(record))
        return table

    def _rule_for(self, field: str, value: Any) -> FieldRule:
        for rule in self.rules:
            if rule.matches(field, value):
                return rule
        # Fields no rule claims are still rendered.
        return DEFAULT_RULES[-1]


def flatten_records(records: Iterable[Mapping[str, Any]]) -> Table:
    """Flatten records with the default rule table."""
    return RecordFlattener().flatten(records)


# ----------------------------- Metaproperties -------------------------------

METAPROPERTY_COLUMNS = (
    "ID",
    "Name",
    "Label",
    "Type",
    "Multi-select",
    "Required",
    "Filterable",
    "Options",
    "Total Count",
)

OPTION_COLUMNS = (
    "ID",
    "Label",
    "Order",
    "Count",
    "Metaproperty Name",
    "Metaproperty ID",
)


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def flatten_metaproperties(metaproperties: Iterable[Metaproperty]) -> Tuple[Table, Table]:
    """
    Build the metaproperty table and the option table.

    Every option row repeats the name and id of its owning metaproperty, so
    the two tables can be joined back together after they are written to
    separate sheets.

    :param metaproperties: Metaproperties with their options.
    :return: ``(metaproperty_table, option_table)``.
    """
    mp_table = Table(columns=list(METAPROPERTY_COLUMNS))
    option_table = Table(columns=list(OPTION_COLUMNS))
    for mp in metaproperties:
        mp_table.add_row(
            {
                "ID": mp.id,
                "Name": mp.name,
                "Label": mp.label,
                "Type": mp.type,
                "Multi-select": _yes_no(mp.is_multiselect),
                "Required": _yes_no(mp.is_required),
                "Filterable": _yes_no(mp.is_filterable),
                "Options": str(mp.option_count),
                "Total Count": display(mp.total_count),
            }
        )
        for option in mp.options:
            option_table.add_row(
                {
                    "ID": option.id,
                    "Label": option.label,
                    "Order": display(option.zindex),
                    "Count": display(option.count),
                    "Metaproperty Name": mp.name,
                    "Metaproperty ID": mp.id,
                }
            )
    return mp_table, option_table


__all__ = [
    "DEFAULT_RULES",
    "FieldRule",
    "METAPROPERTY_PREFIX",
    "RecordFlattener",
    "display",
    "flatten_metaproperties",
    "flatten_records",
]
