# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Metaproperty types for the Bynder asset bank.

A metaproperty is a custom classification field defined on the portal; its
options are the values a media item can carry for that field. Both are
read-only projections of the upstream payload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class MetapropertyOption:
    """
    Selectable value of a metaproperty.

    :param id: Option id.
    :type id: str
    :param label: Display label.
    :type label: str
    :param metaproperty_id: Id of the metaproperty this option belongs to.
    :type metaproperty_id: str
    :param zindex: Ordering index within the metaproperty.
    :type zindex: int or None
    :param count: Number of media items using the option.
    :type count: int or None
    """

    id: str
    label: str
    metaproperty_id: str
    zindex: Optional[int] = None
    count: Optional[int] = None

    @classmethod
    def from_api_response(cls, metaproperty_id: str, data: Mapping[str, Any]) -> "MetapropertyOption":
        return cls(
            id=str(data.get("id") or ""),
            label=str(data.get("label") or data.get("displayLabel") or data.get("name") or ""),
            metaproperty_id=metaproperty_id,
            zindex=_as_int(data.get("zindex")),
            count=_as_int(data.get("count")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "zindex": self.zindex,
            "count": self.count,
            "metapropertyId": self.metaproperty_id,
        }


@dataclass
class Metaproperty:
    """
    Custom classification field and its options.

    :param id: Metaproperty id.
    :type id: str
    :param name: Internal name.
    :type name: str
    :param label: Display label.
    :type label: str
    :param type: Upstream type tag, e.g. ``"select"``.
    :type type: str
    :param is_multiselect: Whether several options may be picked.
    :type is_multiselect: bool
    :param is_required: Whether a value is mandatory.
    :type is_required: bool
    :param is_filterable: Whether the field can be used as a filter.
    :type is_filterable: bool
    :param zindex: Ordering index on the portal.
    :type zindex: int or None
    :param total_count: Number of media items carrying a value.
    :type total_count: int or None
    :param options: Options in upstream order.
    :type options: list[MetapropertyOption]
    :param values: Distinct plain values observed on media (derived metaproperties only).
    :type values: list[str]
    """

    id: str
    name: str
    label: str = ""
    type: str = ""
    is_multiselect: bool = False
    is_required: bool = False
    is_filterable: bool = False
    zindex: Optional[int] = None
    total_count: Optional[int] = None
    options: List[MetapropertyOption] = field(default_factory=list)
    values: List[str] = field(default_factory=list)

    @property
    def option_count(self) -> int:
        return len(self.options)

    @classmethod
    def from_api_response(cls, key: str, data: Mapping[str, Any]) -> "Metaproperty":
        """
        Build a metaproperty from one entry of the upstream metaproperty listing.

        :param key: Key of the entry in the listing, used when the payload has no ``id``.
        :param data: Upstream payload.
        """
        mp_id = str(data.get("id") or key)
        count = data.get("count")
        total = count.get("total") if isinstance(count, Mapping) else count

        raw_options = data.get("options") or []
        if isinstance(raw_options, Mapping):
            raw_options = list(raw_options.values())
        options = [
            MetapropertyOption.from_api_response(mp_id, opt)
            for opt in raw_options
            if isinstance(opt, Mapping)
        ]

        return cls(
            id=mp_id,
            name=str(data.get("name") or key),
            label=str(data.get("label") or data.get("name") or ""),
            type=str(data.get("type") or ""),
            is_multiselect=bool(data.get("isMultiselect")),
            is_required=bool(data.get("isRequired")),
            is_filterable=bool(data.get("isFilterable")),
            zindex=_as_int(data.get("zindex")),
            total_count=_as_int(total),
            options=options,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "id": self.id,
            "name": self.name,
            "label": self.label,
            "type": self.type,
            "isMultiselect": self.is_multiselect,
            "isRequired": self.is_required,
            "isFilterable": self.is_filterable,
            "zindex": self.zindex,
            "totalCount": self.total_count,
            "optionCount": self.option_count,
            "options": [opt.to_dict() for opt in self.options],
        }
        if self.values:
            result["values"] = list(self.values)
        return result


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


__all__ = ["Metaproperty", "MetapropertyOption"]
