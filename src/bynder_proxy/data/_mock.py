# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""In-memory stand-in for :class:`~bynder_proxy.data._bynder._BynderClient`."""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping, Optional

_MEDIA_TYPES = ("image", "video", "document")
_ORIENTATIONS = ("landscape", "portrait", "square")

_MOCK_METAPROPERTIES: Dict[str, Dict[str, Any]] = {
    "property1": {
        "id": "property1",
        "name": "Department",
        "label": "Department",
        "type": "select",
        "isMultiselect": True,
        "isRequired": False,
        "zindex": 1,
        "isFilterable": True,
        "count": {"total": 120},
        "options": {
            "option1": {"id": "option1", "label": "Marketing", "zindex": 1, "count": 45},
            "option2": {"id": "option2", "label": "Sales", "zindex": 2, "count": 30},
            "option3": {"id": "option3", "label": "Development", "zindex": 3, "count": 45},
        },
    },
    "property2": {
        "id": "property2",
        "name": "Region",
        "label": "Region",
        "type": "select",
        "isMultiselect": True,
        "isRequired": True,
        "zindex": 2,
        "isFilterable": True,
        "count": {"total": 120},
        "options": {
            "option4": {"id": "option4", "label": "North America", "zindex": 1, "count": 50},
            "option5": {"id": "option5", "label": "Europe", "zindex": 2, "count": 40},
            "option6": {"id": "option6", "label": "Asia Pacific", "zindex": 3, "count": 30},
        },
    },
}


def _mock_media_item(index: int) -> Dict[str, Any]:
    media_id = f"00000000-0000-0000-0000-{index:012d}"
    return {
        "id": media_id,
        "name": f"Asset {index}",
        "type": _MEDIA_TYPES[index % len(_MEDIA_TYPES)],
        "orientation": _ORIENTATIONS[index % len(_ORIENTATIONS)],
        "limited": index % 5 == 0,
        "fileSize": 1024 * (index + 1),
        "tags": [f"tag{index % 4}", "mock"],
        "dateCreated": "2024-01-01T00:00:00Z",
        "thumbnails": {
            "mini": f"https://mock.bynder.local/{media_id}/mini.jpg",
            "thul": f"https://mock.bynder.local/{media_id}/thul.jpg",
        },
        "property_Department": ["Marketing"] if index % 2 else ["Sales", "Development"],
        "property_Region": {"id": "option5", "label": "Europe"},
    }


class _MockBynderClient:
    """
    Fake upstream serving canned media and metaproperties.

    Filters named after media fields (``type``, ``orientation``, ``limited``)
    are applied; any other filter key is accepted and ignored.

    :param item_count: Number of media items in the fake catalogue.
    """

    def __init__(self, item_count: int = 250) -> None:
        self._media = [_mock_media_item(i) for i in range(1, item_count + 1)]

    def _list_media(
        self,
        page: int,
        size: int,
        total: bool = False,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        items = [m for m in self._media if _matches(m, filters or {})]
        start = (max(page, 1) - 1) * size
        return copy.deepcopy(items[start:start + size])

    def _get_media(self, media_id: str) -> Optional[Dict[str, Any]]:
        for item in self._media:
            if item["id"] == media_id:
                return copy.deepcopy(item)
        return None

    def _list_metaproperties(self, options: int = 1, count: int = 1) -> Dict[str, Dict[str, Any]]:
        result = copy.deepcopy(_MOCK_METAPROPERTIES)
        for mp in result.values():
            if not options:
                mp.pop("options", None)
            if not count:
                mp.pop("count", None)
        return result

    def _list_content_access_metaproperties(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return list(copy.deepcopy(_MOCK_METAPROPERTIES).values())

    def _get_content_access_metaproperty(self, metaproperty_id: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        mp = _MOCK_METAPROPERTIES.get(metaproperty_id)
        return copy.deepcopy(mp) if mp is not None else None

    def close(self) -> None:
        return None


def _matches(item: Dict[str, Any], filters: Mapping[str, Any]) -> bool:
    for key in ("type", "orientation"):
        if key in filters and str(item.get(key)) != str(filters[key]):
            return False
    if "limited" in filters:
        wanted = str(filters["limited"]).lower() in ("1", "true")
        if bool(item.get("limited")) != wanted:
            return False
    return True
