# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Metaproperty listing, export and media-derived extraction namespace."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, TYPE_CHECKING

from ..core._error_codes import VALIDATION_MISSING_PARAMETER
from ..core.errors import InvalidParameterError, NotFoundError
from ..core.results import MetapropertyExportResult
from ..models.metaproperty import Metaproperty, MetapropertyOption
from ..utils.flatten import METAPROPERTY_PREFIX, display, flatten_metaproperties, to_compact_json

if TYPE_CHECKING:
    from ..client import BynderProxyClient

logger = logging.getLogger(__name__)

METAPROPERTY_SHEET_NAME = "Meta Properties"
OPTION_SHEET_NAME = "Property Options"


def extract_media_metaproperties(
    records: Iterable[Mapping[str, Any]],
) -> Tuple[List[Metaproperty], List[MetapropertyOption]]:
    """
    Derive metaproperties from the ``property_*`` fields of media records.

    Each distinct field becomes a :class:`Metaproperty` whose id is the field
    name and whose name is the field name without prefix, underscores read as
    spaces. Plain values are collected as distinct ``values``; object values
    (typically ``{"id": ..., "label": ...}``) also become options of that
    metaproperty, de-duplicated by id.

    :return: ``(metaproperties, options)`` in first-seen order.
    """
    properties: Dict[str, Metaproperty] = {}
    seen_values: Dict[str, Dict[str, None]] = {}
    options: Dict[Tuple[str, str], MetapropertyOption] = {}

    def _add(field: str, value: Any) -> None:
        if value is None:
            return
        if isinstance(value, Mapping):
            label = display(value.get("label")) or to_compact_json(value)
            option_id = display(value.get("id")) or to_compact_json(value)
            seen_values[field].setdefault(label, None)
            key = (field, option_id)
            if key not in options:
                option = MetapropertyOption(id=option_id, label=label, metaproperty_id=field)
                options[key] = option
                properties[field].options.append(option)
        else:
            seen_values[field].setdefault(display(value), None)

    for record in records:
        if not isinstance(record, Mapping):
            continue
        for field, value in record.items():
            if not str(field).startswith(METAPROPERTY_PREFIX):
                continue
            field = str(field)
            if field not in properties:
                name = field[len(METAPROPERTY_PREFIX):].replace("_", " ")
                properties[field] = Metaproperty(id=field, name=name, label=name)
                seen_values[field] = {}
            if isinstance(value, (list, tuple)):
                for element in value:
                    _add(field, element)
            else:
                _add(field, value)

    for field, mp in properties.items():
        mp.values = list(seen_values[field])
    return list(properties.values()), list(options.values())


class MetapropertyOperations:
    """
    Metaproperty operations.

    Accessed via ``client.metaproperties``.

    Example::

        raw = client.metaproperties.list()
        parsed = client.metaproperties.get_all()
        result = client.metaproperties.export()
    """

    def __init__(self, client: "BynderProxyClient") -> None:
        self._client = client

    def list(self, options: bool = True, count: bool = True) -> Dict[str, Dict[str, Any]]:
        """Return the upstream metaproperty listing unchanged, keyed by metaproperty name."""
        logger.info("Fetching metaproperties from Bynder...")
        result = self._client._get_upstream()._list_metaproperties(
            options=1 if options else 0,
            count=1 if count else 0,
        )
        logger.info("Retrieved %d metaproperties", len(result or {}))
        return result or {}

    def get_all(self, options: bool = True, count: bool = True) -> List[Metaproperty]:
        """Return the metaproperty listing as :class:`Metaproperty` objects."""
        raw = self.list(options=options, count=count)
        return [
            Metaproperty.from_api_response(key, data)
            for key, data in raw.items()
            if isinstance(data, Mapping)
        ]

    def export(self, *, filename: Optional[str] = None) -> Optional[MetapropertyExportResult]:
        """
        Export metaproperties and their options to a two-sheet spreadsheet.

        :param filename: Artifact name; defaults to ``meta-properties-<instance>-<epoch-ms>.xlsx``.
        :return: The artifact reference, or ``None`` when no metaproperty exists.
        """
        config = self._client._config
        store = self._client.store
        if filename:
            store.path_for(filename)
        metaproperties = self.get_all(options=True, count=True)
        if not metaproperties:
            logger.info("No metaproperties found to export")
            return None

        mp_table, option_table = flatten_metaproperties(metaproperties)
        logger.info("Extracted %d meta-properties and %d property options", len(mp_table), len(option_table))
        name = filename or store.default_filename("meta-properties", config.domain)
        path = store.write(
            name,
            [(METAPROPERTY_SHEET_NAME, mp_table), (OPTION_SHEET_NAME, option_table)],
        )
        return MetapropertyExportResult(
            filename=path.name,
            download_url=store.download_url(path.name),
            path=path,
            properties_count=len(mp_table),
            options_count=len(option_table),
        )

    def from_media(
        self,
        limit: Optional[int] = None,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Summarise the metaproperties used by a sample of media items.

        :param limit: Media items to sample (default: ``metaproperty_sample_limit``).
        :param filters: Bynder media filters for the sample.
        :return: ``{"properties", "propertyOptions", "totalProperties", "totalOptions",
            "mediaItemsSampled"}``, or ``None`` when the sample is empty.
        """
        limit = self._client._config.metaproperty_sample_limit if limit is None else limit
        logger.info("Fetching media to extract meta-properties...")
        items = self._client.media.fetch_all(limit, filters)
        if not items:
            return None
        properties, options = extract_media_metaproperties(items)
        return {
            "properties": [mp.to_dict() for mp in properties],
            "propertyOptions": [opt.to_dict() for opt in options],
            "totalProperties": len(properties),
            "totalOptions": len(options),
            "mediaItemsSampled": len(items),
        }

    def content_access_list(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        """List metaproperties through the content-access API, forwarding ``params`` as query values."""
        logger.info("Fetching metaproperties from content access API...")
        return self._client._get_upstream()._list_content_access_metaproperties(params)

    def content_access_get(self, metaproperty_id: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Retrieve one metaproperty through the content-access API.

        :raises ~bynder_proxy.core.errors.InvalidParameterError: If ``metaproperty_id`` is empty.
        :raises ~bynder_proxy.core.errors.NotFoundError: If no such metaproperty exists.
        """
        if not metaproperty_id or not str(metaproperty_id).strip():
            raise InvalidParameterError("Metaproperty ID is required", subcode=VALIDATION_MISSING_PARAMETER)
        logger.info("Fetching metaproperty %s from content access API...", metaproperty_id)
        result = self._client._get_upstream()._get_content_access_metaproperty(metaproperty_id, params)
        if result is None:
            raise NotFoundError(f"Metaproperty with ID {metaproperty_id} not found")
        return result


__all__ = ["MetapropertyOperations", "extract_media_metaproperties"]
