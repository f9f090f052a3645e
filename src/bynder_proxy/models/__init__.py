# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Data models for the proxy.

- :class:`~bynder_proxy.models.table.Table`: rectangular result of flattening records.
- :class:`~bynder_proxy.models.metaproperty.Metaproperty`: upstream classification field.
- :class:`~bynder_proxy.models.metaproperty.MetapropertyOption`: selectable value of a metaproperty.

Import models from their modules directly.
"""

__all__ = []
