# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Operation namespace classes for the proxy.

This module contains the operation namespace classes that organize
related operations under intuitive namespaces:
- MediaOperations: media listing, lookup and export
- MetapropertyOperations: metaproperty listing and export
"""

__all__ = []
