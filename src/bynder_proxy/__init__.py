# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
REST proxy over the Bynder digital-asset-management API.

Provides paginated media retrieval, single-item lookup, metaproperty listing
and spreadsheet export of media and metaproperty data.
"""

from .client import BynderProxyClient
from .core.config import ProxyConfig

__version__ = "1.0.0"

__all__ = ["BynderProxyClient", "ProxyConfig", "__version__"]
