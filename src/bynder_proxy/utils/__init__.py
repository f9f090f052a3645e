# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Utilities for the proxy: record flattening, value formatting and spreadsheet writing.
"""

__all__ = []
