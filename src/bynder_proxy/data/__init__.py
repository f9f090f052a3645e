# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Data access layer for the proxy.

This module contains the Bynder Web API client and its in-memory stand-in.
"""

__all__ = []
