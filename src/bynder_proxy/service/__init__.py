# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""FastAPI HTTP surface of the proxy."""

__all__ = []
