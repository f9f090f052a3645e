# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from .service.app import run

if __name__ == "__main__":
    run()
