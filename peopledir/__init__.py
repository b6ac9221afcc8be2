# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Personnel directory: people, users and session-token authentication."""

__version__ = "0.1.0"
