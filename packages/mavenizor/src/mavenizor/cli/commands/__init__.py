# SPDX-License-Identifier: MIT
"""CLI command implementations."""

from . import convert

__all__ = ["convert"]
