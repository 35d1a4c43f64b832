"""Gravity Bridge <-> Ethereum transfer routing, message encoding and fee quotes."""

from __future__ import annotations

__version__ = "0.1.0"
