"""Store a PostgreSQL connection profile and use it to provision databases."""

from __future__ import annotations

__version__ = "0.1.0"
