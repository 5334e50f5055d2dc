"""Built-in cache provider adapters."""

from __future__ import annotations
