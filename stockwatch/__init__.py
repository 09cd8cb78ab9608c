"""Stockwatch: notify users when a product they are waiting for is available."""

from __future__ import annotations
