"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the package is defined here once,
so models can simply annotate their fields::

    from aerobic_player.domain.shared.types import NonEmptyStr, Seconds

    class MyModel(BaseModel):
        name: NonEmptyStr
        offset: Seconds
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

# ── Numeric constraints ─────────────────────────────────────────────

PositiveInt = Annotated[int, Field(gt=0)]
"""Integer > 0."""

NonNegativeFloat = Annotated[float, Field(ge=0.0)]
"""Float >= 0.0."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

ItemNameStr = Annotated[str, Field(min_length=1, max_length=500)]
"""Item display name: 1-500 characters."""


# ── Domain-specific numeric constraints ─────────────────────────────

Seconds = Annotated[float, Field(ge=0.0)]
"""A point or length on an item's time axis, in seconds."""

ItemOrder = Annotated[int, Field(ge=0)]
"""Zero-based position of an item in the playlist."""

ChunkCount = Annotated[int, Field(ge=2)]
"""Number of equal-width chunks an item is split into (at least two)."""

RepeatCount = Annotated[int, Field(ge=1)]
"""How often each chunk is repeated (at least once)."""
