"""Transposition cipher engines."""

from app.services.engines.transposition.rail_fence import RailFenceEngine

__all__ = [
    "RailFenceEngine",
]
