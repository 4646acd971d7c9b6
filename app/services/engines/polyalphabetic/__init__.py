"""Polyalphabetic cipher engines."""

from app.services.engines.polyalphabetic.vigenere import VigenereEngine

__all__ = [
    "VigenereEngine",
]
