"""Symmetric block cipher engines."""

from app.services.engines.symmetric.aes import AESEngine

__all__ = [
    "AESEngine",
]
