"""Strong cipher collaborators used by the AES pipeline stage."""

from app.services.crypto.passphrase_aes import PassphraseAES, StrongCipher

__all__ = [
    "PassphraseAES",
    "StrongCipher",
]
