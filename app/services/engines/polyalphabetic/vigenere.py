import string
from typing import ClassVar

from app.core.config import get_settings
from app.models.schemas import StageKind, SubstitutionParams
from app.services.engines.base import CipherEngine
from app.services.engines.registry import EngineRegistry


@EngineRegistry.register
class VigenereEngine(CipherEngine):
    """
    Vigenère cipher engine.

    A polyalphabetic substitution cipher that uses a keyword to determine
    the shift for each letter. Each letter of the keyword represents a
    different Caesar shift applied in sequence.

    Only letters consume a key position: digits, punctuation and whitespace
    are copied through and leave the key cursor where it was. The case of
    every letter is preserved. An empty key leaves the text unchanged.
    """

    name = "Vigenère Cipher"
    cipher_type = StageKind.SUBSTITUTION
    description = (
        "A polyalphabetic cipher where each letter is shifted by a different amount "
        "based on a repeating keyword. Non-letters pass through unchanged."
    )
    params_model = SubstitutionParams

    ALPHABET: ClassVar[str] = string.ascii_uppercase

    def encrypt(self, plaintext: str, params: SubstitutionParams) -> str:
        """Encrypt using the keyword."""
        return self._shift(plaintext, params.key, 1)

    def decrypt(self, ciphertext: str, params: SubstitutionParams) -> str:
        """Decrypt using the keyword."""
        return self._shift(ciphertext, params.key, -1)

    def default_params(self) -> SubstitutionParams:
        return SubstitutionParams(key=get_settings().default_vigenere_key)

    def explain(self, params: SubstitutionParams) -> str:
        """Generate human-readable explanation."""
        key_str = params.key.upper()

        if not key_str:
            return "Vigenère cipher with an empty keyword: the text is left unchanged."

        shifts = [self.ALPHABET.index(c) for c in key_str]
        shift_desc = ", ".join(f"{key_str[i]}={shifts[i]}" for i in range(len(key_str)))

        return (
            f"Vigenère cipher with keyword '{key_str}' (length {len(key_str)}). "
            f"Letter shifts: {shift_desc}. "
            f"Each letter is shifted by the corresponding key letter's position "
            f"in the alphabet; other characters are kept as they are."
        )

    def _shift(self, text: str, key: str, direction: int) -> str:
        """Shift every ASCII letter of text by the cycling key, forward or back."""
        key = "".join(c for c in key.upper() if c in self.ALPHABET)
        if not key:
            return text

        result = []
        key_idx = 0

        for char in text:
            if char not in string.ascii_letters:
                result.append(char)
                continue

            shift = self.ALPHABET.index(key[key_idx % len(key)])
            shifted = self.ALPHABET[(self.ALPHABET.index(char.upper()) + direction * shift) % 26]
            result.append(shifted if char.isupper() else shifted.lower())
            key_idx += 1

        return "".join(result)
