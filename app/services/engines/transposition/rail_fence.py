from typing import Iterator

from app.core.config import get_settings
from app.models.schemas import StageKind, TranspositionParams
from app.services.engines.base import CipherEngine
from app.services.engines.registry import EngineRegistry


@EngineRegistry.register
class RailFenceEngine(CipherEngine):
    """
    Rail Fence cipher engine.

    The Rail Fence cipher writes the plaintext in a zigzag pattern across
    a number of "rails" (rows), then reads off each rail in order to
    produce the ciphertext.

    Example with 3 rails:
    Plaintext: WEAREDISCOVEREDFLEEATONCE

    W . . . E . . . C . . . R . . . L . . . T . . . E
    . E . R . D . S . O . E . E . F . E . A . O . C .
    . . A . . . I . . . V . . . D . . . E . . . N . .

    Read off rows: WECRLTE + ERDSOEEFEAOC + AIVDEN

    Every character is transposed as-is (case, spaces and punctuation
    included). Fewer than two rails leaves the text unchanged.
    """

    name = "Rail Fence Cipher"
    cipher_type = StageKind.TRANSPOSITION
    description = (
        "A transposition cipher that writes text in a zigzag pattern "
        "across multiple 'rails' (rows), then reads each rail in sequence. "
        "The number of rails is the key."
    )
    params_model = TranspositionParams

    def encrypt(self, plaintext: str, params: TranspositionParams) -> str:
        """Encrypt using the specified number of rails."""
        return self._encrypt(plaintext, params.rails)

    def decrypt(self, ciphertext: str, params: TranspositionParams) -> str:
        """Decrypt using the specified number of rails."""
        return self._decrypt(ciphertext, params.rails)

    def default_params(self) -> TranspositionParams:
        return TranspositionParams(rails=get_settings().default_rails)

    def explain(self, params: TranspositionParams) -> str:
        """Generate human-readable explanation."""
        rails = params.rails

        return (
            f"Rail Fence cipher with {rails} rails. "
            f"The text is written in a zigzag pattern across {rails} rows, "
            f"then each row is read in sequence to form the ciphertext. "
            f"Decryption reverses this process."
        )

    def _zigzag(self, length: int, rails: int) -> Iterator[int]:
        """Yield the rail of each of length positions along the bounce walk."""
        rail = 0
        direction = 1

        for _ in range(length):
            yield rail

            rail += direction

            # Change direction at top or bottom
            if rail == 0 or rail == rails - 1:
                direction = -direction

    def _encrypt(self, plaintext: str, rails: int) -> str:
        """Encrypt using Rail Fence cipher."""
        if not plaintext:
            return ""
        if rails < 2:
            return plaintext

        fence = [[] for _ in range(rails)]

        for char, rail in zip(plaintext, self._zigzag(len(plaintext), rails)):
            fence[rail].append(char)

        # Read off each rail
        return "".join("".join(row) for row in fence)

    def _decrypt(self, ciphertext: str, rails: int) -> str:
        """Decrypt using Rail Fence cipher."""
        if not ciphertext:
            return ""
        if rails < 2:
            return ciphertext

        n = len(ciphertext)

        # Mark the slot each position occupies on the fence
        fence: list[list[str | None]] = [[None] * n for _ in range(rails)]
        marked = [[False] * n for _ in range(rails)]
        for col, rail in enumerate(self._zigzag(n, rails)):
            marked[rail][col] = True

        # Fill marked slots row by row with the ciphertext
        chars = iter(ciphertext)
        for row in range(rails):
            for col in range(n):
                if marked[row][col]:
                    fence[row][col] = next(chars)

        # Read off in zigzag pattern
        return "".join(
            fence[rail][col] for col, rail in enumerate(self._zigzag(n, rails))
        )
