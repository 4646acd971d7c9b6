from app.core.config import get_settings
from app.models.schemas import StageKind, StrongCipherParams
from app.services.crypto.passphrase_aes import PassphraseAES, StrongCipher
from app.services.engines.base import CipherEngine
from app.services.engines.registry import EngineRegistry


@EngineRegistry.register
class AESEngine(CipherEngine):
    """
    AES stage engine.

    Delegates to a StrongCipher collaborator and never looks at the key or
    the ciphertext format itself. Decryption failures propagate as
    DecryptionError.
    """

    name = "AES"
    cipher_type = StageKind.STRONG_CIPHER
    description = (
        "AES-256 keyed by a passphrase. Output is opaque base64 text that "
        "only decrypts with the same passphrase."
    )
    params_model = StrongCipherParams

    def __init__(self, cipher: StrongCipher | None = None):
        self.cipher = cipher or PassphraseAES()

    def encrypt(self, plaintext: str, params: StrongCipherParams) -> str:
        return self.cipher.encrypt(plaintext, params.key)

    def decrypt(self, ciphertext: str, params: StrongCipherParams) -> str:
        return self.cipher.decrypt(ciphertext, params.key)

    def default_params(self) -> StrongCipherParams:
        return StrongCipherParams(key=get_settings().default_aes_key)

    def explain(self, params: StrongCipherParams) -> str:
        return (
            "AES-256 in CBC mode. The key and IV are derived from the passphrase "
            "and a random 8-byte salt stored at the start of the ciphertext."
        )
