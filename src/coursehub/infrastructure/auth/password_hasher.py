import hashlib
import hmac
import secrets
from dataclasses import dataclass

HASH_PREFIX = "pbkdf2_sha256$"


@dataclass(slots=True, frozen=True)
class Pbkdf2PasswordHasher:
    """
    PBKDF2-HMAC-SHA256 hashes in the form
    pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>
    """

    iterations: int = 260_000
    salt_bytes: int = 16

    def hash(self, password: str) -> str:
        salt = secrets.token_hex(self.salt_bytes)
        digest = self._digest(password, salt, self.iterations)
        return f"{HASH_PREFIX}{self.iterations}${salt}${digest}"

    def is_hashed(self, value: str) -> bool:
        return value.startswith(HASH_PREFIX)

    def verify(self, password: str, hashed: str) -> bool:
        if not self.is_hashed(hashed):
            return False
        try:
            iterations, salt, expected = hashed[len(HASH_PREFIX):].split("$")
            digest = self._digest(password, salt, int(iterations))
        except ValueError:
            return False
        return hmac.compare_digest(digest, expected)

    @staticmethod
    def _digest(password: str, salt: str, iterations: int) -> str:
        return hashlib.pbkdf2_hmac(
            "sha256",
            password.encode(),
            salt.encode(),
            iterations,
        ).hex()
