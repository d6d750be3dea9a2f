import hashlib
import hmac
import os
import random
import secrets
import string
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from timekeeper.core.config import settings

PBKDF2_ALGORITHM = "sha256"
PBKDF2_ITERATIONS = 260_000
SALT_BYTES = 16


class TokenGenerator:
    """
    Activation / reset / session tokens: lowercase a-z, fixed length.
    The random source is injected so tests can seed it.
    """

    def __init__(self, length: int = settings.TOKEN_LENGTH, rng: Optional[random.Random] = None):
        self.length = length
        self.rng = rng or secrets.SystemRandom()

    def create_token(self) -> str:
        return "".join(self.rng.choice(string.ascii_lowercase) for _ in range(self.length))


class PasswordEncoder:
    """
    Salted PBKDF2 hashes stored as "pbkdf2_sha256$<iterations>$<salt hex>$<hash hex>".
    """

    def __init__(self, iterations: int = PBKDF2_ITERATIONS):
        self.iterations = iterations

    def encode(self, raw_password: str) -> str:
        salt = os.urandom(SALT_BYTES)
        digest = self._digest(raw_password, salt, self.iterations)
        return f"pbkdf2_{PBKDF2_ALGORITHM}${self.iterations}${salt.hex()}${digest.hex()}"

    def matches(self, raw_password: Optional[str], encoded_password: Optional[str]) -> bool:
        if raw_password is None or not encoded_password:
            return False
        try:
            _, iterations, salt_hex, digest_hex = encoded_password.split("$")
            salt = bytes.fromhex(salt_hex)
            expected = bytes.fromhex(digest_hex)
            rounds = int(iterations)
        except ValueError:
            return False
        return hmac.compare_digest(self._digest(raw_password, salt, rounds), expected)

    @staticmethod
    def _digest(raw_password: str, salt: bytes, iterations: int) -> bytes:
        return hashlib.pbkdf2_hmac(PBKDF2_ALGORITHM, raw_password.encode("utf-8"), salt, iterations)


def is_email_address(mail: Optional[str]) -> bool:
    if not mail:
        return False
    try:
        validate_email(mail, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True
