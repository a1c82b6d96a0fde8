"""Password hashing strategies."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from passport.domain.users.repositories import PasswordHasher
from passport.shared.config.settings import HashingConfig
from passport.shared.errors import ConfigurationError

SUPPORTED_METHODS = ("scrypt", "pbkdf2")


class WerkzeugPasswordHasher(PasswordHasher):
    def __init__(self, method: str = "scrypt", salt_length: int = 16) -> None:
        if method.split(":", 1)[0] not in SUPPORTED_METHODS:
            raise ConfigurationError(context={"password_hash_method": method})
        self._method = method
        self._salt_length = salt_length

    def hash(self, password: str) -> str:
        return str(
            generate_password_hash(password, method=self._method, salt_length=self._salt_length)
        )

    def verify(self, password: str, hashed: str) -> bool:
        return bool(check_password_hash(hashed, password))


def build_password_hasher(config: HashingConfig) -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher(method=config.method, salt_length=config.salt_length)
