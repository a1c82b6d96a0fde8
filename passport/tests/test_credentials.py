from __future__ import annotations

import pytest
from conftest import DeterministicHasher, InMemoryUserRepository

from passport.application.services.credentials import CredentialVerifier
from passport.domain.users.exceptions import (DuplicateEmailError, HashingUnavailableError,
                                              MissingPasswordError)
from passport.shared.errors import ConfigurationError


def _verifier(users: InMemoryUserRepository) -> CredentialVerifier:
    return CredentialVerifier(users=users, hasher_factory=DeterministicHasher)


def test_register_stores_digest_not_plaintext(users: InMemoryUserRepository) -> None:
    user = _verifier(users).register_new_user("Alice", "alice@x.com", "secret")

    assert user.id == 1
    assert user.password_hash == "hashed:secret"
    assert users.find_by_email("alice@x.com") == user


def test_duplicate_email_does_not_mutate_store(users: InMemoryUserRepository) -> None:
    verifier = _verifier(users)
    original = verifier.register_new_user("Alice", "alice@x.com", "secret")

    with pytest.raises(DuplicateEmailError):
        verifier.register_new_user("Mallory", "alice@x.com", "other")

    assert len(users) == 1
    assert users.find_by_email("alice@x.com") == original


def test_duplicate_is_reported_before_missing_password(users: InMemoryUserRepository) -> None:
    verifier = _verifier(users)
    verifier.register_new_user("Alice", "alice@x.com", "secret")

    with pytest.raises(DuplicateEmailError):
        verifier.register_new_user("Alice", "alice@x.com", None)


@pytest.mark.parametrize("password", [None, ""])
def test_missing_password(users: InMemoryUserRepository, password: str | None) -> None:
    with pytest.raises(MissingPasswordError):
        _verifier(users).register_new_user("Alice", "alice@x.com", password)

    assert len(users) == 0


def test_email_is_case_sensitive(users: InMemoryUserRepository) -> None:
    verifier = _verifier(users)
    verifier.register_new_user("Alice", "alice@x.com", "secret")

    other = verifier.register_new_user("Alice", "Alice@x.com", "secret")

    assert other.id == 2


def test_hasher_is_built_once(users: InMemoryUserRepository) -> None:
    calls: list[int] = []

    def factory() -> DeterministicHasher:
        calls.append(1)
        return DeterministicHasher()

    verifier = CredentialVerifier(users=users, hasher_factory=factory)
    assert calls == []

    digest = verifier.hash("pw")
    assert verifier.verify("pw", digest)
    assert not verifier.verify("nope", digest)
    assert calls == [1]


def test_unconstructible_hasher_surfaces_as_hashing_unavailable(
    users: InMemoryUserRepository,
) -> None:
    attempts: list[int] = []

    def factory() -> DeterministicHasher:
        attempts.append(1)
        raise ConfigurationError(context={"password_hash_method": "md5"})

    verifier = CredentialVerifier(users=users, hasher_factory=factory)

    with pytest.raises(HashingUnavailableError) as excinfo:
        verifier.hash("pw")
    with pytest.raises(HashingUnavailableError):
        verifier.register_new_user("Alice", "alice@x.com", "pw")

    assert excinfo.value.status == 500
    assert len(attempts) == 2
    assert len(users) == 0
