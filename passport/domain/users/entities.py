# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .expiration import is_expired


@dataclass(slots=True, frozen=True)
class User:

    id: int
    name: str
    email: str
    password_hash: str
    created_at: datetime

    def to_public_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass(slots=True, frozen=True)
class SessionToken:
    """A bearer credential owned by one user.

    ``expiration_time`` is written once from ``issued_at`` and never extended.
    """

    id: int
    user_id: int
    token: str
    issued_at: datetime
    expiration_time: str

    def is_expired(self, now: datetime) -> bool:
        return is_expired(self.expiration_time, now)
