# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Directory entries and the rules they carry."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime

from peopledir.shared.errors.validation import invariant_violation
from peopledir.shared.utils.clock import as_utc, as_utc_or


@dataclass(slots=True, frozen=True)
class PhoneNumber:
    type: str
    number: str

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "number": self.number}


def phone_numbers_from(items: Iterable[PhoneNumber | dict]) -> tuple[PhoneNumber, ...]:
    result = []
    for item in items:
        if isinstance(item, PhoneNumber):
            result.append(item)
        else:
            result.append(PhoneNumber(type=str(item.get("type", "")), number=str(item.get("number", ""))))
    return tuple(result)


@dataclass(slots=True, frozen=True)
class Person:
    """A directory entry. ``version`` guards against lost updates."""

    name: str
    id: int = 0
    title: str = ""
    department: str = ""
    email_address: str = ""
    comment: str = ""
    phone_numbers: tuple[PhoneNumber, ...] = field(default_factory=tuple)
    street: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""
    created_at: datetime | None = None
    changed_at: datetime | None = None
    version: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.phone_numbers, tuple):
            object.__setattr__(self, "phone_numbers", phone_numbers_from(self.phone_numbers))

    def validate(self) -> None:
        if not self.name.strip():
            raise invariant_violation("name", "name must not be empty")
        if self.created_at is None or self.changed_at is None:
            raise invariant_violation("created_at", "invalid timestamps")

    def prepared_for_insert(self, now: datetime) -> Person:
        """Return the record as it is stored by an insert."""

        person = replace(
            self,
            created_at=as_utc_or(self.created_at, now),
            changed_at=as_utc_or(self.changed_at, now),
            version=self.version + 1,
        )
        person.validate()
        return person

    def prepared_for_update(self, now: datetime) -> Person:
        """Return the record as it is stored by a successful update."""

        person = replace(
            self,
            created_at=as_utc_or(self.created_at, now),
            changed_at=as_utc(now),
            version=self.version + 1,
        )
        person.validate()
        return person

    def __str__(self) -> str:
        return f"<Person {self.name} ({self.id})>"
