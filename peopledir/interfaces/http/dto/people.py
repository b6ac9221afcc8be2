# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from peopledir.domain import Person, PhoneNumber


class PhoneNumberDTO(BaseModel):
    type: str = Field(max_length=64)
    number: str = Field(min_length=1, max_length=64)

    model_config = ConfigDict(from_attributes=True)


class PersonPayloadDTO(BaseModel):
    """Writable person fields; ``version`` is the one the client last saw."""

    name: str = Field(max_length=256)
    title: str = ""
    department: str = ""
    email_address: str = ""
    comment: str = ""
    phone_numbers: list[PhoneNumberDTO] = Field(default_factory=list)
    street: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""
    version: int = Field(0, ge=0)

    def fields(self) -> dict[str, object]:
        values = self.model_dump(exclude={"phone_numbers", "version"})
        values["phone_numbers"] = tuple(
            PhoneNumber(type=phone.type, number=phone.number) for phone in self.phone_numbers
        )
        return values

    def to_entity(self) -> Person:
        return Person(version=self.version, **self.fields())


class PersonDTO(BaseModel):
    id: int
    name: str
    title: str
    department: str
    email_address: str
    comment: str
    phone_numbers: list[PhoneNumberDTO]
    street: str
    city: str
    state: str
    postal_code: str
    country: str
    created_at: datetime
    changed_at: datetime
    version: int

    model_config = ConfigDict(from_attributes=True)
