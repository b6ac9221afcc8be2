from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from peopledir.domain import Person, PhoneNumber, Storage
from peopledir.shared.errors import ConflictError, NotFoundError, ValidationError


def _person(**overrides) -> Person:
    values = {
        "name": "Tamara Skibicki",
        "title": "Engineer",
        "department": "R&D",
        "email_address": "tamara@example.org",
        "phone_numbers": (PhoneNumber(type="work", number="555-0100"),),
        "city": "Hamburg",
        "country": "DE",
    }
    values.update(overrides)
    return Person(**values)


def test_insert_then_find_round_trip(storage: Storage, clock) -> None:
    inserted = storage.insert_person(_person())

    assert inserted.id > 0
    assert inserted.version == 1
    assert inserted.created_at == clock.now
    assert storage.find_person(inserted.id) == inserted


def test_version_scenario(storage: Storage, clock) -> None:
    inserted = storage.insert_person(Person(name="Tamara Skibicki", version=0))
    assert inserted.version == 1

    clock.advance(timedelta(minutes=5))
    phones = (PhoneNumber(type="mobile", number="+49 170 000000"),)
    updated = storage.update_person(replace(inserted, phone_numbers=phones))

    assert updated.version == 2
    assert updated.phone_numbers == phones
    assert updated.created_at == inserted.created_at
    assert updated.changed_at == clock.now

    with pytest.raises(ConflictError):
        storage.update_person(replace(inserted, name="Stale Write"))

    assert storage.find_person(inserted.id) == updated


def test_update_missing_record_conflicts(storage: Storage) -> None:
    with pytest.raises(ConflictError):
        storage.update_person(_person(id=4711, version=1))


def test_update_rejects_invalid_record(storage: Storage) -> None:
    inserted = storage.insert_person(_person())

    with pytest.raises(ValidationError):
        storage.update_person(replace(inserted, name=""))

    assert storage.find_person(inserted.id) == inserted


def test_insert_rejects_empty_name(storage: Storage) -> None:
    with pytest.raises(ValidationError):
        storage.insert_person(_person(name=" "))

    assert list(storage.list_people()) == []


def test_phone_number_order_is_preserved(storage: Storage) -> None:
    phones = tuple(PhoneNumber(type=f"t{i}", number=str(i)) for i in range(5, 0, -1))

    inserted = storage.insert_person(_person(phone_numbers=phones))

    assert storage.find_person(inserted.id).phone_numbers == phones


def test_concurrent_updates_exactly_one_wins(storage: Storage) -> None:
    inserted = storage.insert_person(_person())
    barrier = threading.Barrier(2)
    outcomes: list[str] = []
    lock = threading.Lock()

    def worker(name: str) -> None:
        barrier.wait()
        try:
            storage.update_person(replace(inserted, name=name))
        except ConflictError:
            result = "conflict"
        else:
            result = name
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=worker, args=(n,)) for n in ("Alice", "Bob")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert sorted(outcomes).count("conflict") == 1
    winner = next(outcome for outcome in outcomes if outcome != "conflict")
    stored = storage.find_person(inserted.id)
    assert stored.name == winner
    assert stored.version == 2


def test_delete_then_find_fails(storage: Storage) -> None:
    inserted = storage.insert_person(_person())

    storage.delete_person(inserted.id)

    with pytest.raises(NotFoundError):
        storage.find_person(inserted.id)
    with pytest.raises(NotFoundError):
        storage.delete_person(inserted.id)


def test_list_people_is_ordered_by_id(storage: Storage) -> None:
    first = storage.insert_person(_person(name="Zoe"))
    second = storage.insert_person(_person(name="Adam"))

    assert [p.id for p in storage.list_people()] == [first.id, second.id]


def test_fuzzy_find_is_case_insensitive_substring(storage: Storage) -> None:
    tamara = storage.insert_person(_person(name="Tamara Skibicki"))
    storage.insert_person(_person(name="Bernd Lauert"))
    tam = storage.insert_person(_person(name="Tam O'Shanter"))

    hits = storage.fuzzy_find_people("TAM")

    assert [p.id for p in hits] == [tamara.id, tam.id]
    assert storage.fuzzy_find_people("skib") == [tamara]
    assert list(storage.fuzzy_find_people("nobody")) == []


def test_fuzzy_find_folds_non_ascii_letters(storage: Storage) -> None:
    joerg = storage.insert_person(_person(name="Jörg Ölmann"))
    storage.insert_person(_person(name="Olaf Olmann"))

    assert [p.id for p in storage.fuzzy_find_people("ÖLMANN")] == [joerg.id]
    assert [p.id for p in storage.fuzzy_find_people("jÖrg")] == [joerg.id]


def test_fuzzy_find_treats_wildcards_literally(storage: Storage) -> None:
    storage.insert_person(_person(name="Tamara Skibicki"))
    percent = storage.insert_person(_person(name="100% Effort"))

    assert [p.id for p in storage.fuzzy_find_people("%")] == [percent.id]
    assert list(storage.fuzzy_find_people("_")) == []


def test_naive_timestamps_come_back_as_utc(storage: Storage, clock) -> None:
    naive = datetime(2020, 5, 17, 8, 0)

    inserted = storage.insert_person(_person(created_at=naive, changed_at=naive))

    assert inserted.created_at.tzinfo is not None
    assert inserted.created_at == naive.replace(tzinfo=clock.now.tzinfo)
    assert storage.find_person(inserted.id) == inserted
