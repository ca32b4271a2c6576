from __future__ import annotations

import threading

import pytest

from conftest import MemoryStorage, person, record
from safetynet.core.errors import ConflictError, InvalidFormatError, NotFoundError, PersistenceError
from safetynet.domain.models import FireStation, MedicalRecord, Person
from safetynet.services.store import Store


def assert_invariants(store: Store) -> None:
    people = store.list_people()
    stations = store.list_stations()
    records = store.list_records()
    assert len({p.key for p in people}) == len(people)
    assert len({r.key for r in records}) == len(records)
    assert len({s.address for s in stations}) == len(stations)
    by_key = {r.key: r for r in records}
    for p in people:
        assert p.medical_record == by_key.get(p.key)
    for s in stations:
        assert [p.key for p in s.persons] == [p.key for p in people if p.address == s.address]


def test_load_builds_derived_links(store):
    assert_invariants(store)
    john = store.get_person("John", "Boyd")
    assert john.medical_record is not None
    assert john.medical_record.birthdate == "03/06/1984"
    assert store.get_person("Eric", "Cadigan").medical_record is None
    culver = store.get_station("1509 Culver St")
    assert [p.first_name for p in culver.persons] == ["John", "Jacob", "Tenley", "Roger"]
    assert store.get_station("489 Manchester St").persons == []


def test_load_skips_duplicate_keys(sample_db):
    sample_db["persons"].append(person("John", "Boyd", address="elsewhere"))
    store = Store(MemoryStorage(sample_db))
    store.load()
    assert [p.address for p in store.list_people() if p.key == ("John", "Boyd")] == ["1509 Culver St"]


def test_create_person_links_to_existing_station(store, storage):
    created = store.create_person(Person.from_dict(person("Zach", "Zemicks", address="489 Manchester St")))
    assert created.key == ("Zach", "Zemicks")
    assert [p.first_name for p in store.get_station("489 Manchester St").persons] == ["Zach"]
    assert storage.saves == 1
    assert storage.db["persons"][-1]["firstName"] == "Zach"
    assert_invariants(store)


def test_create_person_conflict(store, storage):
    with pytest.raises(ConflictError):
        store.create_person(Person.from_dict(person("John", "Boyd", address="other")))
    assert storage.saves == 0
    assert store.get_person("John", "Boyd").address == "1509 Culver St"


def test_identity_is_case_sensitive(store):
    store.create_person(Person.from_dict(person("john", "boyd")))
    assert store.get_person("john", "boyd").medical_record is None
    assert len(store.get_station("1509 Culver St").persons) == 5


def test_update_person_moves_between_stations(store, storage):
    moved = Person.from_dict(person("Roger", "Boyd", address="644 Gershwin Cir", phone="841-874-0000"))
    store.update_person(moved)
    assert [p.first_name for p in store.get_station("1509 Culver St").persons] == ["John", "Jacob", "Tenley"]
    assert [p.first_name for p in store.get_station("644 Gershwin Cir").persons] == ["Roger", "Peter"]
    roger = store.get_person("Roger", "Boyd")
    assert roger.phone == "841-874-0000"
    assert roger.medical_record is not None
    assert storage.saves == 1
    assert_invariants(store)


def test_update_missing_person(store, storage):
    with pytest.raises(NotFoundError):
        store.update_person(Person.from_dict(person("Nobody", "Here")))
    assert storage.saves == 0


def test_delete_person_cascades_to_medical_record(store, storage):
    store.delete_person("John", "Boyd")
    with pytest.raises(NotFoundError):
        store.get_person("John", "Boyd")
    with pytest.raises(NotFoundError):
        store.get_record("John", "Boyd")
    assert "John" not in [p.first_name for p in store.get_station("1509 Culver St").persons]
    assert len(storage.db["medicalrecords"]) == 4
    assert_invariants(store)


def test_delete_person_without_record_keeps_other_records(store, storage):
    store.delete_person("Eric", "Cadigan")
    assert len(store.list_people()) == 5
    assert len(store.list_records()) == 5
    assert store.get_station("951 LoneTree Rd").persons == []


def test_delete_missing_person(store):
    with pytest.raises(NotFoundError):
        store.delete_person("Nobody", "Here")


def test_create_station_computes_residents(store, storage):
    store.delete_station_by_address("644 Gershwin Cir")
    created = store.create_station(FireStation(address="644 Gershwin Cir", station="5"))
    assert [p.first_name for p in created.persons] == ["Peter"]
    assert storage.db["firestations"][-1] == {"address": "644 Gershwin Cir", "station": "5"}


def test_create_station_conflict(store):
    with pytest.raises(ConflictError):
        store.create_station(FireStation(address="1509 Culver St", station="9"))


def test_update_station_keeps_order_and_residents(store, storage):
    store.update_station(FireStation(address="1509 Culver St", station="7"))
    stations = store.list_stations()
    assert stations[0].address == "1509 Culver St"
    assert stations[0].station == "7"
    assert len(stations[0].persons) == 4
    assert storage.db["firestations"][0] == {"address": "1509 Culver St", "station": "7"}


def test_update_missing_station(store):
    with pytest.raises(NotFoundError):
        store.update_station(FireStation(address="nowhere", station="1"))


def test_delete_station_by_number_removes_every_match(store, storage):
    store.update_station(FireStation(address="644 Gershwin Cir", station="3"))
    store.delete_station_by_number("3")
    assert store.stations_by_number("3") == []
    assert [s.address for s in store.list_stations()] == ["951 LoneTree Rd", "489 Manchester St"]
    assert storage.saves == 2


def test_delete_station_not_found(store):
    with pytest.raises(NotFoundError):
        store.delete_station_by_address("nowhere")
    with pytest.raises(NotFoundError):
        store.delete_station_by_number("99")


def test_create_record_links_person(store, storage):
    store.create_record(MedicalRecord.from_dict(record("Eric", "Cadigan", "08/06/1945", ["tradoxidine:400mg"])))
    eric = store.get_person("Eric", "Cadigan")
    assert eric.medical_record is not None
    assert eric.medical_record.medications == ["tradoxidine:400mg"]
    assert storage.saves == 1
    assert_invariants(store)


def test_create_record_requires_person(store, storage):
    with pytest.raises(NotFoundError) as exc:
        store.create_record(MedicalRecord.from_dict(record("Nobody", "Here", "01/01/2000")))
    assert exc.value.message == "There is no person with this name"
    assert storage.saves == 0


def test_create_record_conflict(store):
    with pytest.raises(ConflictError):
        store.create_record(MedicalRecord.from_dict(record("John", "Boyd", "01/01/2000")))


def test_create_record_rejects_bad_birthdate(store, storage):
    with pytest.raises(InvalidFormatError):
        store.create_record(MedicalRecord.from_dict(record("Eric", "Cadigan", "1945-08-06")))
    assert store.get_person("Eric", "Cadigan").medical_record is None
    assert storage.saves == 0


def test_update_record(store, storage):
    store.update_record(MedicalRecord.from_dict(record("John", "Boyd", "03/06/1985", [], ["pollen"])))
    john = store.get_person("John", "Boyd")
    assert john.medical_record.birthdate == "03/06/1985"
    assert john.medical_record.medications == []
    assert john.medical_record.allergies == ["pollen"]
    assert storage.db["medicalrecords"][0]["allergies"] == ["pollen"]


def test_update_missing_record(store):
    with pytest.raises(NotFoundError):
        store.update_record(MedicalRecord.from_dict(record("Eric", "Cadigan", "01/01/2000")))


def test_delete_record_unlinks_person(store, storage):
    store.delete_record("Tenley", "Boyd")
    assert store.get_person("Tenley", "Boyd").medical_record is None
    with pytest.raises(NotFoundError):
        store.delete_record("Tenley", "Boyd")
    assert_invariants(store)


def test_document_excludes_derived_links(store):
    document = store.to_document()
    assert all("medicalRecord" not in p and "medical_record" not in p for p in document["persons"])
    assert all(set(s) == {"address", "station"} for s in document["firestations"])


def test_created_entities_are_copied(store):
    payload = Person.from_dict(person("Zach", "Zemicks"))
    store.create_person(payload)
    payload.address = "mutated"
    assert store.get_person("Zach", "Zemicks").address == "1509 Culver St"


def test_returned_entities_are_detached(store, storage):
    roger = store.get_person("Roger", "Boyd")
    roger.address = "644 Gershwin Cir"
    roger.medical_record.allergies.append("pollen")
    store.list_people()[0].phone = "000"
    store.get_station("1509 Culver St").persons.clear()
    store.list_stations()[1].station = "9"
    store.get_record("John", "Boyd").medications.clear()

    assert store.get_person("Roger", "Boyd").address == "1509 Culver St"
    assert store.get_record("Roger", "Boyd").allergies == []
    assert store.get_person("John", "Boyd").phone == "841-874-6512"
    assert [p.first_name for p in store.get_station("1509 Culver St").persons] == ["John", "Jacob", "Tenley", "Roger"]
    assert [p.first_name for p in store.get_station("644 Gershwin Cir").persons] == ["Peter"]
    assert store.get_station("644 Gershwin Cir").station == "1"
    assert store.get_record("John", "Boyd").medications == ["aznol:350mg", "hydrapermazol:100mg"]
    assert_invariants(store)

    store.delete_record("Peter", "Duncan")
    assert [p["address"] for p in storage.db["persons"]].count("1509 Culver St") == 4


def test_mutation_results_are_detached(store):
    created = store.create_person(Person.from_dict(person("Zach", "Zemicks")))
    created.address = "elsewhere"
    updated = store.update_station(FireStation(address="1509 Culver St", station="7"))
    updated.persons.clear()
    assert store.get_person("Zach", "Zemicks").address == "1509 Culver St"
    assert len(store.get_station("1509 Culver St").persons) == 5
    assert_invariants(store)


def test_load_rejects_malformed_entries(sample_db):
    sample_db["persons"] = {"a": 1}
    with pytest.raises(PersistenceError) as exc:
        Store(MemoryStorage(sample_db)).load()
    assert exc.value.__cause__ is not None


def test_invariants_after_mixed_sequence(store):
    store.create_person(Person.from_dict(person("Lily", "Cooper", address="489 Manchester St")))
    store.create_record(MedicalRecord.from_dict(record("Lily", "Cooper", "03/06/1994")))
    store.update_person(Person.from_dict(person("Lily", "Cooper", address="1509 Culver St")))
    store.delete_person("Jacob", "Boyd")
    store.create_station(FireStation(address="29 15th St", station="2"))
    store.update_person(Person.from_dict(person("Peter", "Duncan", address="29 15th St")))
    store.delete_record("Roger", "Boyd")
    assert_invariants(store)
    assert [p.first_name for p in store.get_station("29 15th St").persons] == ["Peter"]


def test_concurrent_writers_and_readers_keep_invariants(store):
    errors = []

    def writer(n):
        try:
            for i in range(20):
                first = f"W{n}-{i}"
                store.create_person(Person.from_dict(person(first, "Thread", address="489 Manchester St")))
                store.update_person(Person.from_dict(person(first, "Thread", address="1509 Culver St")))
        except Exception as exc:  # pragma: no cover - surfaced below
            errors.append(exc)

    def reader():
        try:
            for _ in range(50):
                with store.reading() as view:
                    for s in view.stations:
                        expected = [p.key for p in view.people if p.address == s.address]
                        assert [p.key for p in s.persons] == expected
        except Exception as exc:  # pragma: no cover - surfaced below
            errors.append(exc)

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(3)]
    threads += [threading.Thread(target=reader) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert errors == []
    assert_invariants(store)
    assert len(store.get_station("1509 Culver St").persons) == 64
