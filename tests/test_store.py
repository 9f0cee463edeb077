import json

import pytest

from hris.db import COLLECTIONS, JsonStore, StorageError


def test_missing_file_starts_empty(tmp_path):
    db = JsonStore(str(tmp_path / "missing.json"))
    db.load()

    for name in COLLECTIONS:
        assert db.data[name] == []
    assert db.system_settings == {}


def test_mutations_rewrite_the_whole_file(tmp_path):
    path = tmp_path / "database.json"
    db = JsonStore(str(path))
    db.load()
    users = db.collection("users")

    users.insert_one({"id": "u1", "name": "Ann", "role": "employee"})
    users.insert_one({"id": "u2", "name": "Ben", "role": "hr"})
    users.update_one({"id": "u1"}, {"name": "Annie"})
    assert users.delete_one({"id": "u2"}) is True

    on_disk = json.loads(path.read_text())
    assert on_disk["users"] == [{"id": "u1", "name": "Annie", "role": "employee"}]
    assert set(COLLECTIONS) <= set(on_disk)


def test_reload_reads_back_saved_state(tmp_path):
    path = str(tmp_path / "database.json")
    db = JsonStore(path)
    db.load()
    db.collection("roles").insert_one({"id": "r1", "name": "hr"})
    db.update_system_settings({"companyName": "Acme"})

    again = JsonStore(path)
    again.load()
    assert again.collection("roles").find_one({"id": "r1"})["name"] == "hr"
    assert again.system_settings == {"companyName": "Acme"}


def test_find_returns_copies(tmp_path):
    db = JsonStore(str(tmp_path / "database.json"))
    db.load()
    departments = db.collection("departments")
    departments.insert_one({"id": "d1", "name": "Finance"})

    found = departments.find_one({"id": "d1"})
    found["name"] = "changed"

    assert departments.find_one({"id": "d1"})["name"] == "Finance"


def test_equality_filters(tmp_path):
    db = JsonStore(str(tmp_path / "database.json"))
    db.load()
    leaves = db.collection("leaveRequests")
    leaves.insert_one({"id": "1", "employeeId": "a", "status": "approved"})
    leaves.insert_one({"id": "2", "employeeId": "a", "status": "rejected"})
    leaves.insert_one({"id": "3", "employeeId": "b", "status": "approved"})

    assert [leave["id"] for leave in leaves.find({"employeeId": "a", "status": "approved"})] == ["1"]
    assert leaves.count_documents({"status": "approved"}) == 2
    assert leaves.update_one({"id": "missing"}, {"status": "x"}) is None
    assert leaves.delete_one({"id": "missing"}) is False


def test_corrupt_file_is_treated_as_empty(tmp_path):
    path = tmp_path / "database.json"
    path.write_text("{not json")
    db = JsonStore(str(path))
    db.load()

    assert db.data["users"] == []


def test_unreadable_path_is_treated_as_empty(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")

    beneath_a_file = JsonStore(str(blocker / "database.json"))
    beneath_a_file.load()
    a_directory = JsonStore(str(tmp_path))
    a_directory.load()

    assert beneath_a_file.data["users"] == []
    assert a_directory.data["leaveRequests"] == []


def test_failed_write_raises_storage_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    db = JsonStore(str(blocker / "database.json"))
    db.load()

    with pytest.raises(StorageError):
        db.collection("users").insert_one({"id": "u1"})
