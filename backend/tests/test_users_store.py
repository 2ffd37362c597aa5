import threading

import pytest

from notes_api.errors import DuplicateUsername, ValidationError
from notes_api.storage.users_store import UsersStore


def test_create_and_find(tmp_path):
    users = UsersStore(tmp_path)
    acc = users.create("alice", "$2b$04$hash")
    found = users.find_by_username("alice")
    assert found == acc
    assert found.password_hash == "$2b$04$hash"


def test_unknown_username_is_none(tmp_path):
    users = UsersStore(tmp_path)
    assert users.find_by_username("ghost") is None
    assert users.find_by_username("../etc/passwd") is None


def test_duplicate_username_rejected(tmp_path):
    users = UsersStore(tmp_path)
    first = users.create("alice", "h1")
    with pytest.raises(DuplicateUsername):
        users.create("alice", "h2")
    # the original record is untouched
    assert users.find_by_username("alice") == first


@pytest.mark.parametrize("bad", ["", ".hidden", "..", "a/b", "a\\b", "x" * 65, "spa ce", "alice\n"])
def test_unsafe_usernames_rejected(tmp_path, bad):
    with pytest.raises(ValidationError):
        UsersStore(tmp_path).create(bad, "h")


def test_concurrent_signups_for_same_name_only_one_wins(tmp_path):
    users = UsersStore(tmp_path)
    results: list[str] = []
    barrier = threading.Barrier(8)

    def attempt(i: int) -> None:
        barrier.wait()
        try:
            users.create("racer", f"hash-{i}")
            results.append("ok")
        except DuplicateUsername:
            results.append("dup")

    threads = [threading.Thread(target=attempt, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count("ok") == 1
    assert results.count("dup") == 7
    # no temp files left behind
    assert [p.name for p in (tmp_path / "accounts").iterdir()] == ["racer.json"]
