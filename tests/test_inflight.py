import threading

import pytest

from ebscsi.inflight import VOLUME_OPERATION_ALREADY_EXISTS_MSG, InFlight


@pytest.mark.parametrize(
    "requests",
    [
        pytest.param([("random-vol-name", True, False)], id="success normal"),
        pytest.param(
            [("random-vol-foobar", True, False), ("random-vol-name-foobar", True, False)],
            id="success adding request with different volumeId",
        ),
        pytest.param(
            [("random-vol-name-foobar", True, False), ("random-vol-name-foobar", False, False)],
            id="failed adding request with same volumeId",
        ),
        pytest.param(
            [
                ("random-vol-name", True, False),
                ("random-vol-name", False, True),
                ("random-vol-name", True, False),
            ],
            id="success add, delete, add copy",
        ),
    ],
)
def test_inflight_cases(requests):
    db = InFlight()
    for volume_id, expected, delete in requests:
        result = False
        if delete:
            db.delete(volume_id)
        else:
            result = db.insert(volume_id)
        assert result == expected


def test_delete_missing_key_is_ignored():
    db = InFlight()
    db.delete("absent")
    assert len(db) == 0
    assert db.insert("absent") is True


def test_contains_tracks_insert_and_delete():
    db = InFlight()
    db.insert("vol-1")
    assert "vol-1" in db
    db.delete("vol-1")
    assert "vol-1" not in db


def test_hold_releases_key_on_exit():
    db = InFlight()
    with db.hold("vol-1") as acquired:
        assert acquired is True
        assert "vol-1" in db
    assert "vol-1" not in db


def test_hold_does_not_release_key_held_elsewhere():
    db = InFlight()
    db.insert("vol-1")
    with db.hold("vol-1") as acquired:
        assert acquired is False
    assert "vol-1" in db


def test_hold_releases_key_on_exception():
    db = InFlight()
    with pytest.raises(RuntimeError):
        with db.hold("vol-1"):
            raise RuntimeError("boom")
    assert "vol-1" not in db


def test_concurrent_inserts_admit_exactly_one():
    db = InFlight()
    results = []
    lock = threading.Lock()

    def worker():
        ok = db.insert("shared")
        with lock:
            results.append(ok)

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert results.count(True) == 1
    assert len(results) == 16
    assert len(db) == 1
    assert "shared" in db
    assert db.insert("shared") is False


def test_already_exists_message_names_volume():
    message = VOLUME_OPERATION_ALREADY_EXISTS_MSG.format("vol-9")
    assert message == "An operation with the given Volume vol-9 already exists"