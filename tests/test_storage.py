"""
Tests for the JSON report store: users, records, media fallback and ratings.
"""

import pytest

from kinetics import storage
from kinetics.errors import DuplicateIdentity, PersistenceQuotaExceeded
from kinetics.storage import ReportStore, hash_password


@pytest.fixture
def store(tmp_path):
    return ReportStore(tmp_path / "outputs", media_budget_bytes=1024)


def test_register_and_login(store):
    user = store.register_user("ana", "s3cret", "Coach")

    assert user['id'] == 1
    assert user['password_hash'] == hash_password("s3cret")
    assert store.login_user("ana", "s3cret")['id'] == 1
    assert store.login_user("ana", "wrong") is None
    assert store.login_user("nobody", "s3cret") is None


def test_duplicate_username_rejected(store):
    store.register_user("ana", "pw")
    with pytest.raises(DuplicateIdentity):
        store.register_user("ANA", "other")
    assert len(store.list_users()) == 1


def test_register_validation(store):
    with pytest.raises(ValueError):
        store.register_user("", "pw")
    with pytest.raises(ValueError):
        store.register_user("ana", "pw", role="Admin")


def test_record_ids_are_monotonic(store, boxing_report):
    first = store.save_analysis(1, boxing_report)
    second = store.save_analysis(1, boxing_report)
    store.delete_analysis(second)
    third = store.save_analysis(2, boxing_report)

    assert (first, second, third) == (1, 2, 3)


def test_media_within_budget_is_stored(store, boxing_report):
    record_id = store.save_analysis(1, boxing_report, media=b"\x00" * 100, media_suffix=".mov")
    record = store.get_analysis(record_id)

    assert record['media_path'] == "media/1.mov"
    assert store.media_path(record).read_bytes() == b"\x00" * 100


def test_oversized_media_dropped_but_report_kept(store, boxing_report):
    record_id = store.save_analysis(1, boxing_report, media=b"\x00" * 2048)
    record = store.get_analysis(record_id)

    assert record is not None
    assert record['media_path'] is None
    assert store.media_path(record) is None
    assert store.load_report(record) == boxing_report


def test_user_analyses_filtered_and_newest_first(store, boxing_report):
    store.save_analysis(1, boxing_report)
    store.save_analysis(2, boxing_report)
    store.save_analysis(1, boxing_report)

    records = store.get_user_analyses(1)

    assert [r['id'] for r in records] == [3, 1]
    assert store.get_user_analyses(99) == []


def test_delete_removes_media(store, boxing_report):
    record_id = store.save_analysis(1, boxing_report, media=b"\x01" * 10)
    media = store.media_path(store.get_analysis(record_id))

    assert store.delete_analysis(record_id) is True
    assert store.get_analysis(record_id) is None
    assert not media.exists()
    assert store.delete_analysis(record_id) is False


def test_rating_sets_sensitivity_bias(store, boxing_report):
    record_id = store.save_analysis(1, boxing_report)
    assert store.get_sensitivity_bias() == 'balanced'

    assert store.update_rating(record_id, 2, "way off")
    assert store.get_sensitivity_bias() == 'high'

    assert store.update_rating(record_id, 4, "better")
    assert store.get_sensitivity_bias() == 'balanced'

    record = store.get_analysis(record_id)
    assert record['user_rating'] == 4
    assert record['user_feedback'] == "better"
    # Rating never touches the report body
    assert store.load_report(record) == boxing_report


def test_rating_validation(store, boxing_report):
    record_id = store.save_analysis(1, boxing_report)
    with pytest.raises(ValueError):
        store.update_rating(record_id, 6, "")
    with pytest.raises(ValueError):
        store.update_rating(record_id, 0, "")
    assert store.update_rating(999, 3, "") is False


def test_failed_write_keeps_previous_records(store, boxing_report, monkeypatch):
    store.save_analysis(1, boxing_report)
    store.save_analysis(1, boxing_report, media=b"\x01" * 10)

    def disk_full(payload, f, **kwargs):
        f.write('{"next_')
        raise OSError(28, "No space left on device")

    with monkeypatch.context() as m:
        m.setattr(storage.json, "dump", disk_full)
        with pytest.raises(PersistenceQuotaExceeded):
            store.save_analysis(1, boxing_report, media=b"\x02" * 10)

    assert [r['id'] for r in store.get_user_analyses(1)] == [2, 1]
    assert not (store.media_dir / "3.mp4").exists()
    assert not list(store.base_dir.glob(".*.tmp"))
    assert store.save_analysis(1, boxing_report) == 3


def test_corrupted_file_moved_aside_and_ids_keep_climbing(store, boxing_report):
    store.save_analysis(1, boxing_report, media=b"\x00" * 10)
    store.save_analysis(1, boxing_report, media=b"\x00" * 10)
    store.analyses_file.write_text("{not json")

    assert store.get_user_analyses(1) == []
    assert (store.base_dir / "analyses.json.corrupt").read_text() == "{not json"
    # Stored media still claims ids 1 and 2
    assert store.save_analysis(1, boxing_report) == 3


def test_corrupted_file_with_nothing_saved_starts_at_one(store, boxing_report):
    store.base_dir.mkdir(parents=True)
    store.analyses_file.write_text("{not json")

    assert store.get_user_analyses(1) == []
    assert store.save_analysis(1, boxing_report) == 1
