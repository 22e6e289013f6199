import threading

import pytest
from sqlalchemy.exc import OperationalError

from learnvow.core.exceptions import (
    DependencyError,
    DependencyTimeoutError,
    ProgressValidationError,
    ResourceNotFoundError,
)
from learnvow.crud import progress_crud
from learnvow.models.reading_progress_model import ReadingProgress
from learnvow.services.progress_store import (
    ProgressStore,
    percentage_from_position,
    validate_percentage,
)


@pytest.fixture
def store(db_session):
    return ProgressStore(db_session)


def _row_count(db, user_id, content_id):
    return (
        db.query(ReadingProgress)
        .filter(ReadingProgress.user_id == user_id, ReadingProgress.content_id == content_id)
        .count()
    )


def test_missing_record_reads_as_zero(store, reader, ebook):
    assert store.get_progress(reader.id, ebook.id) == 0
    assert store.get_record(reader.id, ebook.id) is None


def test_written_value_is_read_back(store, reader, ebook):
    record = store.update_progress(reader.id, ebook.id, 37.5)

    assert record.user_id == reader.id
    assert record.content_id == ebook.id
    assert record.progress == 37.5
    assert record.last_accessed is not None
    assert store.get_progress(reader.id, ebook.id) == 37.5


@pytest.mark.parametrize("boundary", [0, 100, 0.0, 100.0])
def test_bounds_are_inclusive(store, reader, ebook, boundary):
    assert store.update_progress(reader.id, ebook.id, boundary).progress == boundary


@pytest.mark.parametrize("bad_value", [-1, 101, -0.01, 100.01, float("nan"), float("inf")])
def test_out_of_range_is_rejected_and_leaves_record_untouched(store, db_session, reader, ebook, bad_value):
    store.update_progress(reader.id, ebook.id, 55)

    with pytest.raises(ProgressValidationError):
        store.update_progress(reader.id, ebook.id, bad_value)

    assert store.get_progress(reader.id, ebook.id) == 55
    assert _row_count(db_session, reader.id, ebook.id) == 1


def test_out_of_range_first_write_creates_nothing(store, db_session, reader, ebook):
    with pytest.raises(ProgressValidationError):
        store.update_progress(reader.id, ebook.id, 101)

    assert _row_count(db_session, reader.id, ebook.id) == 0


@pytest.mark.parametrize("not_a_number", ["50", None, True, [50]])
def test_non_numbers_are_rejected(store, reader, ebook, not_a_number):
    with pytest.raises(ProgressValidationError):
        store.update_progress(reader.id, ebook.id, not_a_number)


def test_repeating_a_write_is_idempotent(store, db_session, reader, ebook):
    store.update_progress(reader.id, ebook.id, 64)
    store.update_progress(reader.id, ebook.id, 64)

    assert store.get_progress(reader.id, ebook.id) == 64
    assert _row_count(db_session, reader.id, ebook.id) == 1


def test_updates_overwrite_and_refresh_last_accessed(store, reader, ebook):
    first = store.update_progress(reader.id, ebook.id, 10)
    first_accessed = first.last_accessed

    second = store.update_progress(reader.id, ebook.id, 20)

    assert second.id == first.id
    assert second.progress == 20
    assert second.last_accessed >= first_accessed


def test_progress_is_scoped_per_user_and_content(store, reader, other_reader, ebook, audiobook):
    store.update_progress(reader.id, ebook.id, 30)
    store.update_progress(reader.id, audiobook.id, 60)
    store.update_progress(other_reader.id, ebook.id, 90)

    assert store.get_progress(reader.id, ebook.id) == 30
    assert store.get_progress(reader.id, audiobook.id) == 60
    assert store.get_progress(other_reader.id, ebook.id) == 90
    assert store.get_progress(other_reader.id, audiobook.id) == 0


def test_reading_session_scenario(store, reader, ebook):
    assert store.get_progress(reader.id, ebook.id) == 0

    store.update_progress(reader.id, ebook.id, 42)
    assert store.get_progress(reader.id, ebook.id) == 42

    store.update_progress(reader.id, ebook.id, 100)
    assert store.get_progress(reader.id, ebook.id) == 100

    with pytest.raises(ProgressValidationError):
        store.update_progress(reader.id, ebook.id, 150)
    assert store.get_progress(reader.id, ebook.id) == 100


def test_concurrent_first_writes_leave_one_row(session_factory, db_session, reader, ebook):
    values = (25.0, 75.0)
    barrier = threading.Barrier(len(values))
    errors = []

    def write(value):
        session = session_factory()
        try:
            barrier.wait()
            ProgressStore(session).update_progress(reader.id, ebook.id, value)
        except Exception as e:  # collected and asserted on below
            errors.append(e)
        finally:
            session.close()

    threads = [threading.Thread(target=write, args=(v,)) for v in values]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert _row_count(db_session, reader.id, ebook.id) == 1
    assert ProgressStore(db_session).get_progress(reader.id, ebook.id) in values


def test_update_from_position(store, reader, ebook, audiobook):
    assert store.update_from_position(reader.id, ebook.id, 80, 320).progress == 25.0
    assert store.update_from_position(reader.id, audiobook.id, 5400, 5400).progress == 100.0


def test_position_past_the_end_is_rejected(store, reader, ebook):
    store.update_from_position(reader.id, ebook.id, 160, 320)

    with pytest.raises(ProgressValidationError):
        store.update_from_position(reader.id, ebook.id, 321, 320)

    assert store.get_progress(reader.id, ebook.id) == 50.0


def test_tiny_overshoot_is_not_rounded_down_to_complete(store, reader, ebook):
    store.update_progress(reader.id, ebook.id, 40)

    with pytest.raises(ProgressValidationError):
        store.update_from_position(reader.id, ebook.id, 100001, 100000)

    assert store.get_progress(reader.id, ebook.id) == 40.0


def test_row_deleted_before_read_back_is_not_found(store, reader, ebook, monkeypatch):
    monkeypatch.setattr(progress_crud, "get_progress_record", lambda *args, **kwargs: None)

    with pytest.raises(ResourceNotFoundError) as exc_info:
        store.update_progress(reader.id, ebook.id, 50)
    assert exc_info.value.kind == "not_found"


def test_recent_is_newest_first_and_limited(store, reader, ebook, audiobook, unpublished_book):
    store.update_progress(reader.id, ebook.id, 10)
    store.update_progress(reader.id, audiobook.id, 20)
    store.update_progress(reader.id, unpublished_book.id, 30)
    store.update_progress(reader.id, ebook.id, 15)

    recent = store.get_recent(reader.id, limit=2)

    assert [r.content_id for r in recent] == [ebook.id, unpublished_book.id]


def test_row_store_fault_becomes_dependency_error(store, reader, ebook, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("could not connect to server"))

    monkeypatch.setattr(progress_crud, "get_progress_record", broken)

    with pytest.raises(DependencyError) as exc_info:
        store.get_progress(reader.id, ebook.id)
    assert exc_info.value.kind == "dependency"


def test_row_store_timeout_is_distinct(store, reader, ebook, monkeypatch):
    def stuck(*args, **kwargs):
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    monkeypatch.setattr(progress_crud, "upsert_progress", stuck)

    with pytest.raises(DependencyTimeoutError) as exc_info:
        store.update_progress(reader.id, ebook.id, 50)
    assert exc_info.value.kind == "timeout"


class TestHelpers:
    def test_validate_percentage_returns_float(self):
        assert validate_percentage(50) == 50.0
        assert isinstance(validate_percentage(50), float)

    def test_percentage_from_position_rounds(self):
        assert percentage_from_position(1, 3) == 33.33

    @pytest.mark.parametrize(
        "position,total",
        [(1, 0), (1, -5), (-1, 10), (11, 10), (100001, 100000), (float("nan"), 10), ("3", 10)],
    )
    def test_percentage_from_position_rejects_bad_input(self, position, total):
        with pytest.raises(ProgressValidationError):
            percentage_from_position(position, total)
