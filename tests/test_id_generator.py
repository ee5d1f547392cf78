import gc
import threading
from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from app.core.database import build_engine
from app.models import IdSequence, PersonType
from app.services.id_generator import (
    SequenceAllocator,
    SequenceAllocationError,
    format_identifier,
    resolve_prefix,
)


def fixed_clock(year):
    return lambda: datetime(year, 3, 15, 10, 30)


@pytest.fixture
def allocator():
    return SequenceAllocator(clock=fixed_clock(2024))


class TestResolvePrefix:
    def test_student_uses_college_code(self):
        assert resolve_prefix(PersonType.STUDENT, "ENG") == "ENG"

    def test_student_without_code_falls_back_to_stu(self):
        assert resolve_prefix("student") == "STU"
        assert resolve_prefix("student", "") == "STU"
        assert resolve_prefix("student", "   ") == "STU"

    def test_staff_ignores_college_code(self):
        assert resolve_prefix("staff") == "EMP"
        assert resolve_prefix("staff", "ENG") == "EMP"

    def test_visitor_ignores_college_code(self):
        assert resolve_prefix("visitor", "ENG") == "VIS"

    def test_unknown_type_is_rejected(self):
        with pytest.raises(ValueError):
            resolve_prefix("alumni")


class TestFormatIdentifier:
    def test_pads_to_five_digits(self):
        assert format_identifier("ENG", 2024, 7) == "ENG-2024-00007"

    def test_large_numbers_widen_instead_of_truncating(self):
        assert format_identifier("EMP", 2024, 123456) == "EMP-2024-123456"


class TestAllocate:
    def test_first_allocation_for_key(self, db_session, allocator):
        assert allocator.allocate(db_session, "student", "ENG") == "ENG-2024-00001"

        row = db_session.query(IdSequence).filter_by(prefix="ENG", year=2024).one()
        assert row.next_number == 2

    def test_sequential_allocations_have_no_gaps(self, db_session, allocator):
        ids = [allocator.allocate(db_session, "staff") for _ in range(5)]

        assert ids == [f"EMP-2024-0000{n}" for n in range(1, 6)]
        row = db_session.query(IdSequence).filter_by(prefix="EMP", year=2024).one()
        assert row.next_number == 6

    def test_keys_are_independent(self, db_session, allocator):
        allocator.allocate(db_session, "student", "ENG")
        allocator.allocate(db_session, "student", "ENG")

        assert allocator.allocate(db_session, "student", "CS") == "CS-2024-00001"
        assert allocator.allocate(db_session, "student") == "STU-2024-00001"
        assert allocator.allocate(db_session, "visitor") == "VIS-2024-00001"
        assert allocator.allocate(db_session, "student", "ENG") == "ENG-2024-00003"

    def test_new_year_starts_fresh_sequence(self, db_session):
        allocator_2024 = SequenceAllocator(clock=fixed_clock(2024))
        allocator_2025 = SequenceAllocator(clock=fixed_clock(2025))

        allocator_2024.allocate(db_session, "staff")
        allocator_2024.allocate(db_session, "staff")

        assert allocator_2025.allocate(db_session, "staff") == "EMP-2025-00001"
        assert allocator_2024.allocate(db_session, "staff") == "EMP-2024-00003"

    def test_counter_past_five_digits(self, db_session, allocator):
        db_session.add(IdSequence(prefix="VIS", year=2024, next_number=100000))
        db_session.commit()

        assert allocator.allocate(db_session, "visitor") == "VIS-2024-100000"

    def test_uses_current_year_by_default(self, db_session):
        identifier = SequenceAllocator().allocate(db_session, "staff")
        assert identifier == f"EMP-{datetime.now().year}-00001"


class TestAllocationFailures:
    def test_storage_failure_propagates(self, tmp_path, allocator):
        # Database without the id_sequences table
        broken_engine = build_engine(f"sqlite:///{tmp_path}/empty.db")
        session = sessionmaker(bind=broken_engine)()
        try:
            with pytest.raises(SequenceAllocationError):
                allocator.allocate(session, "staff")
        finally:
            session.close()
            broken_engine.dispose()

    def test_insert_conflict_is_retried(self, db_session, allocator, monkeypatch):
        real_reserve = allocator._reserve
        calls = {"count": 0}

        def flaky_reserve(db, prefix, year):
            calls["count"] += 1
            if calls["count"] == 1:
                # Another writer created the row between our UPDATE and INSERT
                db.add(IdSequence(prefix=prefix, year=year, next_number=2))
                db.commit()
                raise IntegrityError("INSERT INTO id_sequences", {}, Exception("UNIQUE constraint failed"))
            return real_reserve(db, prefix, year)

        monkeypatch.setattr(allocator, "_reserve", flaky_reserve)

        assert allocator.allocate(db_session, "staff") == "EMP-2024-00002"
        assert calls["count"] == 2

    def test_gives_up_after_max_retries(self, db_session, monkeypatch):
        allocator = SequenceAllocator(max_retries=2, clock=fixed_clock(2024))
        calls = {"count": 0}

        def always_conflicts(db, prefix, year):
            calls["count"] += 1
            raise IntegrityError("INSERT INTO id_sequences", {}, Exception("UNIQUE constraint failed"))

        monkeypatch.setattr(allocator, "_reserve", always_conflicts)

        with pytest.raises(SequenceAllocationError):
            allocator.allocate(db_session, "staff")
        assert calls["count"] == 3

    def test_zero_retries_makes_a_single_attempt(self, db_session, monkeypatch):
        allocator = SequenceAllocator(max_retries=0, clock=fixed_clock(2024))
        calls = {"count": 0}

        def always_conflicts(db, prefix, year):
            calls["count"] += 1
            raise IntegrityError("INSERT INTO id_sequences", {}, Exception("UNIQUE constraint failed"))

        monkeypatch.setattr(allocator, "_reserve", always_conflicts)

        assert allocator.max_retries == 0
        with pytest.raises(SequenceAllocationError):
            allocator.allocate(db_session, "staff")
        assert calls["count"] == 1

    def test_zero_retries_still_allocates(self, db_session):
        allocator = SequenceAllocator(max_retries=0, clock=fixed_clock(2024))

        assert allocator.allocate(db_session, "visitor") == "VIS-2024-00001"


class TestLocks:
    def test_locks_are_released_after_allocation(self, db_session, allocator):
        for n in range(25):
            allocator.allocate(db_session, "student", f"C{n}")

        gc.collect()
        assert len(allocator._locks) == 0

    def test_same_key_shares_a_lock_while_held(self, allocator):
        lock = allocator._lock_for(("ENG", 2024))

        assert allocator._lock_for(("ENG", 2024)) is lock
        assert allocator._lock_for(("CS", 2024)) is not lock


def test_concurrent_allocations_are_unique(session_factory, allocator):
    workers = 20
    results = []
    errors = []
    results_lock = threading.Lock()
    start = threading.Barrier(workers)

    def worker():
        session = session_factory()
        try:
            start.wait()
            identifier = allocator.allocate(session, "student", "ENG")
            with results_lock:
                results.append(identifier)
        except Exception as e:
            with results_lock:
                errors.append(e)
        finally:
            session.close()

    threads = [threading.Thread(target=worker) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    numbers = sorted(int(identifier.rsplit("-", 1)[1]) for identifier in results)
    assert numbers == list(range(1, workers + 1))


def test_separate_allocators_share_the_database_counter(session_factory):
    # Each allocator has its own locks, like separate worker processes
    allocators = [SequenceAllocator(clock=fixed_clock(2024)) for _ in range(4)]
    workers_per_allocator = 4
    workers = len(allocators) * workers_per_allocator
    results = []
    errors = []
    results_lock = threading.Lock()
    start = threading.Barrier(workers)

    def worker(allocator):
        session = session_factory()
        try:
            start.wait()
            identifier = allocator.allocate(session, "student", "ENG")
            with results_lock:
                results.append(identifier)
        except Exception as e:
            with results_lock:
                errors.append(e)
        finally:
            session.close()

    threads = [
        threading.Thread(target=worker, args=(allocator,))
        for allocator in allocators
        for _ in range(workers_per_allocator)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    numbers = sorted(int(identifier.rsplit("-", 1)[1]) for identifier in results)
    assert numbers == list(range(1, workers + 1))
