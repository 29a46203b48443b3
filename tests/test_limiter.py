"""
============================================================================
FILE: test_limiter.py
LOCATION: tests/test_limiter.py
============================================================================

PURPOSE:
    Unit tests for the sliding-window admission controller.

KEY COMPONENTS:
    - Per-key quotas and independence
    - Policy parsing ("3/minute", "10/10 seconds")
    - Atomic check-and-increment under concurrent callers

DEPENDENCIES:
    - External: pytest, limits
    - Internal: api.limiter

USAGE:
    pytest tests/test_limiter.py -v
============================================================================
"""

import threading
import time

import pytest
from limits.storage import MemoryStorage

import api.limiter as limiter_module
from api.limiter import (
    RateLimitResult,
    SlidingWindowAdmissionController,
    get_admission_controller,
)


@pytest.fixture
def controller() -> SlidingWindowAdmissionController:
    return SlidingWindowAdmissionController("3/minute", storage=MemoryStorage())


def test_admits_up_to_quota_then_denies(
    controller: SlidingWindowAdmissionController,
) -> None:
    results = [controller.limit("alice") for _ in range(4)]

    assert [r.success for r in results] == [True, True, True, False]
    assert all(isinstance(r, RateLimitResult) for r in results)
    assert results[0].limit == 3
    assert results[0].remaining == 2
    assert results[2].remaining == 0


def test_keys_have_independent_windows(
    controller: SlidingWindowAdmissionController,
) -> None:
    for _ in range(3):
        assert controller.limit("alice").success
    assert not controller.limit("alice").success

    assert controller.limit("bob").success


def test_denied_calls_do_not_extend_quota(
    controller: SlidingWindowAdmissionController,
) -> None:
    for _ in range(3):
        controller.limit("alice")

    assert not controller.limit("alice").success
    assert not controller.limit("alice").success


def test_alternate_policy() -> None:
    controller = SlidingWindowAdmissionController("10/10 seconds", storage=MemoryStorage())

    results = [controller.limit("alice").success for _ in range(11)]

    assert results.count(True) == 10
    assert results[-1] is False


def test_reset_clears_windows(controller: SlidingWindowAdmissionController) -> None:
    for _ in range(3):
        controller.limit("alice")

    controller.reset()

    assert controller.limit("alice").success


def test_prefix_isolates_controllers() -> None:
    storage = MemoryStorage()
    posts = SlidingWindowAdmissionController("1/minute", storage=storage, prefix="posts")
    other = SlidingWindowAdmissionController("1/minute", storage=storage, prefix="other")

    assert posts.limit("alice").success
    assert other.limit("alice").success
    assert not posts.limit("alice").success


def test_concurrent_callers_share_one_quota(
    controller: SlidingWindowAdmissionController,
) -> None:
    """Exactly quota-many admissions when many threads race on one key."""
    barrier = threading.Barrier(12)
    outcomes = []
    lock = threading.Lock()

    def hit() -> None:
        barrier.wait()
        result = controller.limit("alice")
        with lock:
            outcomes.append(result.success)

    threads = [threading.Thread(target=hit) for _ in range(12)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count(True) == 3
    assert outcomes.count(False) == 9


def test_memory_storage_is_available(
    controller: SlidingWindowAdmissionController,
) -> None:
    assert controller.is_available() is True


def test_denial_logs_window_fields(
    controller: SlidingWindowAdmissionController,
    log_records: list,
) -> None:
    for _ in range(4):
        controller.limit("alice")

    denials = [r for r in log_records if r.name == "chirp.limiter"]
    assert len(denials) == 1
    fields = denials[0].extra_data
    assert fields["key"] == "alice"
    assert fields["limit"] == 3
    assert fields["remaining"] == 0
    assert fields["reset"] > time.time()


def test_shared_controller_built_once_under_concurrency(monkeypatch) -> None:
    built = []

    class SlowController(SlidingWindowAdmissionController):
        def __init__(self, *args, **kwargs):
            time.sleep(0.05)
            super().__init__(*args, storage=MemoryStorage(), **kwargs)
            built.append(self)

    monkeypatch.setattr(limiter_module, "_admission_controller", None)
    monkeypatch.setattr(limiter_module, "SlidingWindowAdmissionController", SlowController)

    barrier = threading.Barrier(8)
    seen = []
    lock = threading.Lock()

    def fetch() -> None:
        barrier.wait()
        controller = get_admission_controller()
        with lock:
            seen.append(controller)

    threads = [threading.Thread(target=fetch) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(built) == 1
    assert all(controller is built[0] for controller in seen)
