"""Tests for logging context propagation."""

import threading

from snipesniff.logging.context import (
    clear_log_context,
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)


def test_empty_context():
    assert get_log_context() == {}


def test_push_and_pop():
    token = push_log_context(run_id="abc123", subnet="10.0.0.0/24")
    assert get_log_context() == {"run_id": "abc123", "subnet": "10.0.0.0/24"}

    pop_log_context(token)
    assert get_log_context() == {}


def test_nested_push_overrides_and_restores():
    outer = push_log_context(run_id="abc123")
    inner = push_log_context(run_id="xyz789", subnet="auto")
    assert get_log_context() == {"run_id": "xyz789", "subnet": "auto"}

    pop_log_context(inner)
    assert get_log_context() == {"run_id": "abc123"}

    pop_log_context(outer)
    assert get_log_context() == {}


def test_context_manager_nested():
    with log_context(run_id="abc123"):
        with log_context(subnet="10.0.0.0/24"):
            assert get_log_context() == {"run_id": "abc123", "subnet": "10.0.0.0/24"}
        assert get_log_context() == {"run_id": "abc123"}

    assert get_log_context() == {}


def test_context_manager_restores_on_exception():
    try:
        with log_context(run_id="abc123"):
            raise ValueError("boom")
    except ValueError:
        pass

    assert get_log_context() == {}


def test_clear_context():
    push_log_context(run_id="abc123")

    clear_log_context()

    assert get_log_context() == {}


def test_returned_context_is_a_copy():
    with log_context(run_id="abc123"):
        context = get_log_context()
        context["subnet"] = "modified"

        assert get_log_context() == {"run_id": "abc123"}


def test_context_not_shared_with_other_threads():
    seen = []

    with log_context(run_id="main-thread"):
        worker = threading.Thread(target=lambda: seen.append(get_log_context()))
        worker.start()
        worker.join()

    assert seen == [{}]
