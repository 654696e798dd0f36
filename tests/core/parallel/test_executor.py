"""
tests/core/parallel/test_executor.py - ParallelTaskExecutor / run_with_retry 테스트
"""

import threading
from unittest.mock import MagicMock, patch

import pytest

from core.parallel.executor import ParallelConfig, ParallelTaskExecutor, PendingTasks, run_with_retry
from core.parallel.retry import RetryConfig
from core.parallel.types import ErrorCategory

NO_RETRY = RetryConfig(max_retries=0)


class TestParallelConfig:
    """ParallelConfig 테스트"""

    def test_default_values(self):
        config = ParallelConfig()

        assert config.max_workers == 4
        assert config.retry_config is None

    def test_invalid_workers(self):
        with pytest.raises(ValueError):
            ParallelConfig(max_workers=0)

    def test_workers_capped(self):
        assert ParallelConfig(max_workers=500).max_workers == 100


class TestRunWithRetry:
    """run_with_retry 테스트"""

    def test_success(self):
        result = run_with_retry(lambda: [1, 2, 3], "task", region="us-east-1")

        assert result.success is True
        assert result.data == [1, 2, 3]
        assert result.identifier == "task"
        assert result.region == "us-east-1"
        assert result.duration_ms >= 0

    def test_non_retryable_error_fails_immediately(self, make_client_error):
        """재시도 불가 에러는 1회만 호출"""
        func = MagicMock(side_effect=make_client_error("AccessDenied"))

        result = run_with_retry(func, "iam_roles", retry_config=RetryConfig(max_retries=3))

        assert func.call_count == 1
        assert result.success is False
        assert result.error.category == ErrorCategory.ACCESS_DENIED
        assert result.error.error_code == "AccessDenied"
        assert result.error.retries == 0

    @patch("core.parallel.executor.time.sleep")
    def test_retryable_error_then_success(self, mock_sleep, make_client_error):
        """스로틀링 후 성공"""
        func = MagicMock(side_effect=[make_client_error("Throttling"), make_client_error("Throttling"), "ok"])

        result = run_with_retry(func, "log_groups", retry_config=RetryConfig(max_retries=3, jitter=False))

        assert result.success is True
        assert result.data == "ok"
        assert func.call_count == 3
        assert mock_sleep.call_count == 2
        mock_sleep.assert_any_call(1.0)
        mock_sleep.assert_any_call(2.0)

    @patch("core.parallel.executor.time.sleep")
    def test_retries_exhausted(self, mock_sleep, make_client_error):
        func = MagicMock(side_effect=make_client_error("Throttling"))

        result = run_with_retry(func, "log_groups", retry_config=RetryConfig(max_retries=2))

        assert func.call_count == 3
        assert result.success is False
        assert result.error.category == ErrorCategory.THROTTLING
        assert result.error.retries == 2

    def test_original_exception_kept(self):
        error = ValueError("bad input")

        result = run_with_retry(MagicMock(side_effect=error), "task", retry_config=NO_RETRY)

        assert result.error.original_exception is error
        assert result.error.error_code == "ValueError"
        assert result.error.message == "bad input"

    def test_keyboard_interrupt_propagates(self):
        with pytest.raises(KeyboardInterrupt):
            run_with_retry(MagicMock(side_effect=KeyboardInterrupt), "task", retry_config=NO_RETRY)


class TestParallelTaskExecutor:
    """ParallelTaskExecutor 테스트"""

    def test_join_preserves_submission_order(self):
        executor = ParallelTaskExecutor(ParallelConfig(max_workers=2, retry_config=NO_RETRY), region="us-east-1")

        result = executor.submit({"b": lambda: "B", "a": lambda: "A"}).join()

        assert [r.identifier for r in result.results] == ["b", "a"]
        assert result.get("a").data == "A"
        assert result.success_count == 2

    def test_submit_empty(self):
        result = ParallelTaskExecutor().submit({}).join()

        assert result.results == ()
        assert result.get_errors() == []

    def test_failure_is_value(self, make_client_error):
        """실패는 예외가 아니라 결과 값으로 반환"""
        executor = ParallelTaskExecutor(ParallelConfig(retry_config=NO_RETRY))

        def boom():
            raise make_client_error("AccessDenied")

        result = executor.submit({"ok": lambda: 1, "fail": boom}).join()

        assert result.get("ok").success is True
        assert result.get("fail").success is False
        assert result.get("fail").error.error_code == "AccessDenied"

    def test_submit_runs_concurrently_with_caller(self):
        """submit은 즉시 반환하고, 호출 스레드 작업과 동시에 실행"""
        started = threading.Event()
        release = threading.Event()

        def task():
            started.set()
            release.wait(timeout=5)
            return "done"

        pending = ParallelTaskExecutor(ParallelConfig(max_workers=2, retry_config=NO_RETRY)).submit({"task": task})

        assert isinstance(pending, PendingTasks)
        assert started.wait(timeout=5)
        release.set()

        result = pending.join()
        assert result.get("task").data == "done"

    def test_join_is_cached(self):
        pending = ParallelTaskExecutor(ParallelConfig(retry_config=NO_RETRY)).submit({"t": lambda: 1})

        first = pending.join()
        second = pending.join()

        assert first is second

    def test_tasks_run_on_worker_threads(self):
        caller = threading.get_ident()
        result = ParallelTaskExecutor(ParallelConfig(retry_config=NO_RETRY)).submit(
            {"t": lambda: threading.get_ident()}
        ).join()

        assert result.get("t").data != caller
