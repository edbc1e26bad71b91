"""
并发任务组测试
==============

测试 TaskGroup 的任务派发、错误记录与并发上限。
"""

import threading
import time

import pytest

from tcp_file_uploader.exceptions import ConnectError
from tcp_file_uploader.utils.tasks import TaskGroup


class TestTaskGroup:
    """TaskGroup测试类"""

    def test_spawn_and_wait(self):
        group = TaskGroup()
        results = []
        lock = threading.Lock()

        def work(value):
            with lock:
                results.append(value)

        for i in range(10):
            group.spawn(work, i)

        assert group.wait(timeout=5) is True
        assert sorted(results) == list(range(10))
        assert group.tasks_started == 10
        assert group.pending == 0
        assert group.failed is False

    def test_spawn_does_not_block(self):
        group = TaskGroup()
        release = threading.Event()

        start = time.time()
        group.spawn(release.wait)
        assert time.time() - start < 1.0
        assert group.pending == 1

        release.set()
        assert group.wait(timeout=5)

    def test_first_error_kept(self):
        group = TaskGroup()

        def fail_first():
            raise ConnectError("first")

        def fail_second():
            group.wait_for_failure(5)
            raise ConnectError("second")

        group.spawn(fail_first)
        group.spawn(fail_second)
        group.wait(timeout=5)

        assert group.failed is True
        assert group.tasks_failed == 2
        assert str(group.error) == "first"
        with pytest.raises(ConnectError, match="first"):
            group.raise_if_failed()

    def test_wait_stop_on_error_returns_early(self):
        group = TaskGroup()
        release = threading.Event()

        def fail():
            raise ConnectError("boom")

        group.spawn(release.wait)
        group.spawn(fail)

        assert group.wait(timeout=5, stop_on_error=True) is True
        assert group.pending == 1
        release.set()
        assert group.wait(timeout=5)

    def test_wait_timeout(self):
        group = TaskGroup()
        release = threading.Event()
        group.spawn(release.wait)

        assert group.wait(timeout=0.05) is False
        release.set()
        assert group.wait(timeout=5)

    def test_record_error(self):
        group = TaskGroup()
        group.record_error(ConnectError("caller"))

        assert group.failed
        assert group.wait_for_failure(timeout=0) is True

    def test_max_concurrency(self):
        group = TaskGroup(max_concurrency=2)
        running = 0
        peak = 0
        lock = threading.Lock()

        def work():
            nonlocal running, peak
            with lock:
                running += 1
                peak = max(peak, running)
            time.sleep(0.05)
            with lock:
                running -= 1

        for _ in range(8):
            group.spawn(work)

        assert group.wait(timeout=10)
        assert peak <= 2

    def test_nested_spawn_with_limit_one(self):
        """上限为1时，父任务派发子任务也不会死锁"""
        group = TaskGroup(max_concurrency=1)
        visited = []

        def walk(depth):
            visited.append(depth)
            if depth < 5:
                group.spawn(walk, depth + 1)

        group.spawn(walk, 0)

        assert group.wait(timeout=5)
        assert visited == [0, 1, 2, 3, 4, 5]

    def test_thread_names(self):
        group = TaskGroup(name="walk")
        names = []
        group.spawn(lambda: names.append(threading.current_thread().name))
        group.wait(timeout=5)
        assert names[0].startswith("walk-")

    def test_pool_thread_names(self):
        group = TaskGroup(max_concurrency=2, name="walk")
        names = []
        group.spawn(lambda: names.append(threading.current_thread().name))
        group.wait(timeout=5)
        assert names[0].startswith("walk")

    def test_thread_count_bounded_by_limit(self):
        """大量任务同时派发时，线程数不超过并发上限"""
        baseline = threading.active_count()
        group = TaskGroup(max_concurrency=2)
        peak = 0
        lock = threading.Lock()

        def work():
            nonlocal peak
            with lock:
                peak = max(peak, threading.active_count())
            time.sleep(0.001)

        for _ in range(300):
            group.spawn(work)

        assert group.wait(timeout=30)
        assert group.tasks_started == 300
        assert peak <= baseline + 2

    def test_queued_tasks_skipped_after_failure(self):
        group = TaskGroup(max_concurrency=1)
        ran = []

        def fail():
            raise ConnectError("boom")

        group.spawn(fail)
        for i in range(5):
            group.spawn(ran.append, i)

        assert group.wait(timeout=5)
        assert ran == []
        assert group.tasks_skipped == 5
        assert str(group.error) == "boom"
