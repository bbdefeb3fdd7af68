import threading
import time

import pytest

from annotator.limiter import ConcurrencyLimiter


def test_capacity_must_be_positive():
	with pytest.raises(ValueError):
		ConcurrencyLimiter(0)


def test_parallel_never_exceeds_capacity():
	limiter = ConcurrencyLimiter(3, parallel=True)
	seen = []
	lock = threading.Lock()

	def task(n):
		with lock:
			seen.append(limiter.in_flight)
		time.sleep(0.01)

	for n in range(30):
		limiter.submit(task, n)
	limiter.wait()

	assert len(seen) == 30
	assert max(seen) <= 3
	assert limiter.peak_in_flight <= 3
	assert limiter.in_flight == 0


def test_wait_covers_tasks_submitted_by_tasks():
	limiter = ConcurrencyLimiter(2, parallel=True)
	done = []
	lock = threading.Lock()

	def leaf(n):
		time.sleep(0.01)
		with lock:
			done.append(n)

	def parent(n):
		for child in range(3):
			limiter.submit(leaf, (n, child))

	for n in range(4):
		limiter.submit(parent, n)
	limiter.wait()

	assert len(done) == 12


def test_slot_released_when_task_raises():
	limiter = ConcurrencyLimiter(1, parallel=True)
	ran = []

	def broken():
		raise RuntimeError("convert exploded")

	for _ in range(5):
		limiter.submit(broken)
	limiter.submit(ran.append, "after")
	limiter.wait()

	assert ran == ["after"]
	assert limiter.in_flight == 0
	# The only slot is free again
	with limiter.slot():
		assert limiter.in_flight == 1


def test_sequential_runs_inline_in_order():
	limiter = ConcurrencyLimiter(2, parallel=False)
	order = []
	caller = threading.current_thread()

	def task(n):
		assert threading.current_thread() is caller
		order.append(n)

	for n in range(5):
		limiter.submit(task, n)

	assert order == [0, 1, 2, 3, 4]
	limiter.wait()
	assert limiter.peak_in_flight == 0


def test_sequential_contains_errors(caplog):
	limiter = ConcurrencyLimiter(parallel=False)

	def broken():
		raise RuntimeError("boom")

	limiter.submit(broken)
	assert "failed" in caplog.text
