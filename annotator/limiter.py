"""Bounded parallelism for annotation tasks."""

import threading
from contextlib import contextmanager

from annotator.logging_config import get_logger

logger = get_logger("limiter")

DEFAULT_CAPACITY = 10


class ConcurrencyLimiter:
	"""
	Caps how many annotation tasks run at once and waits for all of them.

	In parallel mode every submitted task gets its own thread, but only
	`capacity` of them hold a slot (and therefore run) at any instant.
	In sequential mode submit() runs the task inline and the gate is unused.
	"""

	def __init__(self, capacity=DEFAULT_CAPACITY, parallel=False):
		if capacity < 1:
			raise ValueError(f"capacity must be at least 1, got {capacity!r}")

		self.capacity = capacity
		self.parallel = parallel
		self._slots = threading.BoundedSemaphore(capacity)
		self._lock = threading.Lock()
		self._all_done = threading.Condition(self._lock)
		self._pending = 0
		self.in_flight = 0
		self.peak_in_flight = 0

	@contextmanager
	def slot(self):
		"""Hold one slot for the duration of the block; released on every exit path."""
		self._slots.acquire()
		with self._lock:
			self.in_flight += 1
			self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
		try:
			yield
		finally:
			with self._lock:
				self.in_flight -= 1
			self._slots.release()

	def submit(self, fn, *args):
		"""
		Run fn(*args) under the limiter.

		Exceptions raised by fn are logged and contained; they never reach the
		caller or sibling tasks.
		"""
		if not self.parallel:
			self._run(fn, args)
			return

		with self._lock:
			self._pending += 1

		worker = threading.Thread(target=self._run_in_slot, args=(fn, args), daemon=True)
		worker.start()

	def wait(self):
		"""Block until every submitted task has finished."""
		with self._all_done:
			while self._pending:
				self._all_done.wait()

	def _run_in_slot(self, fn, args):
		try:
			with self.slot():
				self._run(fn, args)
		finally:
			with self._all_done:
				self._pending -= 1
				if not self._pending:
					self._all_done.notify_all()

	def _run(self, fn, args):
		try:
			fn(*args)
		except Exception:
			logger.exception("Annotation task %r failed", args)
