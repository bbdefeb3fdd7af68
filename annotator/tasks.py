"""Annotation task and run bookkeeping."""

import os
import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class AnnotationTask:
	"""One file's caption-and-overlay job."""

	source_dir: str
	dest_dir: str
	file_name: str
	location_label: str
	caption: str

	@property
	def source_path(self):
		return os.path.join(self.source_dir, self.file_name)

	@property
	def dest_path(self):
		return os.path.join(self.dest_dir, self.file_name)


class RunStats:
	"""Thread-safe counters for the end-of-run summary."""

	def __init__(self, progress=None):
		self._lock = threading.Lock()
		self.progress = progress
		self.annotated = 0
		self.failed = 0
		self.skipped = 0

	def record_skip(self):
		with self._lock:
			self.skipped += 1

	def record_result(self, success):
		with self._lock:
			if success:
				self.annotated += 1
			else:
				self.failed += 1
			if self.progress is not None:
				self.progress.update()
