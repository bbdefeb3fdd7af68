import threading

import pytest

from annotator.config import AnnotatorConfig


class RecordingRunner:
	"""Stands in for ImageMagick: remembers every task it was given."""

	def __init__(self, result=True):
		self.result = result
		self.tasks = []
		self._lock = threading.Lock()

	def __call__(self, task, config):
		with self._lock:
			self.tasks.append(task)
		return self.result

	@property
	def captions(self):
		return sorted(task.caption for task in self.tasks)


@pytest.fixture
def runner():
	return RecordingRunner()


@pytest.fixture
def make_config(tmp_path):
	def _make(**overrides):
		overrides.setdefault("src", str(tmp_path))
		return AnnotatorConfig(**overrides)
	return _make


@pytest.fixture
def touch():
	def _touch(directory, *names):
		directory.mkdir(parents=True, exist_ok=True)
		for name in names:
			(directory / name).write_bytes(b"")
	return _touch


@pytest.fixture
def failing_runner():
	return RecordingRunner(result=False)
