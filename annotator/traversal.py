"""Recursive directory walk that turns pictures into annotation tasks."""

import os

from annotator.date_resolver import build_caption, format_displayed_date, resolve_caption
from annotator.exif_date import read_exif_date
from annotator.logging_config import get_logger
from annotator.tasks import AnnotationTask

logger = get_logger("traversal")


class FatalAnnotationError(Exception):
	"""The run cannot start: unreadable source or uncreatable destination."""


def destination_name(config):
	return os.path.basename(os.path.normpath(config.dest))


def has_allowed_extension(file_name, ext_filter):
	"""
	The extension must be non-empty and contained in the filter string.

	Containment, not equality: ".jpg,.jpeg" accepts ".jpg", and ".jp" also
	accepts ".jpg".
	"""
	extension = os.path.splitext(file_name)[1]
	return bool(extension) and extension in ext_filter


def caption_for(source_dir, file_name, location_label, config):
	"""Caption for one picture, or None when no capture date can be found."""
	if config.date_source == "exif":
		capture_date = read_exif_date(os.path.join(source_dir, file_name))
		if capture_date is None:
			return None
		return build_caption(format_displayed_date(capture_date), location_label, config.caption_format)

	return resolve_caption(file_name, location_label, config.caption_format)


def ensure_destination(dest_dir):
	os.makedirs(dest_dir, exist_ok=True)


def run_task(task, config, runner, stats):
	success = False
	try:
		success = runner(task, config)
	finally:
		if stats is not None:
			stats.record_result(success)


def walk(source_dir, location_label, config, limiter, runner, stats=None, top_level=False):
	"""
	Dispatch one annotation task per eligible picture under source_dir.

	Subdirectories are walked recursively, each one using its own name as the
	location label. The destination directory is never entered.

	Args:
	    source_dir: Directory to scan
	    location_label: Label printed before the date ("" for none)
	    config: AnnotatorConfig
	    limiter: ConcurrencyLimiter used to run the tasks
	    runner: Callable(task, config) -> bool doing the actual annotation
	    stats: Optional RunStats
	    top_level: Listing failures are fatal only for the top-level call

	Returns:
	    List of dispatched AnnotationTask, this directory and below
	"""
	try:
		with os.scandir(source_dir) as it:
			entries = list(it)
	except OSError as e:
		if top_level:
			raise FatalAnnotationError(f"Cannot read source directory {source_dir}: {e}") from e
		logger.warning("Skipping directory %s: %s", source_dir, e)
		return []

	logger.info("%d files to process on directory %s", len(entries), source_dir)

	dest_name = destination_name(config)
	dest_dir = os.path.join(source_dir, config.dest)
	# None until the first eligible file, then whether the folder could be created
	dest_ready = None
	dispatched = []

	for entry in entries:
		if entry.is_dir():
			if entry.name == dest_name:
				logger.debug("Skipping destination directory %s", entry.path)
				continue
			dispatched.extend(walk(entry.path, entry.name, config, limiter, runner, stats))
			continue

		if not has_allowed_extension(entry.name, config.ext):
			logger.info("%s excluded, invalid extension %r (expect contained in %s)",
				entry.name, os.path.splitext(entry.name)[1], config.ext)
			if stats is not None:
				stats.record_skip()
			continue

		caption = caption_for(source_dir, entry.name, location_label, config)
		if caption is None:
			logger.info("Invalid date for file %s", entry.name)
			if stats is not None:
				stats.record_skip()
			continue

		if dest_ready is None:
			try:
				ensure_destination(dest_dir)
				dest_ready = True
			except OSError as e:
				if top_level:
					raise FatalAnnotationError(f"Cannot create destination folder {dest_dir}: {e}") from e
				logger.warning("Skipping pictures of %s, cannot create %s: %s", source_dir, dest_dir, e)
				dest_ready = False

		# Subfolders are still walked, only this folder's pictures are dropped
		if not dest_ready:
			if stats is not None:
				stats.record_skip()
			continue

		logger.info("Processing image %s", entry.path)
		task = AnnotationTask(source_dir, dest_dir, entry.name, location_label, caption)
		limiter.submit(run_task, task, config, runner, stats)
		dispatched.append(task)

	return dispatched
