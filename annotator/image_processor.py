"""ImageMagick invocation for one annotation task."""

import subprocess

from annotator.geometry import annotation_geometry
from annotator.logging_config import get_logger
from annotator.text_normalizer import normalize_caption

logger = get_logger("image_processor")


def build_convert_command(source_path, dest_path, font, text_size, geometry, caption, binary="convert"):
	"""
	Argument list for `convert` drawing the caption in black, bottom-centered.

	Kept identical to the historical shell usage so existing scripts can
	reproduce the same output.
	"""
	return [
		binary,
		source_path,
		"-font", font,
		"-pointsize", str(text_size),
		"-fill", "black",
		"-gravity", "south",
		"-annotate", geometry, caption,
		dest_path,
	]


def annotate_image(task, config):
	"""
	Write the annotated copy of task's picture into its destination folder.

	Args:
	    task: AnnotationTask
	    config: AnnotatorConfig

	Returns:
	    True if the command succeeded (or was only logged in dry-run mode).
	    The output file itself is not checked.
	"""
	command = build_convert_command(
		task.source_path,
		task.dest_path,
		config.font,
		config.text_size,
		annotation_geometry(config.text_size, config.bottom_margin),
		normalize_caption(task.caption),
		binary=config.convert_binary,
	)

	if config.dry_run:
		logger.info("Would run: %s", subprocess.list2cmdline(command))
		return True

	logger.debug("Running: %s", subprocess.list2cmdline(command))
	try:
		result = subprocess.run(command, capture_output=True, text=True)
	except OSError as e:
		logger.error("Call to %s failed for %s: %s", config.convert_binary, task.file_name, e)
		return False

	if result.returncode != 0:
		output = (result.stdout + result.stderr).strip()
		logger.error("Call to %s returned %d for %s: %s",
			config.convert_binary, result.returncode, task.file_name, output)
		return False

	return True
