"""
Pola Annotator - Write the capture date under each pola picture

Pictures named "YYYY-MM-DD_HH-MM-SS-pola.jpg" get their date written in French
("1er janvier 2023", "15 mars 2023") in the bottom band, optionally preceded by
a location. Subfolders are scanned too, and each subfolder's name becomes the
location of the pictures it holds.

Annotated copies go to a 'ready/' folder inside every scanned folder; the
originals are left untouched. ImageMagick's `convert` must be on the PATH.

Example:
    python pola_annotator.py --src ~/Pictures/pola --location Paris --use-goroutine
"""

import os
import sys
from tqdm import tqdm

from annotator.config import parse_args
from annotator.date_resolver import check_caption_format
from annotator.image_processor import annotate_image
from annotator.limiter import ConcurrencyLimiter
from annotator.logging_config import configure_logging
from annotator.tasks import RunStats
from annotator.traversal import FatalAnnotationError, ensure_destination, walk


def annotate_tree(config, runner=annotate_image, limiter=None, show_progress=True):
	"""
	Annotate every eligible picture below config.src.

	Args:
	    config: AnnotatorConfig
	    runner: Callable(task, config) -> bool, ImageMagick by default
	    limiter: ConcurrencyLimiter, built from config when None
	    show_progress: Display a tqdm bar of finished pictures

	Returns:
	    RunStats of the run

	Raises:
	    FatalAnnotationError: source unreadable, destination uncreatable or
	        unusable caption format
	"""
	logger = configure_logging(config.verbose)

	if not os.path.isdir(config.src):
		raise FatalAnnotationError(f"Cannot read source directory {config.src}")

	try:
		check_caption_format(config.caption_format)
	except ValueError as e:
		raise FatalAnnotationError(str(e)) from e

	# Create the top-level destination folder for the user if it doesn't exist
	dest_folder = os.path.join(config.src, config.dest)
	try:
		ensure_destination(dest_folder)
	except OSError as e:
		raise FatalAnnotationError(f"An error occurred when trying to create the destination folder {dest_folder}: {e}") from e

	if limiter is None:
		limiter = ConcurrencyLimiter(config.max_workers, parallel=config.use_threads)

	with tqdm(desc="Annotating", unit="img", disable=not show_progress) as progress:
		stats = RunStats(progress)
		try:
			walk(config.src, config.location, config, limiter, runner, stats, top_level=True)
		finally:
			# Tasks already started must finish before we report or exit
			limiter.wait()

	logger.info("=" * 70)
	logger.info("ANNOTATION COMPLETE")
	logger.info("Annotated: %d, failed: %d, skipped: %d", stats.annotated, stats.failed, stats.skipped)
	logger.info("=" * 70)
	return stats


def main(argv=None):
	config = parse_args(argv)
	logger = configure_logging(config.verbose)

	try:
		annotate_tree(config)
	except FatalAnnotationError as e:
		logger.error("%s", e)
		return 1

	return 0


if __name__ == "__main__":
	sys.exit(main())
