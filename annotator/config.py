"""Run configuration: defaults, command line and optional JSON file."""

import argparse
import json
from dataclasses import dataclass, fields

from annotator.date_resolver import DEFAULT_CAPTION_FORMAT, check_caption_format
from annotator.limiter import DEFAULT_CAPACITY

DATE_SOURCES = ("filename", "exif")


@dataclass
class AnnotatorConfig:
	# Folder scanned for pictures (recursively)
	src: str = "."
	# Name of the output folder created inside every scanned folder
	dest: str = "ready"
	# Extensions to keep; a file's extension must be contained in this string
	ext: str = ".jpg"
	# Location printed before the date; subfolder names replace it
	location: str = ""
	# Two-slot template: location first, date second
	caption_format: str = DEFAULT_CAPTION_FORMAT
	# Caption font size, in points
	text_size: int = 100
	# Bottom margin used to center the caption, in pixels
	bottom_margin: int = 30
	font: str = "Arial"
	use_threads: bool = False
	max_workers: int = DEFAULT_CAPACITY
	convert_binary: str = "convert"
	date_source: str = "filename"
	dry_run: bool = False
	verbose: bool = False


def build_parser():
	defaults = AnnotatorConfig()
	p = argparse.ArgumentParser(
		description="Write the capture date (and location) found in each picture's file name "
		"onto a copy of the picture, using ImageMagick.",
		epilog="File names must look like 'YYYY-MM-DD_HH-MM-SS-pola.jpg'.",
	)

	p.add_argument("--config", type=str, help="Path to JSON config file")
	p.add_argument("--src", type=str, default=defaults.src,
		help="Source directory to scan images from")
	p.add_argument("--dest", type=str, default=defaults.dest,
		help="Destination directory name, created inside each scanned directory")
	p.add_argument("--ext", type=str, default=defaults.ext,
		help="Extension filter; a file is kept when its extension is contained in this value")
	p.add_argument("--location", type=str, default=defaults.location,
		help="Location to add before the date, combined using --format")
	p.add_argument("--format", dest="caption_format", type=str, default=defaults.caption_format,
		help="Format used to combine location and date")
	p.add_argument("--text-size", dest="text_size", type=int, default=defaults.text_size,
		help="Caption size, in points")
	p.add_argument("--bottom-margin", dest="bottom_margin", type=int, default=defaults.bottom_margin,
		help="Bottom margin to adjust text centering, in px")
	p.add_argument("--font", type=str, default=defaults.font, help="Font used to write the caption")
	p.add_argument("--use-goroutine", "--parallel", dest="use_threads", action="store_true",
		help="Annotate images in parallel")
	p.add_argument("--max-goroutines", "--max-workers", dest="max_workers", type=int,
		default=defaults.max_workers, help="Maximum number of images annotated at once")
	p.add_argument("--convert-binary", dest="convert_binary", type=str, default=defaults.convert_binary,
		help="ImageMagick executable (e.g. 'magick')")
	p.add_argument("--date-source", dest="date_source", choices=DATE_SOURCES, default=defaults.date_source,
		help="Where the capture date is read from")
	p.add_argument("--dry", "--dry-run", dest="dry_run", action="store_true",
		help="Log the ImageMagick commands without running them")
	p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
	return p


def load_config_file(path):
	"""Read a JSON object of AnnotatorConfig field names, rejecting unknown keys and wrong types."""
	with open(path) as f:
		data = json.load(f)

	if not isinstance(data, dict):
		raise ValueError(f"{path}: expected a JSON object")

	known = {f.name: f.type for f in fields(AnnotatorConfig)}
	unknown = sorted(set(data) - set(known))
	if unknown:
		raise ValueError(f"{path}: unknown config keys {', '.join(unknown)}")

	for key, value in data.items():
		expected = known[key]
		# bool is an int subclass, so true/false must not pass as a number
		if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
			raise ValueError(f"{path}: {key} must be a JSON {expected.__name__}, got {value!r}")
	return data


def parse_args(argv=None):
	"""
	Build the run configuration.

	Values from --config act as defaults; flags given on the command line win.
	"""
	p = build_parser()
	args = p.parse_args(argv)

	if args.config:
		try:
			file_values = load_config_file(args.config)
		except (OSError, ValueError) as e:
			p.error(f"could not load --config: {e}")
		p.set_defaults(**file_values)
		args = p.parse_args(argv)

	values = {f.name: getattr(args, f.name) for f in fields(AnnotatorConfig)}
	config = AnnotatorConfig(**values)

	if config.max_workers < 1:
		p.error("--max-goroutines must be at least 1")
	if config.date_source not in DATE_SOURCES:
		p.error(f"--date-source must be one of {', '.join(DATE_SOURCES)}")
	try:
		check_caption_format(config.caption_format)
	except ValueError as e:
		p.error(f"--format: {e}")

	return config
