"""Capture date parsing and French caption rendering."""

import re
from datetime import datetime

# Pattern: "YYYY-MM-DD_HH-MM-SS-pola.jpg"
FILENAME_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}-pola\.jpg$')
FILENAME_LAYOUT = "%Y-%m-%d_%H-%M-%S-pola.jpg"

FRENCH_MONTHS = {
	"January": "janvier",
	"February": "février",
	"March": "mars",
	"April": "avril",
	"May": "mai",
	"June": "juin",
	"July": "juillet",
	"August": "août",
	"September": "septembre",
	"October": "octobre",
	"November": "novembre",
	"December": "décembre",
}

ENGLISH_MONTHS = tuple(FRENCH_MONTHS)

DEFAULT_CAPTION_FORMAT = "%v, %v"

# printf-style slots, "%v" or "%s"
PRINTF_SLOT = re.compile(r"%[vs]")


def parse_date_from_filename(filename):
	"""
	Extract the capture date from a file name.

	Expected format: "YYYY-MM-DD_HH-MM-SS-pola.jpg"

	Returns:
	    datetime.date (time of day dropped) or None
	"""
	if not FILENAME_PATTERN.match(filename):
		return None

	try:
		return datetime.strptime(filename, FILENAME_LAYOUT).date()
	except ValueError:
		# Right shape, impossible calendar value (month 13, hour 25...)
		return None


def localize_month(formatted, month_name):
	"""
	Replace the English month token in a formatted date with its French name.

	Only the first occurrence, located on a word boundary, is replaced.
	"""
	token = re.search(rf"\b{re.escape(month_name)}\b", formatted)
	if token is None:
		return formatted
	start, end = token.span()
	return formatted[:start] + FRENCH_MONTHS[month_name] + formatted[end:]


def format_displayed_date(capture_date):
	"""
	Render a capture date the way it is printed on the picture.

	Examples: "1er janvier 2023", "15 mars 2023"
	"""
	month_name = ENGLISH_MONTHS[capture_date.month - 1]

	if capture_date.day == 1:
		formatted = f"1er {month_name} {capture_date.year}"
	else:
		formatted = f"{capture_date.day:02d} {month_name} {capture_date.year}"

	return localize_month(formatted, month_name)


def build_caption(displayed_date, location_label=None, caption_format=DEFAULT_CAPTION_FORMAT):
	"""
	Combine the displayed date with an optional location label.

	Args:
	    displayed_date: Localized date string
	    location_label: Location to prefix, ignored when empty
	    caption_format: Two-slot template, location first then date.
	        Accepts "%v" or "%s" slots, or Python "{}" slots.

	Returns:
	    Caption string
	"""
	if not location_label:
		return displayed_date

	if not PRINTF_SLOT.search(caption_format):
		return caption_format.format(location_label, displayed_date)

	# Fill slots left to right so a "%v" inside the label is never re-expanded
	head, *tails = PRINTF_SLOT.split(caption_format)
	values = [location_label, displayed_date]
	caption = head
	for index, tail in enumerate(tails):
		caption += (values[index] if index < len(values) else "") + tail
	return caption


def resolve_caption(filename, location_label=None, caption_format=DEFAULT_CAPTION_FORMAT):
	"""Parse the file name and build its caption, or return None if it holds no date."""
	capture_date = parse_date_from_filename(filename)
	if capture_date is None:
		return None

	return build_caption(format_displayed_date(capture_date), location_label, caption_format)


def check_caption_format(caption_format):
	"""
	Make sure a template can hold a location and a date.

	Raises:
	    ValueError: no slot at all, or "{}" slots that two positional
	        values cannot fill
	"""
	if PRINTF_SLOT.search(caption_format):
		return

	try:
		caption = caption_format.format("\0location", "\0date")
	except (IndexError, KeyError, ValueError, AttributeError, TypeError) as e:
		raise ValueError(f"invalid caption format {caption_format!r}: {e}") from e

	if "\0location" not in caption and "\0date" not in caption:
		raise ValueError(f"caption format {caption_format!r} has no '%v' or '{{}}' slot")
