from datetime import datetime
from PIL import Image
from PIL.ExifTags import TAGS

from annotator.logging_config import get_logger

logger = get_logger("exif_date")

EXIF_IFD_POINTER = 0x8769

# Try different EXIF date fields in order of preference
DATE_FIELDS = [
	'DateTimeOriginal',  # When photo was taken (best)
	'DateTime',          # General datetime
	'DateTimeDigitized', # When photo was scanned/digitized
]


def read_exif_date(file_path):
	"""
	Extract the date a photo was taken from its EXIF data.

	Args:
	    file_path: Path to image file

	Returns:
	    datetime.date or None when the file has no usable EXIF date
	"""
	try:
		with Image.open(file_path) as img:
			exif_data = img.getexif()
			# DateTimeOriginal and DateTimeDigitized live in the Exif sub-IFD
			tags = dict(exif_data)
			tags.update(exif_data.get_ifd(EXIF_IFD_POINTER))
	except OSError as e:
		logger.debug("Could not read EXIF from %s: %s", file_path, e)
		return None

	exif = {TAGS.get(tag, tag): value for tag, value in tags.items()}

	for field in DATE_FIELDS:
		if field not in exif:
			continue
		# EXIF format: "YYYY:MM:DD HH:MM:SS"
		try:
			return datetime.strptime(str(exif[field]).strip("\x00 "), "%Y:%m:%d %H:%M:%S").date()
		except ValueError:
			continue

	return None
