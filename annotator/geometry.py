"""Caption placement geometry for the ImageMagick annotate argument."""

import numpy as np

# Height of the white band at the bottom of a pola print, in pixels
BOTTOM_BAND_HEIGHT = 350

# 1pt = 1/0.75 px
POINTS_PER_PIXEL = 0.75


def compute_offset(text_size, bottom_margin, band_height=BOTTOM_BAND_HEIGHT):
	"""
	Vertical offset from the bottom edge that centers the caption in the band.

	Computed in single precision, then truncated toward zero. Large text sizes
	or margins can give a negative offset; it is returned unchanged.

	Args:
	    text_size: Font size in points
	    bottom_margin: Extra margin in pixels
	    band_height: Height of the bottom band in pixels

	Returns:
	    Offset in whole pixels
	"""
	text_in_pixel = (np.float32(text_size) / np.float32(POINTS_PER_PIXEL)) / np.float32(2)
	position = (np.float32(band_height) / np.float32(2)) - (text_in_pixel / np.float32(2)) - np.float32(bottom_margin)
	return int(position)


def geometry_string(offset):
	"""Format an offset as "+0+<offset>"; only the vertical part is ever set."""
	return f"+0+{offset}"


def annotation_geometry(text_size, bottom_margin):
	return geometry_string(compute_offset(text_size, bottom_margin))
