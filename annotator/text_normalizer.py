import unicodedata


def normalize_caption(text):
	"""
	Compose a caption to NFC.

	Directory names coming from decomposing filesystems (HFS+ and friends) hold
	"e" + U+0301 instead of "é"; ImageMagick would draw the mark separately.
	"""
	return unicodedata.normalize("NFC", text)
