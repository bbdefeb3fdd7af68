"""Logging setup shared by the annotator modules."""

import logging
from tqdm import tqdm

ROOT_LOGGER_NAME = "pola_annotator"
LOG_FORMAT = "%(asctime)s %(message)s"
DATE_FORMAT = "%Y/%m/%d %H:%M:%S"


class TqdmLoggingHandler(logging.Handler):
	"""Write records through tqdm.write so they don't break the progress bar."""

	def emit(self, record):
		try:
			tqdm.write(self.format(record))
		except Exception:
			self.handleError(record)


def configure_logging(verbose=False):
	"""Attach the tqdm handler to the root annotator logger (idempotent)."""
	logger = logging.getLogger(ROOT_LOGGER_NAME)
	logger.setLevel(logging.DEBUG if verbose else logging.INFO)

	if not any(isinstance(h, TqdmLoggingHandler) for h in logger.handlers):
		handler = TqdmLoggingHandler()
		handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
		logger.addHandler(handler)

	return logger


def get_logger(name):
	return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
