"""
commentdoc logging configuration.

Defaults come from settings (COMMENTDOC_LOG_LEVEL, COMMENTDOC_LOG_FILE).
Library code only asks for loggers; handlers are installed by setup_logging,
which the CLI and the API call on startup.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from .config import settings

ROOT_LOGGER = "commentdoc"


def setup_logging(
	level: Optional[str] = None,
	log_file: Optional[str] = None,
) -> logging.Logger:
	"""
	Configure the commentdoc logger.

	Args:
		level: Level name. Defaults to settings.log_level.
		log_file: Optional log file path. Defaults to settings.log_file.

	Returns:
		Root logger for commentdoc
	"""
	if level is None:
		level = settings.log_level
	if log_file is None:
		log_file = settings.log_file

	numeric_level = logging.getLevelName(level.upper())
	if not isinstance(numeric_level, int):
		numeric_level = logging.WARNING

	formatter = logging.Formatter(
		"%(asctime)s %(levelname)-5s [%(name)s] %(message)s",
		datefmt="%Y-%m-%d %H:%M:%S",
	)

	logger = logging.getLogger(ROOT_LOGGER)
	logger.setLevel(numeric_level)
	logger.handlers.clear()

	stderr_handler = logging.StreamHandler(sys.stderr)
	stderr_handler.setFormatter(formatter)
	stderr_handler.setLevel(numeric_level)
	logger.addHandler(stderr_handler)

	if log_file:
		log_path = Path(log_file)
		log_path.parent.mkdir(parents=True, exist_ok=True)
		file_handler = logging.FileHandler(log_path)
		file_handler.setFormatter(formatter)
		file_handler.setLevel(numeric_level)
		logger.addHandler(file_handler)
		logger.info(f"Logging to file: {log_file}")

	return logger


def get_logger(component: str) -> logging.Logger:
	"""
	Get a logger for a specific component.

	Args:
		component: Component name (e.g., "loader", "locator", "customizer")

	Returns:
		Logger instance for the component
	"""
	return logging.getLogger(f"{ROOT_LOGGER}.{component}")
