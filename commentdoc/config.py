from __future__ import annotations

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	"""
	commentdoc settings, read from COMMENTDOC_* environment variables or a .env file.
	"""

	# [Logging]
	log_level: str = "WARNING"
	log_file: Optional[str] = None

	# [Resolution]
	# Use the class/function docstring when no comment sits above the declaration.
	docstring_fallback: bool = False

	# [Schema customization]
	# Replace descriptions pydantic already produced (docstrings, Field(description=...)).
	override_existing: bool = False
	# Parse each module once per schema build instead of once per field.
	session_cache: bool = False

	model_config = SettingsConfigDict(
		env_prefix="COMMENTDOC_",
		env_file=".env",
		env_file_encoding="utf-8",
		extra="ignore",
	)


# Global settings instance
settings = Settings()
