"""
commentdoc exception hierarchy.

All errors raised by the resolution pipeline inherit from CommentDocError, so a
caller that only wants "description or nothing" can catch that one class.

Usage:
	from commentdoc.exceptions import CommentDocError, SourceLoadError

	try:
		index = get_comment_map("pkg.models", "User")
	except SourceLoadError as e:
		logger.error(f"Could not parse source: {e}")
"""


class CommentDocError(Exception):
	"""Base exception for all commentdoc errors."""

	def __init__(self, message: str, details: dict | None = None):
		super().__init__(message)
		self.message = message
		self.details = details or {}

	def __str__(self) -> str:
		if self.details:
			return f"{self.message} ({self.details})"
		return self.message


# =============================================================================
# Loading
# =============================================================================


class SourceLoadError(CommentDocError):
	"""A module's source could not be resolved, read or parsed."""

	def __init__(self, module: str, reason: str):
		super().__init__(f"Could not load source of module '{module}': {reason}")
		self.module = module
		self.reason = reason


# =============================================================================
# Resolution
# =============================================================================


class DeclarationNotFoundError(CommentDocError):
	"""Base class for lookups that found no matching declaration."""

	pass


class TypeNotFoundError(DeclarationNotFoundError):
	"""No type entry with the requested name is declared in the module."""

	def __init__(self, module: str, type_name: str):
		super().__init__(f"Type '{type_name}' not found in module '{module}'")
		self.module = module
		self.type_name = type_name


class FunctionNotFoundError(DeclarationNotFoundError):
	"""No function or method with the requested name is declared in the module."""

	def __init__(self, module: str, name: str):
		super().__init__(f"Function '{name}' not found in module '{module}'")
		self.module = module
		self.name = name


class FieldNotFoundError(DeclarationNotFoundError):
	"""The type was found but declares no field slot with the requested name."""

	def __init__(self, type_name: str, field_name: str):
		super().__init__(f"Field '{field_name}' not found in type '{type_name}'")
		self.type_name = type_name
		self.field_name = field_name


class NotAStructError(CommentDocError):
	"""The type was found but is not a class with field slots."""

	def __init__(self, type_name: str):
		super().__init__(f"Type '{type_name}' is not a class, it has no fields")
		self.type_name = type_name
