"""Source-comment descriptions for pydantic JSON schemas.

Modules:
- source_loader.py: Resolve a module path to its parsed source files and comment lines.
- locator.py: Find type and function declarations in parsed source.
- comments.py: Turn a documentation comment into a description string.
- indexer.py: Comment maps of classes and description queries.
- customizer.py: JSON schema generator hook that writes descriptions.
- model.py: Identities and parse results.
"""

from .customizer import CommentJsonSchema, DescriptionAdder, add_type_to_schemas, type_and_field_description_adder
from .exceptions import (
	CommentDocError,
	FieldNotFoundError,
	FunctionNotFoundError,
	NotAStructError,
	SourceLoadError,
	TypeNotFoundError,
)
from .indexer import (
	build_index,
	get_comment_for_field,
	get_comment_for_function,
	get_comment_for_type,
	get_comment_map,
	get_comment_map_for_type,
	get_module_comment_maps,
)

__all__ = [
	"CommentJsonSchema",
	"DescriptionAdder",
	"add_type_to_schemas",
	"type_and_field_description_adder",
	"CommentDocError",
	"FieldNotFoundError",
	"FunctionNotFoundError",
	"NotAStructError",
	"SourceLoadError",
	"TypeNotFoundError",
	"build_index",
	"get_comment_for_field",
	"get_comment_for_function",
	"get_comment_for_type",
	"get_comment_map",
	"get_comment_map_for_type",
	"get_module_comment_maps",
]
