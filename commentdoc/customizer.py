from __future__ import annotations

import dataclasses
import importlib
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, TypeAdapter
from pydantic.fields import FieldInfo
from pydantic.json_schema import GenerateJsonSchema, JsonSchemaMode, JsonSchemaValue
from pydantic_core import core_schema

from .config import Settings, settings as default_settings
from .exceptions import CommentDocError, SourceLoadError, TypeNotFoundError
from .indexer import get_comment_for_field, get_comment_for_type
from .logging_config import get_logger
from .model import ParsedModule

logger = get_logger("customizer")

# (json name, field name, field type, field metadata, parent type or None, schema to update)
SchemaCustomizer = Callable[[str, str, Any, Any, Optional[Any], Dict[str, Any]], None]


class DescriptionAdder:
	"""
	Schema customizer that writes the source comment of a field (or of a type,
	when it has no parent) into the schema's "description".

	Resolution failures are logged and leave the description unset, so a
	schema build never fails because of a missing or unparsable module.
	"""

	def __init__(self, settings: Optional[Settings] = None, cache: Optional[Dict[str, ParsedModule]] = None):
		self.settings = settings or default_settings
		self.cache = cache

	def __call__(
		self,
		json_name: str,
		field_name: str,
		field_type: Any,
		metadata: Any,
		parent: Optional[Any],
		schema: Dict[str, Any],
	) -> None:
		try:
			if parent is not None:
				s = get_comment_for_field(parent, field_name, self.settings, self.cache)
			else:
				s = get_comment_for_type(field_type, self.settings, self.cache)
		except CommentDocError as e:
			logger.warning(f"No description for {json_name!r}: {e}")
			return
		if not s:
			return
		if schema.get("description") and not self.settings.override_existing:
			return
		schema["description"] = s


def type_and_field_description_adder(
	json_name: str,
	field_name: str,
	field_type: Any,
	metadata: Any,
	parent: Optional[Any],
	schema: Dict[str, Any],
) -> None:
	"""Stateless form of DescriptionAdder using the global settings."""
	DescriptionAdder()(json_name, field_name, field_type, metadata, parent, schema)


class CommentJsonSchema(GenerateJsonSchema):
	"""
	pydantic JSON schema generator that describes models, dataclasses,
	TypedDicts and enums from the comments above their declarations.

	Usage:
		MyModel.model_json_schema(schema_generator=CommentJsonSchema)
		TypeAdapter(MyDataclass).json_schema(schema_generator=CommentJsonSchema)

	Every class is described in its own schema (its $defs entry when nested),
	every property with the comment of the field it was generated from.
	Enums only get their own description.
	"""

	settings: Settings = default_settings

	def __init__(self, *args: Any, **kwargs: Any):
		super().__init__(*args, **kwargs)
		# One generator instance serves exactly one schema build.
		cache: Optional[Dict[str, ParsedModule]] = {} if self.settings.session_cache else None
		self.customizer: SchemaCustomizer = DescriptionAdder(self.settings, cache)

	def model_schema(self, schema: core_schema.ModelSchema) -> JsonSchemaValue:
		json_schema = super().model_schema(schema)
		cls = schema["cls"]
		self._describe_class(cls, json_schema, dict(cls.model_fields))
		return json_schema

	def dataclass_schema(self, schema: core_schema.DataclassSchema) -> JsonSchemaValue:
		json_schema = super().dataclass_schema(schema)
		cls = schema["cls"]
		fields = getattr(cls, "__pydantic_fields__", None)
		if fields is None:
			fields = {f.name: f for f in dataclasses.fields(cls)}
		self._describe_class(cls, json_schema, dict(fields))
		return json_schema

	def typed_dict_schema(self, schema: core_schema.TypedDictSchema) -> JsonSchemaValue:
		json_schema = super().typed_dict_schema(schema)
		cls = schema.get("cls")
		if cls is not None:
			self._describe_class(cls, json_schema, dict(schema["fields"]))
		return json_schema

	def enum_schema(self, schema: core_schema.EnumSchema) -> JsonSchemaValue:
		json_schema = super().enum_schema(schema)
		cls = schema["cls"]
		self.customizer(json_schema.get("title", cls.__name__), "", cls, None, None, json_schema)
		return json_schema

	def _json_name(self, name: str, info: Any) -> str:
		if not self.by_alias or not isinstance(info, FieldInfo):
			return name
		if self.mode == "validation":
			alias = info.validation_alias if isinstance(info.validation_alias, str) else info.alias
		else:
			alias = info.serialization_alias or info.alias
		return alias or name

	def _describe_class(self, cls: Any, json_schema: JsonSchemaValue, fields: Dict[str, Any]) -> None:
		properties = json_schema.get("properties", {})
		for name, info in fields.items():
			json_name = self._json_name(name, info)
			prop = properties.get(json_name)
			if prop is None:
				continue
			field_type = info.annotation if isinstance(info, FieldInfo) else getattr(info, "type", None)
			self.customizer(json_name, name, field_type, info, cls, prop)
		self.customizer(json_schema.get("title", cls.__name__), "", cls, None, None, json_schema)


def import_target(target: str) -> Any:
	"""Import "pkg.module:TypeName" and return the type."""
	module_path, _, type_name = target.partition(":")
	if not type_name:
		raise TypeNotFoundError(module_path, "")
	try:
		module = importlib.import_module(module_path)
	except Exception as e:
		# Anything the module raises while it runs means it cannot be loaded.
		raise SourceLoadError(module_path, f"{type(e).__name__}: {e}") from e
	try:
		return getattr(module, type_name)
	except AttributeError as e:
		raise TypeNotFoundError(module_path, type_name) from e


def _schema_target(value: Any) -> Any:
	if isinstance(value, BaseModel):
		return type(value)
	if dataclasses.is_dataclass(value) and not isinstance(value, type):
		return type(value)
	return value


def add_type_to_schemas(
	value: Any,
	key: str,
	schemas: Dict[str, Any],
	schema_generator: type[GenerateJsonSchema] = CommentJsonSchema,
	mode: JsonSchemaMode = "validation",
) -> Dict[str, Any]:
	"""
	Generate the described JSON schema of a type (or of an instance's type) and
	store it in schemas under key. Generation errors propagate.
	"""
	schemas[key] = TypeAdapter(_schema_target(value)).json_schema(schema_generator=schema_generator, mode=mode)
	return schemas[key]
