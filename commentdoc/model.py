from __future__ import annotations

import ast
import functools
import inspect
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from .exceptions import TypeNotFoundError


# Suffix of a runtime symbol that names a method bound to a receiver.
BOUND_METHOD_MARKER = ":bound"

# Field name -> description. The type's own description lives under "".
CommentIndex = Dict[str, str]

# Raw "# ..." lines directly above a declaration, in source order.
DocumentationComment = Optional[List[str]]


class TypeIdentity(BaseModel):
	module: str
	name: str

	@classmethod
	def from_type(cls, t: Any) -> "TypeIdentity":
		# Parametrized pydantic generics (Model[int]) are declared as their origin.
		metadata = getattr(t, "__pydantic_generic_metadata__", None) or {}
		origin = metadata.get("origin") or t
		module = getattr(origin, "__module__", None)
		name = getattr(origin, "__qualname__", None) or getattr(origin, "__name__", None)
		if not isinstance(module, str) or not isinstance(name, str):
			raise TypeNotFoundError(str(module), repr(t))
		# Classes created inside a function body have no module-level declaration.
		if "<locals>" in name:
			raise TypeNotFoundError(module, name)
		return cls(module=module, name=name)


class FieldIdentity(BaseModel):
	owner: TypeIdentity
	name: str


class FunctionIdentity(BaseModel):
	module: str
	name: str
	owner: Optional[str] = None

	@property
	def qualname(self) -> str:
		return f"{self.owner}.{self.name}" if self.owner else self.name

	@classmethod
	def from_symbol(cls, symbol: str) -> "FunctionIdentity":
		"""Decode "pkg.mod.func" or "pkg.mod.Type.method:bound"."""
		if symbol.endswith(BOUND_METHOD_MARKER):
			parts = symbol[: -len(BOUND_METHOD_MARKER)].split(".")
			return cls(module=".".join(parts[:-2]), name=parts[-1])
		parts = symbol.split(".")
		return cls(module=".".join(parts[:-1]), name=parts[-1])

	@classmethod
	def from_callable(cls, fn: Any) -> "FunctionIdentity":
		target = _underlying_function(fn)
		parts = target.__qualname__.split(".")
		owner = ".".join(parts[:-1]) or None
		return cls(module=target.__module__, name=parts[-1], owner=owner)


def _underlying_function(fn: Any) -> Any:
	if isinstance(fn, (staticmethod, classmethod)):
		fn = fn.__func__
	if inspect.ismethod(fn):
		fn = fn.__func__
	if isinstance(fn, functools.partial):
		fn = fn.func
	return inspect.unwrap(fn)


def runtime_symbol(fn: Any) -> str:
	"""Symbol string for a callable, marking bound methods with BOUND_METHOD_MARKER."""
	target = _underlying_function(fn)
	symbol = f"{target.__module__}.{target.__qualname__}"
	if inspect.ismethod(fn):
		symbol += BOUND_METHOD_MARKER
	return symbol


@dataclass
class ParsedFile:
	path: str
	tree: ast.Module
	# Line number -> text of a comment that is alone on its line.
	comment_lines: Dict[int, str] = field(default_factory=dict)

	def doc(self, line: int) -> DocumentationComment:
		lines: List[str] = []
		cursor = line - 1
		while cursor in self.comment_lines:
			lines.append(self.comment_lines[cursor])
			cursor -= 1
		if not lines:
			return None
		return list(reversed(lines))

	def doc_for(self, node: ast.AST) -> DocumentationComment:
		return self.doc(first_line(node))


@dataclass
class ParsedModule:
	module: str
	files: List[ParsedFile] = field(default_factory=list)


def first_line(node: ast.AST) -> int:
	# Decorators sit above the "class"/"def" line; the comment goes above them.
	lines = [node.lineno]
	for deco in getattr(node, "decorator_list", []) or []:
		lines.append(deco.lineno)
	return min(lines)


@dataclass
class TypeEntry:
	name: str
	node: ast.stmt
	doc: DocumentationComment = None

	@property
	def is_struct(self) -> bool:
		return isinstance(self.node, ast.ClassDef)


@dataclass
class DeclarationBlock:
	node: ast.stmt
	doc: DocumentationComment = None
	entries: List[TypeEntry] = field(default_factory=list)
	source: Optional[ParsedFile] = None

	@property
	def path(self) -> str:
		return self.source.path if self.source else ""


@dataclass
class FunctionEntry:
	qualname: str
	node: ast.stmt
	doc: DocumentationComment = None
	path: str = ""

	@property
	def name(self) -> str:
		return self.qualname.rsplit(".", 1)[-1]


class IndexRequest(BaseModel):
	module: str
	type_name: str


class IndexResponse(BaseModel):
	module: str
	type_name: str
	description: str = ""
	fields: Dict[str, str] = {}


class SchemaRequest(BaseModel):
	target: str
