from __future__ import annotations

import ast
import inspect
from typing import Any, Dict, List, Optional, Tuple

from .comments import normalize
from .config import Settings, settings as default_settings
from .exceptions import FieldNotFoundError, NotAStructError, TypeNotFoundError
from .locator import declaration_blocks, locate_function, locate_type, locate_type_for
from .logging_config import get_logger
from .model import (
	CommentIndex,
	DeclarationBlock,
	FieldIdentity,
	FunctionIdentity,
	ParsedModule,
	TypeEntry,
	TypeIdentity,
)
from .source_loader import load_module

logger = get_logger("indexer")

Cache = Optional[Dict[str, ParsedModule]]


def _slot_name(target: ast.expr) -> Optional[str]:
	if isinstance(target, ast.Name):
		return target.id
	if isinstance(target, (ast.Tuple, ast.List)) and target.elts:
		# Only the first of several names declared together is indexed.
		return _slot_name(target.elts[0])
	return None


def field_slots(class_node: ast.ClassDef) -> List[Tuple[str, ast.stmt]]:
	"""(name, statement) for each field declared directly in a class body."""
	slots: List[Tuple[str, ast.stmt]] = []
	for stmt in class_node.body:
		name = None
		if isinstance(stmt, ast.AnnAssign):
			name = _slot_name(stmt.target)
		elif isinstance(stmt, ast.Assign):
			name = _slot_name(stmt.targets[0])
		if name:
			slots.append((name, stmt))
	return slots


def root_description(block: DeclarationBlock, entry: TypeEntry, docstring_fallback: bool = False) -> str:
	# A lone entry is documented above the whole statement; grouped entries
	# each carry their own comment.
	s = ""
	if len(block.entries) == 1:
		s = normalize(block.doc)
	if not s:
		s = normalize(entry.doc)
	if not s and docstring_fallback and isinstance(entry.node, ast.ClassDef):
		s = ast.get_docstring(entry.node) or ""
	return s


def build_index(block: DeclarationBlock, entry: TypeEntry, docstring_fallback: bool = False) -> CommentIndex:
	"""
	Comment map of a type: "" holds the type's own description, every field
	slot maps to its own comment ("" when it has none).
	"""
	index: CommentIndex = {"": root_description(block, entry, docstring_fallback)}
	if not entry.is_struct:
		logger.debug(f"{entry.name} is not a class; comment map holds only its own description")
		return index
	for name, slot in field_slots(entry.node):  # type: ignore[arg-type]
		doc = block.source.doc_for(slot) if block.source else None
		index[name] = normalize(doc)
	return index


def get_comment_map(
	module_path: str,
	type_name: str,
	settings: Optional[Settings] = None,
	cache: Cache = None,
) -> CommentIndex:
	"""
	Comment map for a type named in a module.

	A missing type gives an empty map; SourceLoadError propagates.
	"""
	cfg = settings or default_settings
	parsed = load_module(module_path, cache)
	try:
		block, entry = locate_type(parsed, type_name)
	except TypeNotFoundError as e:
		logger.info(f"{e}; returning an empty comment map")
		return {}
	return build_index(block, entry, cfg.docstring_fallback)


def get_comment_map_for_type(t: Any, settings: Optional[Settings] = None, cache: Cache = None) -> CommentIndex:
	identity = TypeIdentity.from_type(t)
	return get_comment_map(identity.module, identity.name, settings=settings, cache=cache)


def get_module_comment_maps(module_path: str, settings: Optional[Settings] = None) -> Dict[str, CommentIndex]:
	"""Comment maps of every type declared in a module, keyed by type name."""
	cfg = settings or default_settings
	maps: Dict[str, CommentIndex] = {}
	for parsed_file in load_module(module_path).files:
		for block in declaration_blocks(parsed_file):
			for entry in block.entries:
				if entry.name not in maps:
					maps[entry.name] = build_index(block, entry, cfg.docstring_fallback)
	return maps


def get_comment_for_type(t: Any, settings: Optional[Settings] = None, cache: Cache = None) -> str:
	"""Description of a type. Raises TypeNotFoundError or SourceLoadError."""
	cfg = settings or default_settings
	block, entry = locate_type_for(t, cache)
	return root_description(block, entry, cfg.docstring_fallback)


def _declaring_class(t: Any, field_name: str) -> Any:
	# Inherited annotated fields are documented where they are declared.
	if not inspect.isclass(t):
		return t
	for klass in inspect.getmro(t):
		if field_name in inspect.get_annotations(klass):
			return klass
	return t


def get_comment_for_field(
	t: Any,
	field_name: str,
	settings: Optional[Settings] = None,
	cache: Cache = None,
) -> str:
	"""Description of one field of a class. Raises on any lookup failure."""
	cfg = settings or default_settings
	identity = FieldIdentity(owner=TypeIdentity.from_type(_declaring_class(t, field_name)), name=field_name)
	block, entry = locate_type(load_module(identity.owner.module, cache), identity.owner.name)
	if not entry.is_struct:
		raise NotAStructError(entry.name)
	index = build_index(block, entry, cfg.docstring_fallback)
	if not identity.name or identity.name not in index:
		raise FieldNotFoundError(entry.name, identity.name)
	return index[identity.name]


def get_comment_for_function(fn: Any, settings: Optional[Settings] = None, cache: Cache = None) -> str:
	"""
	Description of a function or method.

	fn may be a FunctionIdentity, a runtime symbol string ("pkg.mod.func",
	"pkg.mod.Type.method:bound") or the callable itself.
	"""
	cfg = settings or default_settings
	if isinstance(fn, FunctionIdentity):
		identity = fn
	elif isinstance(fn, str):
		identity = FunctionIdentity.from_symbol(fn)
	else:
		identity = FunctionIdentity.from_callable(fn)
	entry = locate_function(identity, cache)
	s = normalize(entry.doc)
	if not s and cfg.docstring_fallback:
		s = ast.get_docstring(entry.node) or ""  # type: ignore[arg-type]
	return s
