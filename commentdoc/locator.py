from __future__ import annotations

import ast
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .exceptions import FunctionNotFoundError, TypeNotFoundError
from .logging_config import get_logger
from .model import (
	DeclarationBlock,
	FunctionEntry,
	FunctionIdentity,
	ParsedFile,
	ParsedModule,
	TypeEntry,
	TypeIdentity,
)
from .source_loader import load_module

logger = get_logger("locator")

# "type X = ..." statements only exist on Python 3.12+.
_TYPE_ALIAS = getattr(ast, "TypeAlias", None)
_TRY_NODES: Tuple[type, ...] = (ast.Try,) + ((ast.TryStar,) if hasattr(ast, "TryStar") else ())
BLOCK_NODES: Tuple[type, ...] = (ast.If,) + _TRY_NODES
FUNCTION_NODES = (ast.FunctionDef, ast.AsyncFunctionDef)


def is_type_node(node: ast.AST) -> bool:
	if isinstance(node, ast.ClassDef):
		return True
	return _TYPE_ALIAS is not None and isinstance(node, _TYPE_ALIAS)


def type_node_name(node: ast.AST) -> str:
	if isinstance(node, ast.ClassDef):
		return node.name
	return node.name.id  # type: ignore[attr-defined]


def _block_statements(node: ast.stmt) -> Iterator[ast.stmt]:
	# Statements of every branch of an if/try, descending into nested if/try (elif).
	bodies: List[List[ast.stmt]] = [node.body, getattr(node, "orelse", [])]  # type: ignore[attr-defined]
	for handler in getattr(node, "handlers", []) or []:
		bodies.append(handler.body)
	bodies.append(getattr(node, "finalbody", []) or [])
	for body in bodies:
		for stmt in body:
			if isinstance(stmt, BLOCK_NODES):
				yield from _block_statements(stmt)
			else:
				yield stmt


def declaration_blocks(parsed_file: ParsedFile) -> List[DeclarationBlock]:
	"""Top-level statements of a file that declare at least one type."""
	blocks: List[DeclarationBlock] = []
	for stmt in parsed_file.tree.body:
		if is_type_node(stmt):
			doc = parsed_file.doc_for(stmt)
			entry = TypeEntry(name=type_node_name(stmt), node=stmt, doc=doc)
			blocks.append(DeclarationBlock(node=stmt, doc=doc, entries=[entry], source=parsed_file))
		elif isinstance(stmt, BLOCK_NODES):
			entries = [
				TypeEntry(name=type_node_name(sub), node=sub, doc=parsed_file.doc_for(sub))
				for sub in _block_statements(stmt)
				if is_type_node(sub)
			]
			if entries:
				blocks.append(
					DeclarationBlock(
						node=stmt,
						doc=parsed_file.doc_for(stmt),
						entries=entries,
						source=parsed_file,
					)
				)
	return blocks


def _nested_type(
	parsed_file: ParsedFile, entry: TypeEntry, path: List[str]
) -> Optional[Tuple[DeclarationBlock, TypeEntry]]:
	# Walk "Outer.Inner" through the bodies of the enclosing classes.
	block: Optional[DeclarationBlock] = None
	for name in path:
		if not isinstance(entry.node, ast.ClassDef):
			return None
		found = next(
			(stmt for stmt in entry.node.body if is_type_node(stmt) and type_node_name(stmt) == name),
			None,
		)
		if found is None:
			return None
		doc = parsed_file.doc_for(found)
		entry = TypeEntry(name=name, node=found, doc=doc)
		block = DeclarationBlock(node=found, doc=doc, entries=[entry], source=parsed_file)
	return (block, entry) if block is not None else None


def locate_type(parsed_module: ParsedModule, type_name: str) -> Tuple[DeclarationBlock, TypeEntry]:
	"""
	Find the block and entry declaring type_name. Raises TypeNotFoundError.

	A dotted name ("Outer.Inner") names a class declared in another class's body.
	"""
	head, *nested = type_name.split(".")
	for parsed_file in parsed_module.files:
		for block in declaration_blocks(parsed_file):
			for entry in block.entries:
				if entry.name != head:
					continue
				if nested:
					found = _nested_type(parsed_file, entry, nested)
					if found is None:
						continue
					block, entry = found
				logger.debug(f"Found type {type_name} at {parsed_file.path}:{entry.node.lineno}")
				return block, entry
	raise TypeNotFoundError(parsed_module.module, type_name)


def locate_type_for(
	t: Any, cache: Optional[Dict[str, ParsedModule]] = None
) -> Tuple[DeclarationBlock, TypeEntry]:
	"""Load the module a live type comes from and find its declaration."""
	identity = TypeIdentity.from_type(t)
	return locate_type(load_module(identity.module, cache), identity.name)


def _functions_in(parsed_file: ParsedFile, stmt: ast.stmt, owner: str = "") -> Iterator[FunctionEntry]:
	if isinstance(stmt, FUNCTION_NODES):
		qualname = f"{owner}.{stmt.name}" if owner else stmt.name
		yield FunctionEntry(qualname=qualname, node=stmt, doc=parsed_file.doc_for(stmt), path=parsed_file.path)
	elif isinstance(stmt, ast.ClassDef) and not owner:
		for sub in stmt.body:
			yield from _functions_in(parsed_file, sub, owner=stmt.name)
	elif isinstance(stmt, BLOCK_NODES) and not owner:
		for sub in _block_statements(stmt):
			yield from _functions_in(parsed_file, sub)


def function_entries(parsed_file: ParsedFile) -> Iterator[FunctionEntry]:
	"""Top-level functions and the methods of top-level classes, in source order."""
	for stmt in parsed_file.tree.body:
		yield from _functions_in(parsed_file, stmt)


def locate_function(
	identity: FunctionIdentity, cache: Optional[Dict[str, ParsedModule]] = None
) -> FunctionEntry:
	"""
	Find a function or method declaration. Raises FunctionNotFoundError.

	With an owner the qualified name must match; without one the first
	function or method with the bare name wins.
	"""
	parsed_module = load_module(identity.module, cache)
	for parsed_file in parsed_module.files:
		for entry in function_entries(parsed_file):
			if identity.owner:
				matched = entry.qualname == identity.qualname
			else:
				matched = entry.name == identity.name
			if matched:
				return entry
	raise FunctionNotFoundError(identity.module, identity.qualname)
