from __future__ import annotations

import ast
import importlib.machinery
import importlib.util
import io
import os
import sys
import tokenize
from typing import Dict, List, Optional

from .exceptions import SourceLoadError
from .logging_config import get_logger
from .model import ParsedFile, ParsedModule

logger = get_logger("loader")


def _is_source_file(path: str) -> bool:
	_, ext = os.path.splitext(path)
	return ext.lower() in importlib.machinery.SOURCE_SUFFIXES


def resolve_source_files(module_path: str) -> List[str]:
	"""Return the source files that make up a module, without importing it."""
	module = sys.modules.get(module_path)
	spec = getattr(module, "__spec__", None) if module is not None else None
	if spec is None and module is not None:
		# Scripts run as __main__ have no spec, only a file.
		path = getattr(module, "__file__", None)
		if path and _is_source_file(path):
			return [path]
	if spec is None:
		try:
			spec = importlib.util.find_spec(module_path)
		except (ImportError, ValueError) as e:
			raise SourceLoadError(module_path, str(e)) from e
	if spec is None:
		raise SourceLoadError(module_path, "no such module")

	if spec.origin and spec.has_location:
		if not _is_source_file(spec.origin):
			raise SourceLoadError(module_path, f"no Python source for {spec.origin}")
		return [spec.origin]

	locations = list(spec.submodule_search_locations or [])
	if not locations:
		raise SourceLoadError(module_path, f"no source location ({spec.origin or 'unknown origin'})")

	# Namespace package: every source file directly inside it.
	files: List[str] = []
	for location in locations:
		try:
			filenames = sorted(os.listdir(location))
		except OSError as e:
			raise SourceLoadError(module_path, f"cannot list {location}: {e}") from e
		for filename in filenames:
			path = os.path.join(location, filename)
			if os.path.isfile(path) and _is_source_file(path):
				files.append(path)
	return files


def collect_comment_lines(text: str) -> Dict[int, str]:
	"""Map line numbers to the comment on that line, for lines holding only a comment."""
	lines: Dict[int, str] = {}
	for tok in tokenize.generate_tokens(io.StringIO(text).readline):
		if tok.type != tokenize.COMMENT:
			continue
		row, col = tok.start
		if not tok.line[:col].strip():
			lines[row] = tok.string
	return lines


def parse_source_file(module_path: str, path: str, text: str) -> ParsedFile:
	try:
		tree = ast.parse(text, filename=path)
		comment_lines = collect_comment_lines(text)
	except (SyntaxError, ValueError, tokenize.TokenError, RecursionError, MemoryError) as e:
		raise SourceLoadError(module_path, f"cannot parse {path}: {e}") from e
	return ParsedFile(path=path, tree=tree, comment_lines=comment_lines)


def load_module(module_path: str, cache: Optional[Dict[str, ParsedModule]] = None) -> ParsedModule:
	"""
	Parse every source file of a module.

	Raises SourceLoadError when the module cannot be resolved, read or parsed.
	When a cache dict is given, a module already in it is returned as is.
	"""
	if cache is not None and module_path in cache:
		return cache[module_path]

	parsed = ParsedModule(module=module_path)
	for path in resolve_source_files(module_path):
		try:
			# Honours coding declarations and a UTF-8 BOM, as the import system does.
			with tokenize.open(path) as fh:
				text = fh.read()
		except (OSError, SyntaxError, UnicodeDecodeError) as e:
			raise SourceLoadError(module_path, f"cannot read {path}: {e}") from e
		parsed.files.append(parse_source_file(module_path, path, text))

	logger.debug(f"Loaded module {module_path}: {len(parsed.files)} file(s)")
	if cache is not None:
		cache[module_path] = parsed
	return parsed
