import importlib
import sys

import pytest

from commentdoc.config import Settings
from commentdoc.example_types import MySecondType, MyType
from commentdoc.exceptions import FieldNotFoundError, NotAStructError, SourceLoadError, TypeNotFoundError
from commentdoc.indexer import (
	build_index,
	get_comment_for_field,
	get_comment_for_function,
	get_comment_for_type,
	get_comment_map,
	get_comment_map_for_type,
	get_module_comment_maps,
)
from commentdoc.locator import locate_type
from commentdoc.source_loader import load_module


def test_block_comment_with_undocumented_fields(write_module):
	name = write_module(
		"""
		# Only the type is documented
		class Plain:
			a: int
			b: str = ""
			c = 3
		"""
	)
	assert get_comment_map(name, "Plain") == {
		"": "Only the type is documented",
		"a": "",
		"b": "",
		"c": "",
	}


def test_grouped_block_falls_back_to_each_entry(write_module):
	name = write_module(
		"""
		try:
			# First entry
			class First:
				# a of First
				a: int
			# Second entry
			class Second:
				b: int
		except ImportError:
			pass
		"""
	)
	assert get_comment_map(name, "First") == {"": "First entry", "a": "a of First"}
	assert get_comment_map(name, "Second") == {"": "Second entry", "b": ""}


def test_block_comment_of_a_group_is_not_inherited(write_module):
	name = write_module(
		"""
		# Shared block comment
		if True:
			class Left:
				pass
			# Right only
			class Right:
				pass
		"""
	)
	assert get_comment_map(name, "Left") == {"": ""}
	assert get_comment_map(name, "Right") == {"": "Right only"}


def test_single_entry_block_prefers_block_comment(write_module):
	name = write_module(
		"""
		# Outer
		if True:
			# Inner
			class Only:
				pass

		if True:
			# Inner only
			class Bare:
				pass
		"""
	)
	assert get_comment_map(name, "Only") == {"": "Outer"}
	assert get_comment_map(name, "Bare") == {"": "Inner only"}


def test_multi_name_slots_index_first_name(write_module):
	name = write_module(
		"""
		class Slots:
			# chained
			a = b = 0
			# unpacked
			x, y = 1, 2
			def method(self):
				pass
		"""
	)
	index = get_comment_map(name, "Slots")
	assert index == {"": "", "a": "chained", "x": "unpacked"}


def test_build_index_is_idempotent_and_rebuilt(write_module):
	source = """
		# Version one
		class Changing:
			# field one
			f: int
		"""
	name = write_module(source)
	block, entry = locate_type(load_module(name), "Changing")
	assert build_index(block, entry) == build_index(block, entry)
	assert get_comment_map(name, "Changing") == get_comment_map(name, "Changing")

	write_module(source.replace("one", "two"), module_name=name)
	assert get_comment_map(name, "Changing") == {"": "Version two", "f": "field two"}


def test_missing_type_gives_empty_map(write_module):
	name = write_module("class Present:\n\tpass\n")
	assert get_comment_map(name, "Absent") == {}


def test_missing_module_propagates():
	with pytest.raises(SourceLoadError):
		get_comment_map("no_such_module_for_commentdoc", "Anything")


@pytest.mark.skipif(sys.version_info < (3, 12), reason="type statements need Python 3.12")
def test_type_alias_is_not_a_struct(write_module):
	name = write_module(
		"""
		# An identifier
		type UserId = int
		"""
	)
	assert get_comment_map(name, "UserId") == {"": "An identifier"}
	mod = importlib.import_module(name)
	assert get_comment_for_type(mod.UserId) == "An identifier"
	with pytest.raises(NotAStructError):
		get_comment_for_field(mod.UserId, "anything")


def test_example_types_resolve_independently():
	assert get_comment_map_for_type(MyType) == {
		"": "A commented type",
		"myfield1": "This field is a string with a manual comment",
		"myfield2": "This field is an integer array and also manually commented",
		"myfield3": "This field is of a custom type",
		"myfield4": "This field is an array of the custom type",
	}
	assert get_comment_map_for_type(MySecondType) == {
		"": "A second commented type, only reached through MyType's fields",
		"mysecondfield1": "This field is inside the second custom type",
	}


def test_module_comment_maps():
	maps = get_module_comment_maps("commentdoc.example_types")
	assert sorted(maps) == ["MySecondType", "MyType"]
	assert maps["MyType"][""] == "A commented type"


def test_field_and_type_queries(write_module):
	name = write_module(
		"""
		# Base type
		class Base:
			# inherited field
			a: int = 0

		class Child(Base):
			# own field
			b: int = 0
		"""
	)
	mod = importlib.import_module(name)
	assert get_comment_for_type(mod.Base) == "Base type"
	assert get_comment_for_type(mod.Child) == ""
	assert get_comment_for_field(mod.Child, "b") == "own field"
	assert get_comment_for_field(mod.Child, "a") == "inherited field"
	with pytest.raises(FieldNotFoundError):
		get_comment_for_field(mod.Child, "missing")
	with pytest.raises(TypeNotFoundError):
		get_comment_for_type(type("Detached", (), {"__module__": name}))


def test_function_comments_and_docstring_fallback(write_module):
	name = write_module(
		'''
		# Adds numbers
		def add(a, b):
			return a + b

		def sub(a, b):
			"""Subtracts numbers."""
			return a - b
		'''
	)
	mod = importlib.import_module(name)
	assert get_comment_for_function(mod.add) == "Adds numbers"
	assert get_comment_for_function(f"{name}.add") == "Adds numbers"
	assert get_comment_for_function(mod.sub) == ""
	assert get_comment_for_function(mod.sub, settings=Settings(docstring_fallback=True)) == "Subtracts numbers."


def test_docstring_fallback_for_types(write_module):
	name = write_module(
		'''
		class Documented:
			"""From the docstring."""
			x: int = 0
		'''
	)
	assert get_comment_map(name, "Documented") == {"": "", "x": ""}
	fallback = get_comment_map(name, "Documented", settings=Settings(docstring_fallback=True))
	assert fallback == {"": "From the docstring.", "x": ""}


def test_nested_class_does_not_borrow_top_level_namesake(write_module):
	name = write_module(
		"""
		# Top-level Inner
		class Inner:
			# top-level field
			v: int = 0


		class Outer:
			class Inner:
				v: int = 0

			# Documented nested
			class Described:
				# nested field
				w: int = 0
		"""
	)
	mod = importlib.import_module(name)
	assert get_comment_for_type(mod.Inner) == "Top-level Inner"
	assert get_comment_for_type(mod.Outer.Inner) == ""
	assert get_comment_for_field(mod.Outer.Inner, "v") == ""
	assert get_comment_for_type(mod.Outer.Described) == "Documented nested"
	assert get_comment_for_field(mod.Outer.Described, "w") == "nested field"
	assert get_comment_map_for_type(mod.Outer.Described) == {"": "Documented nested", "w": "nested field"}


def test_local_class_is_not_found(write_module):
	name = write_module(
		"""
		# Top-level Local
		class Local:
			pass
		"""
	)

	class Local:
		pass

	Local.__module__ = name
	with pytest.raises(TypeNotFoundError):
		get_comment_for_type(Local)
