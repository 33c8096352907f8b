import importlib
import sys
import uuid
from textwrap import dedent

import pytest


@pytest.fixture
def write_module(tmp_path, monkeypatch):
	"""Write source text as an importable module and return the module name."""
	monkeypatch.syspath_prepend(str(tmp_path))
	created = []

	def _write(code: str, name: str = "sample", module_name: str = None) -> str:
		if module_name is None:
			module_name = f"{name}_{uuid.uuid4().hex[:8]}"
		(tmp_path / f"{module_name}.py").write_text(dedent(code), encoding="utf-8")
		importlib.invalidate_caches()
		created.append(module_name)
		return module_name

	yield _write
	for module_name in created:
		sys.modules.pop(module_name, None)
