from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

import uvicorn

from commentdoc.customizer import add_type_to_schemas, import_target
from commentdoc.exceptions import CommentDocError
from commentdoc.indexer import get_comment_map, get_module_comment_maps
from commentdoc.logging_config import setup_logging


def cmd_index(args: argparse.Namespace) -> None:
	index = get_comment_map(args.module, args.type_name)
	print(json.dumps(index, indent=2))


def cmd_scan(args: argparse.Namespace) -> None:
	print(json.dumps(get_module_comment_maps(args.module), indent=2))


def cmd_schema(args: argparse.Namespace) -> None:
	schemas = {}
	add_type_to_schemas(import_target(args.target), args.target, schemas, mode=args.mode)
	print(json.dumps(schemas[args.target], indent=2))


def cmd_serve(args: argparse.Namespace) -> None:
	uvicorn.run("api:app", host=args.host, port=args.port, reload=args.reload)


def main(argv: Optional[List[str]] = None) -> None:
	parser = argparse.ArgumentParser(prog="commentdoc")
	parser.add_argument("--log-level", default=None, help="Override COMMENTDOC_LOG_LEVEL")
	sub = parser.add_subparsers(dest="cmd", required=True)

	pi = sub.add_parser("index", help="Print the comment map of a type as JSON")
	pi.add_argument("module", help="Import path of the module declaring the type")
	pi.add_argument("type_name", help="Name of the type")
	pi.set_defaults(func=cmd_index)

	pc = sub.add_parser("scan", help="Print the comment maps of every type in a module")
	pc.add_argument("module", help="Import path of the module")
	pc.set_defaults(func=cmd_scan)

	pm = sub.add_parser("schema", help="Print the described JSON schema of a type")
	pm.add_argument("target", help="module:TypeName")
	pm.add_argument("--mode", choices=["validation", "serialization"], default="validation")
	pm.set_defaults(func=cmd_schema)

	ps = sub.add_parser("serve", help="Run FastAPI server")
	ps.add_argument("--host", default="127.0.0.1")
	ps.add_argument("--port", type=int, default=8000)
	ps.add_argument("--reload", action="store_true")
	ps.set_defaults(func=cmd_serve)

	args = parser.parse_args(argv)
	setup_logging(level=args.log_level)
	try:
		args.func(args)
	except CommentDocError as e:
		print(f"error: {e}", file=sys.stderr)
		sys.exit(1)


if __name__ == "__main__":
	main()
