from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI, HTTPException
from pydantic import PydanticUserError

from commentdoc.customizer import add_type_to_schemas, import_target
from commentdoc.exceptions import DeclarationNotFoundError, SourceLoadError
from commentdoc.indexer import get_comment_map
from commentdoc.logging_config import get_logger, setup_logging
from commentdoc.model import IndexRequest, IndexResponse, SchemaRequest


setup_logging()
logger = get_logger("api")

app = FastAPI(title="commentdoc")


@app.post("/index", response_model=IndexResponse)
def index(req: IndexRequest) -> IndexResponse:
	try:
		comments = get_comment_map(req.module, req.type_name)
	except SourceLoadError as e:
		raise HTTPException(status_code=400, detail=str(e))
	if not comments:
		raise HTTPException(status_code=404, detail=f"Type '{req.type_name}' not found in module '{req.module}'")

	description = comments.pop("", "")
	return IndexResponse(module=req.module, type_name=req.type_name, description=description, fields=comments)


@app.post("/schema")
def schema(req: SchemaRequest) -> Dict[str, Any]:
	try:
		target = import_target(req.target)
	except SourceLoadError as e:
		raise HTTPException(status_code=400, detail=str(e))
	except DeclarationNotFoundError as e:
		raise HTTPException(status_code=404, detail=str(e))

	schemas: Dict[str, Any] = {}
	try:
		add_type_to_schemas(target, req.target, schemas)
	except PydanticUserError as e:
		raise HTTPException(status_code=400, detail=str(e))
	logger.info(f"Generated schema for {req.target}")
	return schemas[req.target]


def create_app() -> FastAPI:
	return app
