"""
HTTP surface for GORM Auto Generator.

A thin FastAPI adapter over translate(): the request body is turned into
an OptionSet plus SQL text, and the result or the error is returned as
JSON. Each request builds its own OptionSet, so requests share nothing.
"""

import logging
from typing import Any, Dict, Optional, Union

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, ConfigDict, Field

from gorm_auto_generator import __version__
from gorm_auto_generator.codegen import TEMPLATE_DIR
from gorm_auto_generator.config_validation import build_options
from gorm_auto_generator.constants import DefaultConfig, HTTP_OPTION_FIELDS
from gorm_auto_generator.exceptions import GormAutoGeneratorError
from gorm_auto_generator.pipeline import translate

logger = logging.getLogger(__name__)

Flag = Optional[Union[bool, str]]


class ParseRequest(BaseModel):
    """Body of POST /api/parse; flags accept JSON booleans or "true"/"false"."""

    sql: str = ""
    col_prefix: Optional[str] = None
    json_tag: Flag = Field(default=None, alias="json")
    table_prefix: Optional[str] = None
    package: Optional[str] = None
    no_null: Flag = None
    null_style: Optional[str] = None
    gorm_type: Flag = None
    force_tablename: Flag = None
    charset: Optional[str] = None
    collation: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def option_values(self) -> Dict[str, Any]:
        """Map request fields onto OptionSet field names, skipping unset ones."""
        body = self.model_dump(by_alias=True)
        return {
            option_field: body[http_field]
            for http_field, option_field in HTTP_OPTION_FIELDS
            if body.get(http_field) is not None
        }


def create_app() -> FastAPI:
    app = FastAPI(
        title="GORM Auto Generator",
        description="Convert MySQL CREATE TABLE statements into Go GORM model structs.",
        version=__version__,
    )
    templates = Jinja2Templates(directory=str(TEMPLATE_DIR))

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request):
        return templates.TemplateResponse(
            request,
            "index.html",
            {"default_package": DefaultConfig.PACKAGE_NAME, "version": __version__},
        )

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    @app.post("/api/parse")
    def parse(body: ParseRequest):
        try:
            options = build_options(**body.option_values())
            code = translate(body.sql, options)
        except GormAutoGeneratorError as e:
            logger.info(f"Rejected parse request: {e.message}")
            return JSONResponse(status_code=400, content=e.to_dict())
        return {"code": code}

    return app


app = create_app()


def parse_serve_address(address: str):
    """Split ``host:port`` (host optional, as in ``:18080``) for uvicorn."""
    host, _, port = address.rpartition(":")
    if not port.isdigit():
        raise ValueError(f"Invalid serve address: {address}")
    return host or "0.0.0.0", int(port)


def serve(address: str = DefaultConfig.SERVE_ADDRESS) -> None:
    """Run the web surface with uvicorn until interrupted."""
    import uvicorn

    host, port = parse_serve_address(address)
    logger.info(f"Serving on http://{host}:{port}/")
    uvicorn.run(app, host=host, port=port)
