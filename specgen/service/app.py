"""FastAPI application serving the generated document and a viewer page."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from fastapi import APIRouter, FastAPI
from fastapi.responses import HTMLResponse, JSONResponse
from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import BaseModel

from ..generator.openapi import Document

SPEC_SUBPATH = "/swagger/openapi.json"
VIEWER_SUBPATH = "/swagger"
SWAGGER_ASSETS = "https://unpkg.com/swagger-ui-dist"

_TEMPLATES = Environment(
    loader=FileSystemLoader(str(Path(__file__).with_name("templates"))),
    autoescape=select_autoescape(["html", "j2"]),
)


class HealthResponse(BaseModel):
    status: str


def render_viewer(spec_url: str, *, title: str = "Swagger UI", assets_url: str = SWAGGER_ASSETS) -> str:
    """Render the static viewer page that loads the document from ``spec_url``."""
    template = _TEMPLATES.get_template("swagger.html.j2")
    return template.render(spec_url=spec_url, title=title or "Swagger UI", assets_url=assets_url)


def create_app(document: Document, *, prefix: str = "") -> FastAPI:
    """Create the FastAPI application exposing ``document``.

    The viewer page is served at ``{prefix}/swagger`` and the document at
    ``{prefix}/swagger/openapi.json``.
    """
    prefix = prefix.rstrip("/")
    payload: Dict[str, Any] = document.to_dict()
    viewer = render_viewer(prefix + SPEC_SUBPATH, title=document.info.title)

    app = FastAPI(title="specgen viewer", openapi_url=None, docs_url=None, redoc_url=None)
    router = APIRouter(prefix=prefix)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @router.get(VIEWER_SUBPATH, response_class=HTMLResponse)
    async def swagger_ui() -> HTMLResponse:
        return HTMLResponse(content=viewer)

    @router.get(SPEC_SUBPATH)
    async def swagger_json() -> JSONResponse:
        return JSONResponse(content=payload)

    app.include_router(router)
    return app


def run_service(document: Document, host: str = "127.0.0.1", port: int = 8081) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(document), host=host, port=port)


__all__ = ["HealthResponse", "create_app", "render_viewer", "run_service"]
