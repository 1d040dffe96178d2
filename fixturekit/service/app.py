"""FastAPI application entrypoint for fixturekit service mode."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import FixtureKitConfig, load_config
from ..errors import FixtureError
from ..fixture import FixtureAssembler
from ..minicore import MiniCore


class ParseRequest(BaseModel):
    fixture: str
    include_minicore: bool = False


class FileEntry(BaseModel):
    path: str
    text: str
    compilation_unit_name: Optional[str] = None
    dependencies: List[str] = []
    edition: Optional[str] = None
    cfg_atoms: List[str] = []
    cfg_key_values: List[List[str]] = []
    env: Dict[str, str] = {}
    introduces_new_source_root: bool = False


class ParseResponse(BaseModel):
    minicore: Optional[List[str]] = None
    minicore_source: Optional[str] = None
    files: List[FileEntry]


class MiniCoreRequest(BaseModel):
    flags: List[str]
    resource: Optional[str] = None


class MiniCoreResponse(BaseModel):
    source: str


class HealthResponse(BaseModel):
    status: str


def _default_config() -> FixtureKitConfig:
    return load_config(Path.cwd())


def create_app(
    config_factory: Callable[[], FixtureKitConfig] = _default_config,
) -> FastAPI:
    """Create the FastAPI application exposing fixturekit operations."""

    app = FastAPI(title="Fixturekit Service", version="1.0.0")

    async def get_config() -> FixtureKitConfig:
        return config_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/parse", response_model=ParseResponse)
    def parse_fixture(
        payload: ParseRequest,
        config: FixtureKitConfig = Depends(get_config),
    ) -> ParseResponse:
        result = FixtureAssembler.from_config(config).parse(payload.fixture)
        data = result.to_dict()
        source = None
        if payload.include_minicore and result.minicore is not None:
            source = result.minicore.source_code(config.read_minicore())
        return ParseResponse(
            minicore=data["minicore"],
            minicore_source=source,
            files=[FileEntry(**entry) for entry in data["files"]],
        )

    @app.post("/minicore", response_model=MiniCoreResponse)
    def render_minicore(
        payload: MiniCoreRequest,
        config: FixtureKitConfig = Depends(get_config),
    ) -> MiniCoreResponse:
        resource = payload.resource if payload.resource is not None else config.read_minicore()
        minicore = MiniCore.parse(", ".join(payload.flags)) if payload.flags else MiniCore([])
        return MiniCoreResponse(source=minicore.source_code(resource))

    @app.exception_handler(FixtureError)
    async def fixture_error_handler(
        _: Any, exc: FixtureError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "detail": str(exc),
                "kind": exc.kind.value,
                "line_index": exc.line_index,
                "name": exc.name,
            },
        )

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
