"""FastAPI application entrypoint for partialgen service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel
import uvicorn

from .. import __version__
from ..config import AnalysisConfig
from ..descriptors import DeclarationDescriptor
from ..diagnostics import Diagnostic
from ..models import Snapshot
from ..orchestrator import Inspection, Orchestrator, RunResult
from ..sources import mark_theme_annotations, parse_snapshot
from ..synthesis import GeneratedUnit


class GenerateRequest(BaseModel):
    """Either a path to load or an inline snapshot document."""

    path: Optional[str] = None
    snapshot: Optional[Dict[str, Any]] = None
    out: Optional[str] = None
    dry_run: bool = False
    use_cache: bool = True


class InspectRequest(BaseModel):
    path: Optional[str] = None
    snapshot: Optional[Dict[str, Any]] = None


class UnitModel(BaseModel):
    hint_name: str
    declaration: str
    text: str


class DiagnosticModel(BaseModel):
    code: str
    severity: str
    declaration: str
    message: str


class GenerateResponse(BaseModel):
    status: str
    units: List[UnitModel]
    diagnostics: List[DiagnosticModel]
    written: List[str] = []
    cached: int = 0
    dry_run: bool = False


class DeclarationModel(BaseModel):
    name: str
    flags: List[str]
    members: List[str]
    view_members: List[str]
    model: Optional[str] = None


class InspectResponse(BaseModel):
    declarations: List[DeclarationModel]
    diagnostics: List[DiagnosticModel]


class HealthResponse(BaseModel):
    status: str
    version: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing partialgen operations."""

    app = FastAPI(title="partialgen Service", version=__version__)

    async def get_orchestrator() -> Orchestrator:
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(
        payload: GenerateRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> GenerateResponse:
        def _run_generate() -> RunResult:
            if payload.snapshot is not None:
                return orchestrator.generate(_inline_snapshot(payload.snapshot))
            return orchestrator.run(
                _require_path(payload.path),
                out=payload.out,
                dry_run=payload.dry_run,
                use_cache=payload.use_cache,
            )

        result = await _in_executor(_run_generate)
        return GenerateResponse(
            status="error" if result.has_errors else "ok",
            units=[_unit_model(unit) for unit in result.units],
            diagnostics=[_diagnostic_model(item) for item in result.diagnostics],
            written=[str(path) for path in result.written],
            cached=result.cached,
            dry_run=result.dry_run or payload.snapshot is not None,
        )

    @app.post("/inspect", response_model=InspectResponse)
    async def inspect(
        payload: InspectRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> InspectResponse:
        def _run_inspect() -> Inspection:
            if payload.snapshot is not None:
                return orchestrator.inspect(_inline_snapshot(payload.snapshot))
            return orchestrator.inspect_path(_require_path(payload.path))

        inspection = await _in_executor(_run_inspect)
        return InspectResponse(
            declarations=[_declaration_model(item) for item in inspection.descriptors],
            diagnostics=[_diagnostic_model(item) for item in inspection.diagnostics],
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(
        _: Any, exc: FileNotFoundError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


async def _in_executor(func: Callable[[], Any]) -> Any:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def _inline_snapshot(document: Dict[str, Any]) -> Snapshot:
    return mark_theme_annotations(parse_snapshot(document, origin="<request>"), AnalysisConfig())


def _require_path(path: Optional[str]) -> str:
    if not path:
        raise RuntimeError("Request needs either 'path' or 'snapshot'")
    return path


def _unit_model(unit: GeneratedUnit) -> UnitModel:
    return UnitModel(hint_name=unit.hint_name, declaration=unit.declaration, text=unit.text)


def _diagnostic_model(diagnostic: Diagnostic) -> DiagnosticModel:
    return DiagnosticModel(**diagnostic.to_dict())


def _declaration_model(descriptor: DeclarationDescriptor) -> DeclarationModel:
    link = descriptor.model_link
    model = None
    if link is not None:
        model = link.resolved.qualified_name if link.resolved is not None else link.target_name
    return DeclarationModel(
        name=descriptor.display_name,
        flags=list(descriptor.flags.enabled()),
        members=[member.public_name for member in descriptor.members],
        view_members=[member.public_name for member in descriptor.view_members],
        model=model,
    )


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    app = create_app()
    uvicorn.run(app, host=host, port=port)


__all__ = ["create_app", "run_service"]
