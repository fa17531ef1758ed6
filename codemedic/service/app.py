"""FastAPI application exposing project upload, bug analysis and implementation."""

from __future__ import annotations

import json
import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .. import __version__
from ..config import CodeMedicConfig, ServiceConfig, load_config
from ..ingestion import ProjectProcessor, file_extension
from ..logging import get_logger
from ..models import AppProjectMetadata, FixRecommendation, ProjectSnapshot, UploadedFile
from ..orchestrator import BugAnalyzer
from ..stores import ProjectStore

logger = get_logger("service")

ALLOWED_UPLOAD = re.compile(
    r"\.(js|ts|jsx|tsx|py|java|php|rb|go|rs|swift|json|yml|yaml|md|txt|toml|lock)$",
    re.IGNORECASE,
)
DEFAULT_USER_ID = "user_001"


@dataclass
class ServiceContext:
    """Collaborators shared by every request of one application instance."""

    processor: ProjectProcessor
    analyzer: BugAnalyzer
    store: ProjectStore
    settings: ServiceConfig
    upload_dir: Path


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project_id: str = Field(alias="projectId")
    bug_description: Optional[str] = Field(default=None, alias="bugDescription")


class ImplementRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project_id: str = Field(alias="projectId")
    selected_fix: Dict[str, Any] = Field(alias="selectedFix")
    custom_instructions: Optional[str] = Field(default=None, alias="customInstructions")


class HealthResponse(BaseModel):
    status: str
    version: str
    services: Dict[str, bool]


def build_context(config: CodeMedicConfig) -> ServiceContext:
    return ServiceContext(
        processor=ProjectProcessor(),
        analyzer=BugAnalyzer.from_config(config.llm),
        store=ProjectStore(config.storage.data_dir),
        settings=config.service,
        upload_dir=config.storage.upload_dir,
    )


def _default_context() -> ServiceContext:
    return build_context(load_config(Path.cwd()))


def create_app(
    context_factory: Callable[[], ServiceContext] = _default_context,
) -> FastAPI:
    """Create the FastAPI application exposing codemedic operations."""
    app = FastAPI(title="codemedic", version=__version__)
    context = context_factory()

    async def get_context() -> ServiceContext:
        return context

    @app.get("/health", response_model=HealthResponse)
    async def health(ctx: ServiceContext = Depends(get_context)) -> HealthResponse:
        return HealthResponse(
            status="OK",
            version=__version__,
            services={"ai": ctx.analyzer.runner.configured, "implementation": True},
        )

    @app.get("/api/projects")
    async def list_projects(
        user_id: str = Query(DEFAULT_USER_ID, alias="userId"),
        ctx: ServiceContext = Depends(get_context),
    ) -> Dict[str, Any]:
        return {"success": True, "projects": ctx.store.list_for_user(user_id)}

    @app.post("/api/projects/upload")
    async def upload_project(
        files: Optional[List[UploadFile]] = File(None),
        project_type: str = Form("files", alias="projectType"),
        project_data: Optional[str] = Form(None, alias="projectData"),
        user_id: str = Form(DEFAULT_USER_ID, alias="userId"),
        ctx: ServiceContext = Depends(get_context),
    ) -> Dict[str, Any]:
        files = files or []
        logger.info("Project upload: type=%s files=%d", project_type, len(files))
        if project_type not in {"files", "app"}:
            raise HTTPException(status_code=400, detail=f"Unknown projectType '{project_type}'")
        if len(files) > ctx.settings.max_upload_files:
            raise HTTPException(
                status_code=400,
                detail=f"At most {ctx.settings.max_upload_files} files can be uploaded at once",
            )
        metadata = _parse_app_metadata(project_data) if project_type == "app" else None

        uploads = await _store_uploads(files, ctx.upload_dir, ctx.settings.max_upload_bytes)
        try:
            if metadata is not None:
                snapshot = await ctx.processor.process_app_project(uploads, metadata)
            else:
                snapshot = await ctx.processor.process_files(uploads)
        finally:
            _discard_uploads(uploads)

        project = ctx.store.create(
            {
                **snapshot.to_dict(),
                "userId": user_id,
                "type": "Web Application" if project_type == "app" else "Script",
                "status": "analyzing",
            }
        )
        return {
            "success": True,
            "project": {
                "id": project["id"],
                "name": project["name"],
                "status": project["status"],
                "type": project["type"],
            },
        }

    @app.post("/api/ai/analyze")
    async def analyze(
        payload: AnalyzeRequest, ctx: ServiceContext = Depends(get_context)
    ) -> Dict[str, Any]:
        logger.info("Starting AI analysis for project: %s", payload.project_id)
        snapshot = _load_snapshot(ctx.store, payload.project_id)
        analysis = await ctx.analyzer.analyze_bug(snapshot, payload.bug_description)
        body = analysis.to_dict()
        ctx.store.update(payload.project_id, {"status": "analyzed", "analysis": body})
        return {"success": True, "analysis": body}

    @app.post("/api/ai/implement")
    async def implement(
        payload: ImplementRequest, ctx: ServiceContext = Depends(get_context)
    ) -> Dict[str, Any]:
        logger.info("Generating implementation for project: %s", payload.project_id)
        snapshot = _load_snapshot(ctx.store, payload.project_id)
        fix = FixRecommendation.from_dict(payload.selected_fix)
        implementation = await ctx.analyzer.generate_implementation(
            snapshot, fix, payload.custom_instructions
        )
        ctx.store.update(
            payload.project_id, {"status": "implementing", "implementation": implementation}
        )
        return {"success": True, "implementation": implementation}

    @app.exception_handler(HTTPException)
    async def http_error_handler(_: Any, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code, content={"success": False, "error": exc.detail}
        )

    return app


def _parse_app_metadata(project_data: Optional[str]) -> AppProjectMetadata:
    try:
        data = json.loads(project_data or "{}")
    except json.JSONDecodeError as exc:
        detail = f"projectData is not valid JSON: {exc.msg}"
        raise HTTPException(status_code=400, detail=detail) from exc
    if not isinstance(data, dict):
        raise HTTPException(status_code=400, detail="projectData must be a JSON object")
    return AppProjectMetadata.from_dict(data)


def _load_snapshot(store: ProjectStore, project_id: str) -> ProjectSnapshot:
    project = store.get(project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return ProjectSnapshot.from_dict(project)


async def _store_uploads(
    files: List[UploadFile], upload_dir: Path, max_bytes: int
) -> List[UploadedFile]:
    upload_dir.mkdir(parents=True, exist_ok=True)
    stored: List[UploadedFile] = []
    try:
        for upload in files:
            name = upload.filename or "upload"
            if not ALLOWED_UPLOAD.search(name):
                raise HTTPException(status_code=400, detail=f"File type not supported: {name}")
            data = await upload.read()
            if len(data) > max_bytes:
                raise HTTPException(status_code=400, detail=f"File too large: {name}")
            target = upload_dir / f"files-{uuid.uuid4().hex}{file_extension(name)}"
            target.write_bytes(data)
            stored.append(UploadedFile(name=name, storage_path=str(target), size_bytes=len(data)))
    except HTTPException:
        _discard_uploads(stored)
        raise
    return stored


def _discard_uploads(uploads: List[UploadedFile]) -> None:
    for upload in uploads:
        Path(upload.storage_path).unlink(missing_ok=True)


def run_service(host: str = "0.0.0.0", port: int = 8000) -> None:  # pragma: no cover - integration path
    uvicorn.run(create_app(), host=host, port=port)


__all__ = ["ServiceContext", "build_context", "create_app", "run_service"]
