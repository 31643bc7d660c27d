"""
HTTP interface for the domain shortlist.

FastAPI application exposing the checker and the shared list under `/api`,
plus a catch-all route that serves the bundled client shell. Handlers only
translate requests into ShortlistService calls and serialize the results.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel, Field

from . import __version__
from .audit_logger import AuditLogger, create_logger
from .config import SystemConfig, load_config_from_env, validate_config
from .exceptions import ValidationError
from .service import ShortlistService, build_service


COMPONENT = "API"


class CheckDomainRequest(BaseModel):
    """Request body for a single-name check."""

    domain: str = Field(..., min_length=1, description="Base name, e.g. 'nordicai'")
    tlds: list[str] = Field(..., description="Extensions to check, e.g. ['com', 'ai']")


class DomainsRequest(BaseModel):
    """Request body for bulk checks and for adding names to the list."""

    domains: list[str] = Field(..., description="Base names to check")
    tlds: list[str] = Field(..., description="Extensions to check")


class ReverifyRequest(BaseModel):
    """Request body for re-verifying favorites."""

    tlds: list[str] = Field(..., description="Extensions to re-check")


def get_service(request: Request) -> ShortlistService:
    return request.app.state.service


def get_logger(request: Request) -> Optional[AuditLogger]:
    return request.app.state.logger


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _internal_error(logger: Optional[AuditLogger], message: str, error: Exception) -> JSONResponse:
    """Log an unexpected failure and hide its details from the client."""
    if logger:
        logger.log_error(COMPONENT, message, error=error)
    return _error_response(500, message)


router = APIRouter(prefix="/api")


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@router.post("/check-domain")
async def check_domain(
    body: CheckDomainRequest,
    service: ShortlistService = Depends(get_service),
    logger: Optional[AuditLogger] = Depends(get_logger),
):
    """Check one name across TLDs without storing it."""
    try:
        result = await service.check_domain(body.domain, body.tlds)
    except ValidationError as e:
        return _error_response(400, e.message)
    except Exception as e:
        return _internal_error(logger, "Failed to check domain availability", e)
    return result.to_dict()


@router.post("/check-domains-bulk")
async def check_domains_bulk(
    body: DomainsRequest,
    service: ShortlistService = Depends(get_service),
    logger: Optional[AuditLogger] = Depends(get_logger),
):
    """Check several names across TLDs without storing them."""
    try:
        results = await service.check_domains(body.domains, body.tlds)
    except ValidationError as e:
        return _error_response(400, e.message)
    except Exception as e:
        return _internal_error(logger, "Failed to check domain availability", e)
    return [result.to_dict() for result in results]


@router.get("/domains")
async def list_domains(
    service: ShortlistService = Depends(get_service),
    logger: Optional[AuditLogger] = Depends(get_logger),
):
    """Return the full shared list."""
    try:
        records = service.store.get_all_domains()
    except Exception as e:
        return _internal_error(logger, "Failed to retrieve domains", e)
    return [record.to_dict() for record in records]


@router.post("/domains")
async def add_domains(
    body: DomainsRequest,
    service: ShortlistService = Depends(get_service),
    logger: Optional[AuditLogger] = Depends(get_logger),
):
    """Check names, store one new record per name, return the full list."""
    try:
        records = await service.check_and_add(body.domains, body.tlds)
    except ValidationError as e:
        return _error_response(400, e.message)
    except Exception as e:
        return _internal_error(logger, "Failed to add domains", e)
    return [record.to_dict() for record in records]


@router.post("/domains/reverify")
async def reverify_domains(
    body: ReverifyRequest,
    service: ShortlistService = Depends(get_service),
    logger: Optional[AuditLogger] = Depends(get_logger),
):
    """Re-check favorites and merge the results into the list."""
    try:
        records = await service.reverify_favorites(body.tlds)
    except Exception as e:
        return _internal_error(logger, "Failed to reverify domains", e)
    return [record.to_dict() for record in records]


@router.patch("/domains/{suggestion_id}/favorite")
async def toggle_favorite(
    suggestion_id: str,
    service: ShortlistService = Depends(get_service),
    logger: Optional[AuditLogger] = Depends(get_logger),
):
    """Flip the favorite flag of one record."""
    try:
        records = service.store.toggle_favorite(suggestion_id)
    except Exception as e:
        return _internal_error(logger, "Failed to toggle favorite", e)
    return [record.to_dict() for record in records]


@router.delete("/domains/{suggestion_id}")
async def remove_domain(
    suggestion_id: str,
    service: ShortlistService = Depends(get_service),
    logger: Optional[AuditLogger] = Depends(get_logger),
):
    """Delete one record."""
    try:
        records = service.store.remove_domain(suggestion_id)
    except Exception as e:
        return _internal_error(logger, "Failed to remove domain", e)
    return [record.to_dict() for record in records]


@router.delete("/domains")
async def clear_domains(
    service: ShortlistService = Depends(get_service),
    logger: Optional[AuditLogger] = Depends(get_logger),
):
    """Delete every record."""
    try:
        cleared = service.store.clear_all_domains()
    except Exception as e:
        return _internal_error(logger, "Failed to clear domains", e)
    if not cleared:
        return _error_response(500, "Failed to clear domains")
    return {"message": "All domains cleared"}


def create_app(
    config: Optional[SystemConfig] = None,
    service: Optional[ShortlistService] = None,
    logger: Optional[AuditLogger] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: System configuration (read from the environment if omitted)
        service: Optional pre-built service (tests inject fakes here)
        logger: Optional audit logger (built from config if omitted)

    Returns:
        The configured FastAPI app

    Raises:
        ConfigurationError: If the configuration holds an out-of-range value
    """
    config = validate_config(config) if config else load_config_from_env()
    if logger is None:
        logger = create_logger(config.logging.output_format, config.logging.level)
    service = service or build_service(config, logger)
    static_dir = Path(config.server.static_dir)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(COMPONENT, "Starting domain shortlist service", {"version": __version__})
        yield
        await service.checker.close()
        logger.info(COMPONENT, "Domain shortlist service stopped", {})

    app = FastAPI(
        title="Domain Shortlist",
        description="Shared domain-name shortlist with multi-TLD availability checks",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.service = service
    app.state.logger = logger
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Report malformed bodies as 400 with a readable message."""
        problems = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error.get("loc", ())[1:])
            message = error.get("msg", "invalid value")
            problems.append(f"{location}: {message}" if location else message)
        return _error_response(400, "Invalid request body: " + "; ".join(problems))

    app.include_router(router)

    @app.get("/{full_path:path}", include_in_schema=False)
    async def client_shell(full_path: str):
        """Serve bundled client files, falling back to index.html."""
        root = static_dir.resolve()
        candidate = (root / full_path).resolve()
        if full_path and candidate.is_file() and root in candidate.parents:
            return FileResponse(candidate)
        index = root / "index.html"
        if index.is_file():
            return FileResponse(index)
        return _error_response(404, "Client application not found")

    return app
