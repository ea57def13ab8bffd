# main.py
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pymongo.collection import Collection
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, configure_logging
from .database.connection import connect, get_candidate_collection
from .errors import VoteChainError
from .routes.candidate_routes import router as candidate_router
from .storage_mongo import CandidateStorage
from .training import TrainingRunner

logger = logging.getLogger(__name__)


def _envelope(status_code: int, message: str, error=None) -> JSONResponse:
    content = {"success": False, "message": message}
    if error is not None:
        content["error"] = error
    return JSONResponse(status_code=status_code, content=content)


def _field_errors(exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        # drop the leading "body"/"path" marker from the location
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "path", "query")]
        errors.append({"field": ".".join(loc) or "body", "message": err.get("msg", "Invalid value")})
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(VoteChainError)
    async def votechain_error(request: Request, exc: VoteChainError):
        return _envelope(exc.status_code, exc.detail, exc.error)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return _envelope(400, "Validation failed", _field_errors(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _envelope(exc.status_code, str(exc.detail))

    @app.exception_handler(PyMongoError)
    async def storage_error(request: Request, exc: PyMongoError):
        logger.error(f"Storage error on {request.method} {request.url.path}: {exc}")
        return _envelope(500, "Database operation failed", str(exc))


def register_fallback_middleware(app: FastAPI) -> None:
    # Must be added before CORSMiddleware so these 500s still carry CORS headers
    @app.middleware("http")
    async def unhandled_error(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception(f"Unhandled error on {request.method} {request.url.path}")
            return _envelope(500, "Internal Server Error", str(exc))


def create_app(settings: Optional[Settings] = None, collection: Optional[Collection] = None) -> FastAPI:
    """
    Build the API.

    settings defaults to Settings.from_env(); collection defaults to the
    candidates collection on settings.mongo_uri. Tests pass an in-memory one.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    if collection is None:
        client = connect(settings)
        collection = get_candidate_collection(client, settings)

    storage = CandidateStorage(collection)
    try:
        storage.ensure_indexes()
    except PyMongoError as e:
        logger.warning(f"Could not create candidate indexes: {e}")

    app = FastAPI(title="VoteChain - Candidate Registration API")
    app.state.settings = settings
    app.state.storage = storage
    app.state.trainer = TrainingRunner(settings)

    register_fallback_middleware(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(candidate_router)

    @app.get("/", tags=["Root"])
    def read_root():
        return {"message": "Welcome to the VoteChain central server"}

    @app.get("/health", tags=["Root"])
    def health_check():
        reachable = storage.ping()
        return {"status": "healthy" if reachable else "degraded", "database": "MongoDB", "reachable": reachable}

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=204)

    logger.info(f"API ready; datasets under {settings.dataset_root}")
    return app


def run() -> None:
    import uvicorn

    uvicorn.run("votechain.main:create_app", factory=True, host="0.0.0.0", port=5000)


if __name__ == "__main__":
    run()
