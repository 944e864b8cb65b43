import uuid
import time
import json
import logging
from datetime import datetime, timezone
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from quizcore.core.config import settings
from quizcore.core.errors import QuizCoreError
from quizcore.db import session as session_module
from quizcore.db.base import Base
from quizcore.routers import attempts, health, quizzes, users

_HTTP_ERROR_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    409: "conflict",
    429: "rate_limited",
    503: "unavailable",
}


def create_app() -> FastAPI:
    logging.basicConfig(
        level=getattr(logging, str(settings.log_level or "INFO").upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    app = FastAPI(title="QuizCore API", version="1.0.0")

    logger = logging.getLogger("quizcore")

    def _parse_csv(value: str) -> list[str]:
        return [x.strip() for x in str(value or "").split(",") if x.strip()]

    allow_origins = _parse_csv(settings.cors_allow_origins)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        t0 = time.perf_counter()
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = rid
        status_code: int | None = None
        try:
            origin = (request.headers.get("origin") or "").strip()
            if request.method in {"POST", "PUT", "PATCH", "DELETE"} and origin and origin not in allow_origins:
                response = JSONResponse(
                    status_code=403,
                    content={
                        "ok": False,
                        "error_code": "forbidden",
                        "error_message": "invalid origin",
                        "request_id": rid,
                    },
                )
            else:
                response = await call_next(request)
            status_code = int(getattr(response, "status_code", 0) or 0)
        except Exception:
            status_code = 500
            raise
        finally:
            path = getattr(getattr(request, "url", None), "path", "")
            if not (path.startswith("/health") or path == "/healthz"):
                logger.info(
                    json.dumps(
                        {
                            "ts": datetime.now(timezone.utc).isoformat(),
                            "rid": rid,
                            "method": request.method,
                            "path": path,
                            "status": status_code,
                            "duration_ms": int((time.perf_counter() - t0) * 1000),
                        },
                        ensure_ascii=False,
                    )
                )
        response.headers["X-Request-ID"] = rid

        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if (settings.app_env or "").strip().lower() in {"prod", "production"}:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response

    def _request_id(request: Request) -> str | None:
        rid = getattr(getattr(request, "state", None), "request_id", None)
        rid = str(rid or "").strip()
        return rid or None

    def _error(request: Request, *, status_code: int, error_code: str, error_message: str, headers=None):
        payload = {
            "ok": False,
            "error_code": error_code,
            "error_message": error_message,
            "request_id": _request_id(request),
        }
        return JSONResponse(status_code=status_code, content=payload, headers=headers)

    @app.exception_handler(QuizCoreError)
    async def quizcore_error_handler(request: Request, exc: QuizCoreError):
        return _error(request, status_code=exc.status_code, error_code=exc.error_code, error_message=exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        status_code = int(exc.status_code)
        return _error(
            request,
            status_code=status_code,
            error_code=_HTTP_ERROR_CODES.get(status_code, "http_error"),
            error_message=str(exc.detail or "request failed"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        first = (exc.errors() or [{}])[0]
        loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        msg = str(first.get("msg") or "invalid request")
        return _error(
            request,
            status_code=422,
            error_code="validation_error",
            error_message=f"{loc}: {msg}" if loc else msg,
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled exception", extra={"rid": _request_id(request)})
        return _error(request, status_code=500, error_code="internal_error", error_message="internal server error")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["content-type", "x-request-id"],
    )

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(quizzes.router)
    app.include_router(attempts.router)

    @app.on_event("startup")
    async def _startup_tasks() -> None:
        if bool(settings.db_create_all):
            import quizcore.models  # noqa: F401

            Base.metadata.create_all(bind=session_module.engine)
            logger.info("database tables created/verified")

    @app.on_event("shutdown")
    async def _shutdown_tasks() -> None:
        session_module.dispose_engine()

    return app

app = create_app()
