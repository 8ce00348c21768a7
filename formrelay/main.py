import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.datastructures import Headers

from formrelay.api.forms_controller import router as forms_router
from formrelay.config import Settings, get_settings
from formrelay.errors import FormValidationError, RateLimitExceeded, UpstreamError
from formrelay.rate_limit import RateLimiter
from formrelay.schemas.forms import COMMERCIAL_POLICIES, INCIDENT_POLICIES, get_policy
from formrelay.services.freshdesk_client import FreshdeskClient

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
}


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


class PreflightCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that answers accepted preflights with 204 No Content."""

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response
        headers = {
            key: value
            for key, value in response.headers.items()
            if key.lower() not in ("content-length", "content-type")
        }
        return Response(status_code=204, headers=headers)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    settings.check()
    get_policy(COMMERCIAL_POLICIES, settings.commercial_validation_policy)
    get_policy(INCIDENT_POLICIES, settings.incident_validation_policy)

    app.state.freshdesk = FreshdeskClient(
        settings.freshdesk_domain,
        settings.freshdesk_api_key,
        timeout=settings.freshdesk_timeout_seconds,
    )
    logger.info("Form relay starting for %s.freshdesk.com", settings.freshdesk_domain)
    yield
    app.state.freshdesk.close()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(title="Form Relay", lifespan=lifespan)
    app.state.settings = settings
    app.state.rate_limiter = RateLimiter(
        window_seconds=settings.rate_limit_window_seconds,
        max_requests=settings.rate_limit_max_requests,
        max_clients=settings.rate_limit_max_clients,
    )

    app.include_router(prefix="/api", router=forms_router)

    app.add_middleware(
        PreflightCORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept"],
        max_age=600,
    )

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for key, value in SECURITY_HEADERS.items():
            response.headers.setdefault(key, value)
        return response

    @app.exception_handler(FormValidationError)
    async def form_validation_error(request: Request, exc: FormValidationError):
        content = {"error": exc.kind}
        if exc.fields:
            content["fields"] = exc.fields
        return JSONResponse(status_code=400, content=content)

    @app.exception_handler(UpstreamError)
    async def upstream_error(request: Request, exc: UpstreamError):
        logger.warning("Freshdesk rejected %s with %s", request.url.path, exc.status_code)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "freshdesk_error", "details": exc.body},
        )

    @app.exception_handler(RateLimitExceeded)
    async def rate_limited(request: Request, exc: RateLimitExceeded):
        return JSONResponse(
            status_code=429,
            content={"error": "rate_limited"},
            headers={"Retry-After": str(exc.retry_after)},
        )

    @app.get("/health")
    async def health():
        return {"ok": True}

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "OK"

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)
