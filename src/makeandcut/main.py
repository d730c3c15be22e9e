"""FastAPI application entry point."""

import time
from datetime import datetime, timezone

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .accounts.accounts_repository import AccountStore
from .api.errors import register_error_handlers
from .billing.billing_client import BillingClient
from .config import AppConfig, load_config
from .dependencies import include_routers
from .logging import bind_request_context, configure_logging
from .storage.remote_store import RemoteStore

request_logger = structlog.get_logger("makeandcut.requests")


def create_app(
    config: AppConfig | None = None,
    *,
    store: RemoteStore | None = None,
    account_store: AccountStore | None = None,
    billing_client: BillingClient | None = None,
) -> FastAPI:
    """Build FastAPI instance with configured dependencies."""
    cfg = config or load_config()
    configure_logging(cfg.log_level)
    app = FastAPI(title="MakeAndCut API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    @app.middleware("http")
    async def log_request(request: Request, call_next):
        bind_request_context(
            request.method, request.url.path, request.headers.get("x-request-id")
        )
        started = time.perf_counter()
        response = await call_next(request)
        request_logger.info(
            "api.request.done",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response

    @app.get("/")
    def root() -> dict[str, str]:
        return {
            "message": "MakeAndCut API is running",
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    include_routers(
        app,
        cfg,
        store=store,
        account_store=account_store,
        billing_client=billing_client,
    )
    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn on the configured port."""
    cfg = load_config()
    uvicorn.run(create_app(cfg), host=cfg.host, port=cfg.port)


if __name__ == "__main__":
    run()
