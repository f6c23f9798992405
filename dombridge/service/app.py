"""FastAPI application hosting the DOM components dev middleware."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from pydantic import BaseModel

from ..bundler import BundleOptions
from ..config import DomBridgeConfig
from ..entry import SettleStrategy, VirtualEntryGenerator, sleep_settle
from ..logging import get_logger
from ..middleware import DomComponentsMiddleware


class HealthResponse(BaseModel):
    status: str


def create_app(
    config: DomBridgeConfig,
    *,
    settle: Optional[SettleStrategy] = None,
) -> FastAPI:
    """Create the dev server application serving ``/_expo/@dom`` pages."""
    app = FastAPI(title="dombridge dev server", version="0.1.0")

    generator = VirtualEntryGenerator(
        config.dom_entry_dir,
        host_module=config.host_module,
        settle=settle or sleep_settle(config.settle_delay),
    )
    middleware = DomComponentsMiddleware(
        generator,
        server_root=config.server_root or config.project_root,
        get_dev_server_url=lambda: config.dev_server_url,
        base_options=BundleOptions.from_config(config.bundler),
    )
    app.middleware("http")(middleware)
    app.state.dom_components = middleware

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    return app


def run_service(
    config: DomBridgeConfig,
    host: Optional[str] = None,
    port: Optional[int] = None,
) -> None:  # pragma: no cover - integration path
    import uvicorn

    bind_host = host or config.server.host
    bind_port = port or config.server.port
    get_logger("service").info(
        "Serving DOM components for %s on %s:%s", config.project_root, bind_host, bind_port
    )
    uvicorn.run(create_app(config), host=bind_host, port=bind_port)
