"""FastAPI relay server bridging browser audio to Gemini Live."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from collections.abc import Callable, Awaitable

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, WebSocket, HTTPException
from fastapi.responses import FileResponse, ORJSONResponse

from voicechat.state.runtime import RuntimeDeps
from voicechat.config.websocket import WS_ENDPOINT_PATH
from voicechat.runtime.settings import load_settings
from voicechat.runtime.logging import configure_logging
from voicechat.runtime.dependencies import build_runtime_deps
from voicechat.handlers.websocket.manager import handle_websocket_connection

logger = logging.getLogger(__name__)

load_dotenv()
configure_logging()

RuntimeDepsFactory = Callable[[], Awaitable[RuntimeDeps]]


def _runtime_deps(app: FastAPI) -> RuntimeDeps:
    runtime_deps = getattr(app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


def create_app(runtime_deps_factory: RuntimeDepsFactory | None = None) -> FastAPI:
    factory = runtime_deps_factory or build_runtime_deps

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        runtime_deps = await factory()
        app.state.runtime_deps = runtime_deps
        runtime_deps.start()
        logger.info("runtime: ready")
        try:
            yield
        finally:
            deps = getattr(app.state, "runtime_deps", None)
            if deps is not None:
                await deps.shutdown()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)

    @app.get("/", include_in_schema=False)
    async def index() -> FileResponse:
        page = _runtime_deps(app).settings.server.public_dir / "index.html"
        if not page.is_file():
            raise HTTPException(status_code=404, detail="index.html not found")
        return FileResponse(page)

    @app.get("/health")
    async def health() -> dict[str, object]:
        return {"status": "ok", "sessions": len(_runtime_deps(app).registry)}

    @app.websocket(WS_ENDPOINT_PATH)
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await handle_websocket_connection(websocket, _runtime_deps(app))

    return app


app = create_app()


def main() -> None:
    settings = load_settings()
    logger.info("listening on http://%s:%s", settings.server.host, settings.server.port)
    uvicorn.run(app, host=settings.server.host, port=settings.server.port)


if __name__ == "__main__":
    main()
