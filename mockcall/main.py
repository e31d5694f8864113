from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mockcall.api.api import api_router
from mockcall.api.deps import get_calls
from mockcall.api.endpoints.call import websocket_call
from mockcall.config.logging_config import setup_logging
from mockcall.config.settings import settings
from mockcall.storages.call_registry import CallRegistry
from mockcall.system.exceptions import BaseHTTPException, common_exception_handler

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    yield


def prepare_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Mock interview voice sessions",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")
    app.add_exception_handler(BaseHTTPException, common_exception_handler)
    app.websocket("/api/v1/call/ws")(websocket_call)

    @app.get("/health")
    async def health(calls: CallRegistry = Depends(get_calls)):
        return {"status": "ok", "app": settings.APP_NAME, "live_calls": len(calls.live())}

    return app


def start_service() -> None:
    uvicorn.run(
        prepare_app(),
        host=settings.APP_ADDRESS,
        port=settings.APP_PORT,
    )


app = prepare_app()

if __name__ == "__main__":
    start_service()
