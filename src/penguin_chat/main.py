import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api.routes import router
from .auth import ProfileDirectory
from .config import DATA_DIR, GATEWAY_BACKEND, PORT, ROOT_PATH, SHARE_DB_PATH
from .data.share_store import ShareSnapshotStore
from .gateway.base import AssistantGateway
from .gateway.claude import ClaudeGateway
from .gateway.http import HttpGateway
from .sessions import SessionRegistry

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)
logger = logging.getLogger(__name__)


def build_gateway(backend: str = GATEWAY_BACKEND) -> AssistantGateway:
    if backend == "claude":
        return ClaudeGateway()
    if backend == "http":
        return HttpGateway()
    raise ValueError(f"Unknown GATEWAY_BACKEND {backend!r} (expected 'claude' or 'http')")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    DATA_DIR.mkdir(parents=True, exist_ok=True)

    logger.info("Initializing share store...")
    share_store = ShareSnapshotStore(str(SHARE_DB_PATH))
    await share_store.initialize()

    logger.info("Initializing %s assistant gateway...", GATEWAY_BACKEND)
    gateway = build_gateway()

    directory = ProfileDirectory.from_config()
    app.state.share_store = share_store
    app.state.gateway = gateway
    app.state.sessions = SessionRegistry(gateway, share_store, directory)

    logger.info("Startup complete, ready to serve")
    yield

    # Shutdown
    logger.info("Shutting down...")
    await gateway.close()
    await share_store.close()


app = FastAPI(title="Penguin AI Chat", root_path=ROOT_PATH, lifespan=lifespan)
app.include_router(router)


def run() -> None:
    import uvicorn

    uvicorn.run("penguin_chat.main:app", host="0.0.0.0", port=PORT)
