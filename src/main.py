from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config import get_settings
from src.game.logic import GameService
from src.game.router import router as game_router
from src.rooms.registry import RoomRegistry
from src.rooms.router import router as rooms_router
from src.sockets.gateway import ConnectionGateway
from src.sockets.notifier import SocketNotifier
from src.sockets.server import sio, socket_app
from src.logging_config import setup_logging, get_logger

settings = get_settings()

# Initialize logging
setup_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)


def create_app() -> FastAPI:
    registry = RoomRegistry(code_length=settings.ROOM_CODE_LENGTH)
    notifier = SocketNotifier(sio)
    game = GameService(registry, notifier, countdown_seconds=settings.COUNTDOWN_SECONDS)
    gateway = ConnectionGateway(sio, game, notifier)
    gateway.register()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Own the room registry for the lifetime of the process."""
        logger.info(f"🎮 {settings.APP_NAME} started on {settings.HOST}:{settings.PORT}")

        yield

        # Cleanup on shutdown
        registry.close()

    app = FastAPI(
        title="Imposter API",
        description="Realtime server for the imposter party game",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.registry = registry
    app.state.game = game
    app.state.gateway = gateway

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(game_router)
    app.include_router(rooms_router)

    # Mount Socket.IO ASGI app
    app.mount("/socket.io", socket_app)

    @app.get("/health")
    def health_check():
        return {"status": "ok", **game.stats()}

    return app


app = create_app()
