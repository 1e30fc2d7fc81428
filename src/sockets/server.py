"""Socket.IO server configuration."""
import socketio

from src.config import get_settings
from src.logging_config import get_logger


logger = get_logger(__name__)

_origins = get_settings().cors_origins

# Create Socket.IO async server
sio = socketio.AsyncServer(
    async_mode='asgi',
    cors_allowed_origins='*' if _origins == ['*'] else _origins,
    logger=False,
    engineio_logger=False
)

# Create ASGI application
socket_app = socketio.ASGIApp(
    sio,
    socketio_path='socket.io'
)
