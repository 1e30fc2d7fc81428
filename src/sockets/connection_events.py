"""Connection-related Socket.IO event handlers."""
from src.logging_config import get_logger

logger = get_logger(__name__)


def register_connection_events(sio, gateway) -> None:

    @sio.on('connect')
    async def connect(sid, environ, auth=None):
        """Handle client connection."""
        logger.info(f"🔌 Client connected: {sid}")
        await sio.emit('connected', {'sid': sid}, room=sid)

    @sio.on('disconnect')
    async def disconnect(sid, reason=None):
        """Handle client disconnection: the player leaves their room."""
        logger.info(f"🔌 Client disconnected: {sid}")

        # a join still in flight has no session yet, so always ask the game
        if gateway.detach(sid) is None:
            logger.debug(f"🔌 No session for sid={sid}")

        try:
            await gateway.game.disconnect(sid)
        except Exception as e:
            logger.exception(f"❌ Error in disconnect: {e}")
