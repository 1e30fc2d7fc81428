"""Room-related Socket.IO event handlers."""
from src.game.exceptions import GameError
from src.logging_config import get_logger

logger = get_logger(__name__)


def register_room_events(sio, gateway) -> None:

    @sio.on('join')
    async def join(sid, data):
        """
        Create or join a room.

        Expected data:
        {
            "name": "Player1",
            "roomId": "ABCD",        # required for action "join"
            "action": "create" | "join"
        }
        """
        logger.debug(f"🔍 join called - sid={sid}, data={data}")

        try:
            data = data if isinstance(data, dict) else {}
            room_id = data.get('roomId')
            action = data.get('action') or ('join' if room_id else 'create')

            try:
                room = await gateway.game.join(sid, data.get('name'), room_id, action)
            except GameError as e:
                logger.warning(f"❌ join rejected for {sid}: {e.message}")
                await gateway.notifier.error(sid, e.message)
                return

            # join runs as a background task and may finish after the client hung up
            if not gateway.is_connected(sid):
                logger.info(f"🔌 {sid} disconnected before joining {room.code}, rolling back")
                await gateway.game.disconnect(sid)
                return

            # Join Socket.IO room FIRST (before any broadcasts)
            await gateway.attach(sid, room)
            if room.get_player(sid) is None:
                # left while entering the room channel
                gateway.detach(sid)
                return
            await gateway.notifier.broadcast_state(room)

        except Exception as e:
            logger.exception(f"❌ Error in join: {e}")
            await gateway.notifier.error(sid, str(e))

    @sio.on('reorderPlayers')
    async def reorder_players(sid, data):
        """
        Change the turn order (host only, lobby only).

        Expected data:
        {
            "newOrder": ["sid1", "sid2", ...]
        }
        """
        try:
            room_code = gateway.room_code(sid)
            if not room_code:
                return
            data = data if isinstance(data, dict) else {}
            await gateway.game.reorder_players(room_code, sid, data.get('newOrder'))

        except Exception as e:
            logger.exception(f"❌ Error in reorderPlayers: {e}")
            await gateway.notifier.error(sid, str(e))

    @sio.on('updateSettings')
    async def update_settings(sid, data):
        """
        Change room settings (host only, lobby only).

        Expected data:
        {
            "clueTimeout": 30,
            "voteTimeout": 20,
            "totalRounds": 3,
            "imposterCount": 1
        }
        """
        try:
            room_code = gateway.room_code(sid)
            if not room_code:
                return
            await gateway.game.update_settings(room_code, sid, data)

        except Exception as e:
            logger.exception(f"❌ Error in updateSettings: {e}")
            await gateway.notifier.error(sid, str(e))

    @sio.on('restartGame')
    async def restart_game(sid, data=None):
        """Return to the lobby and pass the host role on (host only)."""
        try:
            room_code = gateway.room_code(sid)
            if not room_code:
                return
            await gateway.game.restart(room_code, sid)

        except Exception as e:
            logger.exception(f"❌ Error in restartGame: {e}")
            await gateway.notifier.error(sid, str(e))
