"""Game-related Socket.IO event handlers."""
from src.logging_config import get_logger

logger = get_logger(__name__)


def register_game_events(sio, gateway) -> None:

    @sio.on('startGame')
    async def start_game(sid, data):
        """
        Start the game (host only).

        Expected data:
        {
            "topic": "Pizza"
        }
        """
        try:
            logger.debug(f"🎮 startGame event from sid={sid}")
            room_code = gateway.room_code(sid)
            if not room_code:
                return
            data = data if isinstance(data, dict) else {}
            await gateway.game.start_game(room_code, sid, data.get('topic'))

        except Exception as e:
            logger.exception(f"❌ Error in startGame: {e}")
            await gateway.notifier.error(sid, str(e))

    @sio.on('sendMessage')
    async def send_message(sid, data):
        """
        Give a clue. Only the player whose turn it is is heard.

        Expected data:
        {
            "text": "cheesy"
        }
        """
        try:
            room_code = gateway.room_code(sid)
            if not room_code:
                return
            data = data if isinstance(data, dict) else {}
            await gateway.game.send_message(room_code, sid, data.get('text'))

        except Exception as e:
            logger.exception(f"❌ Error in sendMessage: {e}")
            await gateway.notifier.error(sid, str(e))

    @sio.on('submitVote')
    async def submit_vote(sid, data):
        """
        Submit a vote.

        Expected data:
        {
            "targetId": "player_id" | "__abstain__"
        }
        """
        try:
            logger.debug(f"🗳️ submitVote event from sid={sid}")
            room_code = gateway.room_code(sid)
            if not room_code:
                return
            data = data if isinstance(data, dict) else {}
            await gateway.game.submit_vote(room_code, sid, data.get('targetId'))

        except Exception as e:
            logger.exception(f"❌ Error in submitVote: {e}")
            await gateway.notifier.error(sid, str(e))
