"""Room and player models for the imposter game."""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator
from pydantic.alias_generators import to_camel

from src.game.timers import RoomTimer


ABSTAIN = "__abstain__"
MIN_PLAYERS = 4
PLAYERS_PER_IMPOSTER = 4

MAX_NAME_LENGTH = 20
MAX_TOPIC_LENGTH = 50
MAX_CLUE_LENGTH = 80

AVATARS = [
    "🦊", "🐼", "🦁", "🐯", "🐸", "🐧", "🦄", "🐙",
    "🦋", "🐺", "🦝", "🐨", "🐶", "🐱", "🐭", "🐹",
]

# (min, max) per room setting
CLUE_TIMEOUT_BOUNDS = (15, 60)
VOTE_TIMEOUT_BOUNDS = (10, 45)
TOTAL_ROUNDS_BOUNDS = (1, 6)
IMPOSTER_COUNT_BOUNDS = (1, 3)


class CamelModel(BaseModel):
    """Serializes with the camelCase names the client renders."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RoomPhase(str, Enum):
    """Game phases."""
    LOBBY = "lobby"
    COUNTDOWN = "countdown"  # role reveal on screen
    GAME = "game"            # clue turns
    VOTING = "voting"
    RESULT = "result"


class PlayerRole(str, Enum):
    IMPOSTER = "imposter"
    INNOCENT = "innocent"


class GameResult(str, Enum):
    PLAYERS_WIN = "players"
    IMPOSTER_WINS = "imposter"


def clamp(value: int, bounds) -> int:
    low, high = bounds
    return max(low, min(high, value))


def max_imposters_for(player_count: int) -> int:
    return player_count // PLAYERS_PER_IMPOSTER


class Player(CamelModel):
    """Player in a room. The id is the connection id."""
    id: str
    name: str
    avatar: str
    is_host: bool = False
    is_imposter: bool = False
    has_voted: bool = False
    vote: Optional[str] = None  # target player id or ABSTAIN


class Message(CamelModel):
    """A clue, or a system note recording a skipped turn."""
    id: str
    player_id: Optional[str] = None  # None for system messages
    player_name: str
    player_avatar: str
    text: str
    round: int
    timestamp: int  # epoch ms
    is_system: bool = False


class RoomSettings(CamelModel):
    """Host-configurable settings. Each field is bounded on its own."""
    clue_timeout: int = 30
    vote_timeout: int = 20
    total_rounds: int = 3
    imposter_count: int = 1

    @field_validator("clue_timeout")
    @classmethod
    def clamp_clue_timeout(cls, v: int) -> int:
        return clamp(v, CLUE_TIMEOUT_BOUNDS)

    @field_validator("vote_timeout")
    @classmethod
    def clamp_vote_timeout(cls, v: int) -> int:
        return clamp(v, VOTE_TIMEOUT_BOUNDS)

    @field_validator("total_rounds")
    @classmethod
    def clamp_total_rounds(cls, v: int) -> int:
        return clamp(v, TOTAL_ROUNDS_BOUNDS)

    @field_validator("imposter_count")
    @classmethod
    def clamp_imposter_count(cls, v: int) -> int:
        return clamp(v, IMPOSTER_COUNT_BOUNDS)


class SettingsPatch(CamelModel):
    """Partial settings update sent by the host. Unknown keys are dropped."""
    clue_timeout: Optional[int] = None
    vote_timeout: Optional[int] = None
    total_rounds: Optional[int] = None
    imposter_count: Optional[int] = None

    @field_validator("*", mode="before")
    @classmethod
    def drop_non_integers(cls, v: Any) -> Any:
        # bool is an int subclass; numeric strings and floats are not accepted either
        if isinstance(v, bool) or not isinstance(v, int):
            return None
        return v


class VoteResult(CamelModel):
    """Outcome of a finished vote."""
    win: GameResult
    imposter_name: Optional[str] = None
    imposter_avatar: Optional[str] = None
    imposter_ids: List[str] = Field(default_factory=list)
    most_voted_id: Optional[str] = None
    tally: Dict[str, int] = Field(default_factory=dict)
    topic: Optional[str] = None


class RoleReveal(CamelModel):
    """Private payload sent to one player when a game starts."""
    role: PlayerRole
    topic: Optional[str] = None


class Room(CamelModel):
    """Game room state."""
    code: str
    phase: RoomPhase = RoomPhase.LOBBY
    players: List[Player] = Field(default_factory=list)  # order is turn order
    host_id: Optional[str] = None
    imposter_ids: List[str] = Field(default_factory=list)
    messages: List[Message] = Field(default_factory=list)
    round: int = 1
    turn_index: int = 0
    topic: Optional[str] = None
    votes: Dict[str, str] = Field(default_factory=dict)  # voter id -> target id | ABSTAIN
    result: Optional[VoteResult] = None
    turn_deadline: Optional[int] = None  # epoch ms
    vote_deadline: Optional[int] = None  # epoch ms
    settings: RoomSettings = Field(default_factory=RoomSettings)

    _timer: RoomTimer = PrivateAttr(default_factory=RoomTimer)
    # bumped whenever a game is cleared, so late sends can tell the game they belong to
    _game_no: int = PrivateAttr(default=0)

    @property
    def timer(self) -> RoomTimer:
        return self._timer

    @property
    def game_no(self) -> int:
        return self._game_no

    def get_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def index_of(self, player_id: str) -> int:
        for i, player in enumerate(self.players):
            if player.id == player_id:
                return i
        return -1

    def is_host(self, player_id: str) -> bool:
        return player_id is not None and player_id == self.host_id

    def set_host(self, player_id: Optional[str]) -> None:
        """Move the host flag so exactly one player carries it."""
        self.host_id = player_id
        for player in self.players:
            player.is_host = player.id == player_id

    @property
    def current_player(self) -> Optional[Player]:
        if not self.players:
            return None
        return self.players[self.turn_index % len(self.players)]

    @property
    def voters(self) -> List[Player]:
        """Players who must vote: everyone but the host."""
        return [p for p in self.players if not p.is_host]

    @property
    def pending_voter(self) -> Optional[Player]:
        for player in self.voters:
            if player.id not in self.votes:
                return player
        return None

    @property
    def first_imposter(self) -> Optional[Player]:
        for player in self.players:
            if player.is_imposter:
                return player
        return None

    def clue_count(self, round_no: int) -> int:
        return sum(1 for m in self.messages if m.round == round_no and not m.is_system)

    def clear_game(self) -> None:
        """Drop everything that belongs to a single game."""
        self._game_no += 1
        self.timer.cancel()
        for player in self.players:
            player.is_imposter = False
            player.has_voted = False
            player.vote = None
        self.imposter_ids = []
        self.messages = []
        self.round = 1
        self.turn_index = 0
        self.topic = None
        self.votes = {}
        self.result = None
        self.turn_deadline = None
        self.vote_deadline = None

    def snapshot(self) -> Dict[str, Any]:
        """
        Broadcast payload, identical for every member.

        The topic and who the imposters are stay hidden until the result phase;
        players learn their own role from the private role reveal.
        """
        data = self.model_dump(mode="json", by_alias=True)
        if self.phase != RoomPhase.RESULT:
            data["topic"] = None
            data["imposterIds"] = []
            for player in data["players"]:
                player["isImposter"] = False
        return data
