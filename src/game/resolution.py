"""Vote tally and winner resolution."""
from typing import Dict, Mapping, Optional

from src.rooms.models import ABSTAIN, GameResult, Room, VoteResult


def tally_votes(votes: Mapping[str, str]) -> Dict[str, int]:
    """Count votes per target, skipping abstains. Keys keep first-vote order."""
    tally: Dict[str, int] = {}
    for target_id in votes.values():
        if target_id == ABSTAIN:
            continue
        tally[target_id] = tally.get(target_id, 0) + 1
    return tally


def most_voted(tally: Mapping[str, int]) -> Optional[str]:
    """Target with the highest count. On a tie the earliest key in the tally wins."""
    if not tally:
        return None
    best_id, best_count = None, 0
    for target_id, count in tally.items():
        if count > best_count:
            best_id, best_count = target_id, count
    return best_id


def resolve(room: Room) -> VoteResult:
    """
    Build the result record for a finished vote.

    Players win only if the most-voted id is the first flagged imposter in player
    order. With several imposters, catching any other one still counts as an
    imposter win.
    """
    tally = tally_votes(room.votes)
    most_voted_id = most_voted(tally)
    imposter = room.first_imposter

    if imposter is not None and most_voted_id == imposter.id:
        win = GameResult.PLAYERS_WIN
    else:
        win = GameResult.IMPOSTER_WINS

    return VoteResult(
        win=win,
        imposter_name=imposter.name if imposter else None,
        imposter_avatar=imposter.avatar if imposter else None,
        imposter_ids=list(room.imposter_ids),
        most_voted_id=most_voted_id,
        tally=tally,
        topic=room.topic,
    )
