from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from src.game.topics import TOPIC_CATEGORIES, random_topic

router = APIRouter(prefix="/game", tags=["Game"])


class TopicResponse(BaseModel):
    topic: str
    category: str


@router.get("/categories", response_model=List[str])
async def get_categories():
    """Names of the built-in topic categories."""
    return list(TOPIC_CATEGORIES)


@router.get("/random-topic", response_model=TopicResponse)
async def get_random_topic(
    category: Optional[str] = Query(None, max_length=30, description="Category name (e.g. 'foods')"),
):
    """Suggest a random topic, from one category or from all of them."""
    result = random_topic(category)

    if not result:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown category '{category}'"
        )

    topic, category = result
    return TopicResponse(topic=topic, category=category)
