"""Built-in topic catalog for hosts who want a suggestion."""
import random
from typing import Dict, List, Optional, Tuple

TOPIC_CATEGORIES: Dict[str, List[str]] = {
    "animals": [
        "Elephant", "Penguin", "Dolphin", "Kangaroo", "Giraffe",
        "Octopus", "Butterfly", "Tiger", "Panda", "Koala",
        "Flamingo", "Cheetah", "Polar Bear", "Sloth", "Peacock",
    ],
    "foods": [
        "Pizza", "Sushi", "Burger", "Tacos", "Pasta",
        "Ice Cream", "Chocolate", "Popcorn", "Sandwich", "Salad",
        "Pancakes", "Donut", "Ramen", "Curry", "Cheesecake",
    ],
    "places": [
        "Beach", "Mountain", "Desert", "Forest", "City",
        "Island", "Castle", "Museum", "Library", "Park",
        "Stadium", "Airport", "Hospital", "School", "Restaurant",
    ],
    "objects": [
        "Umbrella", "Guitar", "Camera", "Bicycle", "Clock",
        "Backpack", "Sunglasses", "Headphones", "Laptop", "Phone",
        "Book", "Pillow", "Mirror", "Candle", "Painting",
    ],
    "activities": [
        "Swimming", "Dancing", "Cooking", "Reading", "Singing",
        "Painting", "Hiking", "Camping", "Fishing", "Gardening",
        "Photography", "Skateboarding", "Yoga", "Meditation", "Gaming",
    ],
    "professions": [
        "Doctor", "Teacher", "Chef", "Artist", "Musician",
        "Engineer", "Pilot", "Firefighter", "Scientist", "Writer",
        "Photographer", "Dancer", "Actor", "Athlete", "Designer",
    ],
}


def random_topic(
    category: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> Optional[Tuple[str, str]]:
    """
    Pick a random topic, optionally from one category.

    Returns (topic, category) or None if the category is unknown.
    """
    rng = rng or random
    if category is None:
        category = rng.choice(list(TOPIC_CATEGORIES))
    words = TOPIC_CATEGORIES.get(category.lower())
    if not words:
        return None
    return rng.choice(words), category.lower()
