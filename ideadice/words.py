"""Word pools for the three prompt cards."""

import random
from typing import NamedTuple

NOUNS = [
    "Mirror", "Ocean", "Clock", "Forest", "Candle", "Cloud", "Dust", "Thread", "Path", "Flame",
    "Mountain", "River", "Book", "Door", "Window", "Sky", "Star", "Moon", "Sun", "Tree",
    "Bridge", "Island", "Desk", "Chair", "Pillow", "Bottle", "Glass", "Ring", "Key", "Coin",
    "Shadow", "Light", "Feather", "Stone", "Rain", "Snow", "Wind", "Fire", "Earth", "Water",
]

VERBS = [
    "Melt", "Breathe", "Collapse", "Bloom", "Chase", "Whisper", "Freeze", "Drift", "Grow", "Scatter",
    "Dance", "Sing", "Float", "Break", "Build", "Create", "Destroy", "Imagine", "Dream", "Fly",
    "Swim", "Run", "Jump", "Climb", "Fall", "Rise", "Shine", "Fade", "Transform", "Evolve",
    "Explore", "Discover", "Connect", "Separate", "Begin", "End", "Remember", "Forget", "Reflect", "Wonder",
]

EMOTIONS = [
    "Nostalgia", "Anger", "Joy", "Serenity", "Confusion", "Hope", "Anxiety", "Delight", "Fear", "Wonder",
    "Love", "Hatred", "Excitement", "Boredom", "Curiosity", "Dread", "Peace", "Frustration", "Surprise", "Awe",
    "Gratitude", "Envy", "Pride", "Shame", "Trust", "Suspicion", "Longing", "Satisfaction", "Doubt", "Confidence",
    "Melancholy", "Bliss", "Contentment", "Regret", "Relief", "Anticipation", "Apathy", "Sympathy", "Loneliness", "Euphoria",
]


class Prompt(NamedTuple):
    noun: str
    verb: str
    emotion: str


def roll_dice(rng: random.Random = random) -> Prompt:
    """Pick one word from each pool."""
    return Prompt(rng.choice(NOUNS), rng.choice(VERBS), rng.choice(EMOTIONS))
