"""Loading the startup card set, either the built-in sample deck or a YAML deck file."""

import logging
from pathlib import Path
from typing import Any

import yaml
from yaml import YAMLError

from leitner.domain.errors import DeckFormatError
from leitner.domain.models import Flashcard

logger = logging.getLogger(__name__)

_SAMPLE_DECK: list[tuple[str, str, str, tuple[str, ...]]] = [
    (
        "Who has scored the most goals in football history?",
        "Cristiano Ronaldo",
        "Messi is better, by the way",
        ("sport", "football"),
    ),
    ("What is the capital of France?", "Paris", "Eiffel Tower city", ("geography",)),
    ("13 * 11", "143", "sum of digits of 13 place between of ones", ("math",)),
    ("What planet is known as the Red Planet?", "Mars", "Fourth from the Sun", ("science",)),
    (
        "Who holds the record for most 3-pointers in NBA history?",
        "Stephen Curry",
        "The 3-point king 👑",
        ("sport", "basketball"),
    ),
    (
        "Who is the fastest man in history?",
        "Usain Bolt",
        "100 metters in less than 10 seconds ⚡️",
        ("sport", "athletics"),
    ),
    ("Who wrote 'Hamlet'?", "William Shakespeare", "English playwright", ("literature",)),
    ("What is the chemical symbol for water?", "H2O", "Two hydrogens", ("science",)),
    ("Who painted the Mona Lisa?", "Leonardo da Vinci", "Italian artist", ("art",)),
    ("What is the largest ocean?", "Pacific", "Between Asia and Americas", ("geography",)),
    ("What is the square root of 64?", "8", "Perfect square", ("math",)),
    (
        "Who won the historic sextuple in 2009?",
        "FC Barcelona",
        "Only club to win 6 trophies in a year 🏆🏆🏆🏆🏆🏆",
        ("sport", "football", "history"),
    ),
    ("Who discovered gravity?", "Isaac Newton", "Falling apple story", ("science", "history")),
    ("What is the boiling point of water (°C)?", "100", "Triple digits", ("science",)),
    ("In what year did World War II end?", "1945", "Mid-40s", ("history",)),
    ("Which language is spoken in Brazil?", "Portuguese", "Not Spanish", ("language",)),
    ("What is 7 x 6?", "42", "think as sum of six 7", ("math",)),
    (
        "Who is the NBA all-time leading scorer?",
        "LeBron James",
        "MJ fans stay mad",
        ("sport", "basketball"),
    ),
    ("What is the smallest prime number?", "2", "Only even prime", ("math",)),
    (
        "Which footballer is known for the 'Siiuu' celebration?",
        "Cristiano Ronaldo",
        "You can hear it in your head",
        ("sport", "football"),
    ),
]


def default_deck() -> list[Flashcard]:
    """The built-in sample deck used when no deck file is configured."""
    return [
        Flashcard(front=front, back=back, hint=hint, tags=frozenset(tags))
        for front, back, hint, tags in _SAMPLE_DECK
    ]


def parse_deck(data: Any) -> list[Flashcard]:
    """
    Build flashcards from already-parsed YAML data.

    Expected shape::

        cards:
          - front: What is 7 x 6?
            back: "42"
            hint: Six sevens
            tags: [math]

    Entries with a (front, back) pair seen earlier are dropped with a warning.
    """
    if not isinstance(data, dict) or "cards" not in data:
        raise DeckFormatError("Deck must be a mapping with a top-level 'cards' list")

    entries = data["cards"]
    if not isinstance(entries, list):
        raise DeckFormatError("'cards' must be a list")

    cards: list[Flashcard] = []
    seen: set[Flashcard] = set()
    for i, entry in enumerate(entries):
        card = _parse_entry(i, entry)
        if card in seen:
            logger.warning(f"Duplicate card #{i} '{card.front}' ignored")
            continue
        seen.add(card)
        cards.append(card)

    return cards


def load_deck(path: Path) -> list[Flashcard]:
    """Read a YAML deck file. Raises DeckFormatError on unreadable or malformed input."""
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DeckFormatError(f"Cannot read deck file {path}: {e}") from e

    try:
        data = yaml.safe_load(content)
    except YAMLError as e:
        raise DeckFormatError(f"Invalid YAML in deck file {path}: {e}") from e

    cards = parse_deck(data)
    logger.info(f"Loaded {len(cards)} cards from {path}")
    return cards


def _parse_entry(index: int, entry: Any) -> Flashcard:
    if not isinstance(entry, dict):
        raise DeckFormatError(f"Card #{index}: expected a mapping, got {type(entry).__name__}")

    front = entry.get("front")
    back = entry.get("back")
    # YAML turns bare numbers into ints; answers like 42 are still text
    if isinstance(back, int | float) and not isinstance(back, bool):
        back = str(back)
    if isinstance(front, int | float) and not isinstance(front, bool):
        front = str(front)

    if not isinstance(front, str) or not front.strip():
        raise DeckFormatError(f"Card #{index}: 'front' must be a non-empty string")
    if not isinstance(back, str) or not back.strip():
        raise DeckFormatError(f"Card #{index}: 'back' must be a non-empty string")

    hint = entry.get("hint")
    if hint is not None and not isinstance(hint, str):
        raise DeckFormatError(f"Card #{index}: 'hint' must be a string")

    tags = entry.get("tags") or []
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise DeckFormatError(f"Card #{index}: 'tags' must be a list of strings")

    return Flashcard(front=front, back=back, hint=hint, tags=frozenset(tags))
