from pathlib import Path

import pytest

from leitner.application.deck import default_deck, load_deck, parse_deck
from leitner.domain.errors import DeckFormatError
from leitner.domain.models import Flashcard


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "deck.yaml"
    path.write_text(content, encoding="utf-8")
    return path


def test_default_deck_has_unique_cards():
    deck = default_deck()

    assert len(deck) == 20
    assert len(set(deck)) == 20
    assert all(card.hint for card in deck)


def test_default_deck_hints():
    hints = {card.front: card.hint for card in default_deck()}

    assert hints["13 * 11"] == "sum of digits of 13 place between of ones"
    assert hints["Who won the historic sextuple in 2009?"] == (
        "Only club to win 6 trophies in a year 🏆🏆🏆🏆🏆🏆"
    )
    assert hints["What is 7 x 6?"] == "think as sum of six 7"


def test_load_deck(tmp_path):
    path = _write(
        tmp_path,
        """
cards:
  - front: What is the capital of France?
    back: Paris
    hint: Eiffel Tower city
    tags: [geography]
  - front: What is 7 x 6?
    back: 42
""",
    )

    cards = load_deck(path)

    assert cards == [
        Flashcard("What is the capital of France?", "Paris"),
        Flashcard("What is 7 x 6?", "42"),
    ]
    assert cards[0].hint == "Eiffel Tower city"
    assert cards[0].tags == frozenset({"geography"})
    assert cards[1].hint is None
    assert cards[1].tags == frozenset()


def test_duplicates_keep_first(tmp_path):
    path = _write(
        tmp_path,
        """
cards:
  - {front: Q, back: A, hint: first}
  - {front: Q, back: A, hint: second}
""",
    )

    cards = load_deck(path)

    assert len(cards) == 1
    assert cards[0].hint == "first"


@pytest.mark.parametrize(
    "data, message",
    [
        (None, "top-level 'cards'"),
        ([], "top-level 'cards'"),
        ({"cards": "nope"}, "must be a list"),
        ({"cards": ["just text"]}, "Card #0: expected a mapping"),
        ({"cards": [{"back": "A"}]}, "Card #0: 'front'"),
        ({"cards": [{"front": "Q", "back": "  "}]}, "Card #0: 'back'"),
        ({"cards": [{"front": "Q", "back": "A", "hint": 3}]}, "'hint'"),
        ({"cards": [{"front": "Q", "back": "A", "tags": "math"}]}, "'tags'"),
    ],
)
def test_parse_deck_rejects_malformed(data, message):
    with pytest.raises(DeckFormatError, match=message):
        parse_deck(data)


def test_invalid_yaml(tmp_path):
    path = _write(tmp_path, "cards: [unclosed")
    with pytest.raises(DeckFormatError, match="Invalid YAML"):
        load_deck(path)


def test_missing_file(tmp_path):
    with pytest.raises(DeckFormatError, match="Cannot read"):
        load_deck(tmp_path / "missing.yaml")
