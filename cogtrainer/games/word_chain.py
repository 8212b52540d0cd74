from __future__ import annotations

"""Word chain: extend a chain of words letter by letter.

Each answer must start with the last letter of the current word, be at
least three letters long and not repeat a word already in the chain. An
accepted answer becomes the next prompt, so the game keeps the chain for
the whole session; `reset` starts a new one.
"""

import random
from typing import Any, Dict, FrozenSet, List, Optional, Set, Tuple

from .base_game import BaseGame, as_text
from ..errors import InvalidResponseShape
from ..results.schema import Challenge


MIN_WORD_LENGTH = 3

# Opening words by level tier; longer words open later tiers.
STARTER_WORDS: Dict[int, List[str]] = {
    1: ["apple", "house", "table", "music", "water", "light", "paper", "green", "tree", "bird"],
    2: ["ocean", "mountain", "forest", "dance", "sport", "school", "friend", "family", "travel", "garden"],
    3: ["adventure", "mystery", "science", "technology", "creativity", "wisdom", "courage", "freedom", "justice", "harmony"],
    4: ["philosophy", "innovation", "sustainability", "consciousness", "transformation",
        "enlightenment", "perseverance", "authenticity", "serendipity", "metamorphosis"],
    5: ["transcendence", "quintessential", "paradigm", "epiphany", "synchronicity",
        "juxtaposition", "dichotomy", "paradox", "catalyst", "renaissance"],
}

# Suggestions for hints
WORD_BANK: Tuple[str, ...] = tuple(sorted({
    "animal", "banana", "candle", "dragon", "eagle", "forest", "guitar", "honey", "island", "jungle",
    "kitten", "lemon", "magnet", "needle", "orange", "pencil", "queen", "rabbit", "summer", "tiger",
    "umbrella", "violin", "window", "yellow", "zebra", "anchor", "bridge", "castle", "desert", "engine",
    "feather", "giant", "helmet", "insect", "jacket", "kettle", "ladder", "marble", "nature", "ocean",
    "planet", "quiet", "river", "silver", "tunnel", "uncle", "valley", "wagon", "yogurt", "zipper",
    "arrow", "butter", "cookie", "dolphin", "energy", "flower", "garden", "hammer", "igloo", "jelly",
    "koala", "lizard", "monkey", "noodle", "otter", "parrot", "rocket", "spider", "turtle", "wizard",
    "xylophone", "apron", "elephant", "emerald", "eleven", "echo", "easel", "ember",
}))


def word_tier(level: int) -> int:
    return max(1, min(level, max(STARTER_WORDS)))


def hint_for(letter: str, used: FrozenSet[str], rng: random.Random) -> str:
    candidates = [w for w in WORD_BANK if w.startswith(letter) and w not in used]
    if candidates:
        return f'Try "{rng.choice(candidates)}" - it starts with "{letter}"!'
    return f'Think of a word that starts with "{letter}".'


class WordChainGame(BaseGame):
    kind = "word_chain"

    def __init__(self) -> None:
        self.chain: List[str] = []
        self.used: Set[str] = set()

    @property
    def current_word(self) -> Optional[str]:
        return self.chain[-1] if self.chain else None

    def reset(self) -> None:
        self.chain = []
        self.used = set()

    def generate(self, level: int, rng: random.Random) -> Challenge:
        if self.current_word is None:
            start = rng.choice(STARTER_WORDS[word_tier(level)])
            self.chain.append(start)
            self.used.add(start)
        word = self.current_word
        assert word is not None
        letter = word[-1]
        used = frozenset(self.used)
        return Challenge(
            kind=self.kind,
            level=level,
            content={"word": word, "start_letter": letter, "used": used, "chain_length": len(self.chain) - 1},
            answer=letter,
            hint=hint_for(letter, used, rng),
        )

    def check(self, challenge: Challenge, response: Any) -> bool:
        word = as_text(response)
        if len(word) < MIN_WORD_LENGTH or not word.isalpha():
            raise InvalidResponseShape(f"not a word of {MIN_WORD_LENGTH}+ letters: {response!r}")
        if word[0] != challenge.content["start_letter"]:
            return False
        return word not in challenge.content["used"]

    def accept(self, challenge: Challenge, response: Any) -> None:
        """The accepted word becomes the next prompt."""
        word = as_text(response)
        self.chain.append(word)
        self.used.add(word)

    def difficulty(self, level: int) -> Tuple[float, ...]:
        return (float(word_tier(level)),)
