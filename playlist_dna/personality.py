"""
Personality Classifier
======================

Maps mean [0, 1] feature values to a personality label. The rules overlap,
so their order decides the outcome: the first predicate that holds wins.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Tuple

from .config import (
    DEFAULT_PERSONALITY,
    DEFAULT_PERSONALITY_THRESHOLDS,
    PERSONALITY_DESCRIPTIONS,
    PersonalityThresholds,
)

Predicate = Callable[[Mapping[str, float]], bool]


@dataclass(frozen=True)
class PersonalityLabel:
    label: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {"label": self.label, "description": self.description}


def build_rules(t: PersonalityThresholds = DEFAULT_PERSONALITY_THRESHOLDS) -> Tuple[Tuple[Predicate, str], ...]:
    """Ordered (predicate, label) pairs for the given thresholds."""
    return (
        (
            lambda m: (
                m["instrumentalness"] > t.experimental_instrumentalness
                or (m["energy"] > t.experimental_energy and m["danceability"] < t.experimental_danceability)
            ),
            "The Experimentalist",
        ),
        (
            lambda m: (
                m["acousticness"] > t.mood_acousticness
                or m["valence"] < t.mood_low_valence
                or m["valence"] > t.mood_high_valence
            ),
            "Mood-Driven",
        ),
        (
            lambda m: m["energy"] > t.eclectic_energy and m["acousticness"] > t.eclectic_acousticness,
            "The Eclectic",
        ),
    )


PERSONALITY_RULES = build_rules()


def personality_for(label: str) -> PersonalityLabel:
    return PersonalityLabel(label=label, description=PERSONALITY_DESCRIPTIONS[label])


def classify_personality(
    means: Mapping[str, float],
    rules: Tuple[Tuple[Predicate, str], ...] = PERSONALITY_RULES
) -> PersonalityLabel:
    """
    Pick the personality for a playlist.

    Args:
        means: Mean energy, danceability, valence, acousticness and
            instrumentalness in the [0, 1] domain
        rules: Ordered rules, first match wins

    Returns:
        PersonalityLabel with its fixed description
    """
    for predicate, label in rules:
        if predicate(means):
            return personality_for(label)
    return personality_for(DEFAULT_PERSONALITY)
