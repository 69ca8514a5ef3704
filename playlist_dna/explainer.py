"""
Explanation Generator Module
============================

Turns analysis and battle results into short, human-readable text:
- Standout Audio DNA traits
- Genre makeup
- Health breakdown
- Battle verdict, biggest sonic differences and shared content
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from .analyzer import AnalysisResult
from .battle import BattleResult
from .compatibility import TIE

HIGH_DNA = 70
LOW_DNA = 30
NOTABLE_DIFFERENCE = 0.15


@dataclass
class Explanation:
    """Summary plus per-aspect explanations."""
    summary: str
    details: Dict[str, str]

    def to_dict(self) -> Dict:
        return {"summary": self.summary, **self.details}


class ExplanationGenerator:
    """
    Generates human-readable explanations for analysis and battle results.

    Focuses on:
    - Clarity: Easy to understand for non-technical users
    - Specificity: Uses actual genre names, scores and feature values
    """

    def __init__(self):
        """Initialize explanation generator."""
        # Audio feature descriptions for human-readable output
        self.audio_descriptors = {
            "danceability": {"high": "great for dancing", "low": "more chill and laid-back"},
            "energy": {"high": "high energy and intense", "low": "calm and mellow"},
            "valence": {"high": "upbeat and positive vibes", "low": "darker, more introspective mood"},
            "acousticness": {"high": "acoustic and organic sound", "low": "electronic and produced"},
            "instrumentalness": {"high": "instrumental focus", "low": "vocal-driven"},
            "tempo": {"high": "fast-paced rhythm", "low": "slower tempo"},
        }

    def _dna_traits(self, dna: Dict[str, int]) -> List[str]:
        traits = []
        for feature, value in dna.items():
            descriptors = self.audio_descriptors.get(feature)
            if not descriptors:
                continue
            if value >= HIGH_DNA:
                traits.append(descriptors["high"])
            elif value <= LOW_DNA:
                traits.append(descriptors["low"])
        return traits

    def explain_analysis(self, result: AnalysisResult) -> Explanation:
        """
        Explain a single-playlist analysis.

        Args:
            result: AnalysisResult

        Returns:
            Explanation
        """
        traits = self._dna_traits(result.audio_dna.to_dict())
        if traits:
            dna_exp = f"Standout traits: {', '.join(traits[:3])}."
        else:
            dna_exp = "A balanced sound with no extreme traits."

        if result.genre_distribution:
            top = result.genre_distribution[0]
            genre_exp = f"Led by {top.name} ({top.percent}% of tracks)"
            if result.subgenres:
                genre_exp += f", with a long tail of {', '.join(result.subgenres[:3])}"
            genre_exp += "."
        else:
            genre_exp = "No genre information available."

        health_exp = (
            f"Health {result.health_score}/100 ({result.health_status}), "
            f"rated {result.overall_rating:.1f}/5: {result.rating_description}"
        )

        return Explanation(
            summary=f"{result.personality.label}: {result.personality.description}",
            details={"audio": dna_exp, "genre": genre_exp, "health": health_exp},
        )

    def _biggest_differences(self, result: BattleResult) -> List[Tuple[str, float]]:
        if len(result.audio_data) != 2:
            return []
        first, second = result.audio_data
        diffs = []
        for feature in self.audio_descriptors:
            if feature == "tempo" or feature not in first or feature not in second:
                continue
            diff = first[feature] - second[feature]
            if abs(diff) >= NOTABLE_DIFFERENCE:
                diffs.append((feature, diff))
        diffs.sort(key=lambda item: abs(item[1]), reverse=True)
        return diffs

    def explain_battle(self, result: BattleResult) -> Explanation:
        """
        Explain a battle outcome.

        Args:
            result: BattleResult

        Returns:
            Explanation
        """
        score = result.compatibility_score
        if score >= 80:
            compat_exp = f"{score}% compatible: these playlists share a very similar vibe."
        elif score >= 50:
            compat_exp = f"{score}% compatible: some common ground, some contrast."
        else:
            compat_exp = f"{score}% compatible: very different listening moods."

        diffs = self._biggest_differences(result)
        if diffs:
            parts = []
            for feature, diff in diffs[:2]:
                side = "Playlist 1" if diff > 0 else "Playlist 2"
                parts.append(f"{side} is more {self.audio_descriptors[feature]['high']}")
            diff_exp = "; ".join(parts) + "."
        else:
            diff_exp = "No major sonic differences."

        shared = []
        if result.shared_tracks:
            shared.append(f"{len(result.shared_tracks)} shared tracks")
        if result.shared_artists:
            shared.append(f"{len(result.shared_artists)} shared artists")
        if result.shared_genres:
            shared.append(f"{len(result.shared_genres)} shared genres")
        shared_exp = f"They have {', '.join(shared)}." if shared else "Nothing in common content-wise."

        if result.winner == TIE:
            summary = f"Dead even. {result.winner_reason}."
        else:
            summary = f"{result.winner_reason}."

        return Explanation(
            summary=summary,
            details={"compatibility": compat_exp, "differences": diff_exp, "shared": shared_exp},
        )


def explain_analysis(result: AnalysisResult) -> str:
    """Convenience function returning only the summary of an analysis."""
    return ExplanationGenerator().explain_analysis(result).summary


def explain_battle(result: BattleResult) -> str:
    """Convenience function returning only the summary of a battle."""
    return ExplanationGenerator().explain_battle(result).summary
