from playlist_dna.analyzer import analyze
from playlist_dna.battle import battle
from playlist_dna.explainer import ExplanationGenerator, explain_analysis, explain_battle


def test_analysis_explanation(make_features):
    tracks = [make_features(energy=0.9, danceability=0.2, instrumentalness=0.5, acousticness=0.1) for _ in range(3)]
    result = analyze(tracks, ["ambient", "ambient", "drone"], 3)

    explanation = ExplanationGenerator().explain_analysis(result)

    assert explanation.summary.startswith("The Experimentalist:")
    assert "high energy and intense" in explanation.details["audio"]
    assert explanation.details["genre"].startswith("Led by Ambient (67% of tracks)")
    assert result.health_status in explanation.details["health"]
    assert explain_analysis(result) == explanation.summary


def test_battle_explanation_names_differences(make_features):
    dancey = [make_features(danceability=0.9, valence=0.5)]
    still = [make_features(danceability=0.2, valence=0.5)]
    result = battle(dancey, still, ["pop"], ["pop"], ["a"], ["b"], ["Nova"], ["Drift"])

    explanation = ExplanationGenerator().explain_battle(result)

    assert explanation.summary == f"{result.winner_reason}."
    assert "Playlist 1 is more great for dancing" in explanation.details["differences"]
    assert explanation.details["shared"] == "They have 1 shared genres."
    assert explain_battle(result) == explanation.summary


def test_tied_battle_explanation(make_features):
    tracks = [make_features()]
    result = battle(tracks, tracks, [], [], ["a"], ["a"], [], [])

    explanation = ExplanationGenerator().explain_battle(result)

    assert explanation.summary.startswith("Dead even.")
    assert explanation.details["differences"] == "No major sonic differences."
    assert explanation.to_dict()["summary"] == explanation.summary
