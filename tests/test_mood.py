import pytest

from journal_graph.mood import analyze_mood, mood_label_from_score


@pytest.mark.parametrize(
    "text, score, label",
    [
        ("It was an okay day.", 0, "neutral"),
        ("Pretty good, got stuff done.", 1, "good"),
        ("Great day, I'm so happy and proud!", 2, "great"),
        ("Felt tired.", -1, "low"),
        ("Rough day, stressed and anxious, totally exhausted.", -2, "tough"),
        ("Good but tired", 0, "neutral"),
    ],
)
def test_analyze_mood(text, score, label):
    mood = analyze_mood(text)
    assert mood.score == score
    assert mood.label == label


@pytest.mark.parametrize(
    "score, label",
    [(2, "great"), (1.5, "great"), (0.5, "good"), (0.49, "neutral"), (-0.5, "low"), (-1.5, "tough")],
)
def test_mood_label_thresholds(score, label):
    assert mood_label_from_score(score) == label
