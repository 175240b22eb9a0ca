"""Keyword-based mood scoring for journal messages."""

from __future__ import annotations

import re
from dataclasses import dataclass

POSITIVE_WORDS = frozenset({
    "good", "great", "happy", "awesome", "excited", "productive", "love", "amazing",
    "fantastic", "chill", "better", "calm", "grateful", "proud", "fun",
})

NEGATIVE_WORDS = frozenset({
    "bad", "sad", "tired", "stressed", "anxious", "angry", "upset", "depressed", "lonely",
    "worried", "overwhelmed", "burned", "burnt", "hate", "awful", "terrible", "exhausted",
})

NEGATIVE_PHRASES = re.compile(r"not good|rough day|bad day|too much|so tired|burned out|burnt out")
POSITIVE_PHRASES = re.compile(r"really good|great day|feeling better|pretty happy|very productive")

MOOD_LABELS = ("great", "good", "neutral", "low", "tough")


@dataclass
class MoodScore:
    score: float
    label: str


def mood_label_from_score(score: float) -> str:
    if score >= 1.5:
        return "great"
    if score >= 0.5:
        return "good"
    if score <= -1.5:
        return "tough"
    if score <= -0.5:
        return "low"
    return "neutral"


def analyze_mood(text: str) -> MoodScore:
    lower = text.lower()
    score = 0
    for word in re.split(r"[^a-z]+", lower):
        if word in POSITIVE_WORDS:
            score += 1
        if word in NEGATIVE_WORDS:
            score -= 1
    if NEGATIVE_PHRASES.search(lower):
        score -= 1
    if POSITIVE_PHRASES.search(lower):
        score += 1
    score = max(-2, min(2, score))
    return MoodScore(score=score, label=mood_label_from_score(score))
