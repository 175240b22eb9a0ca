"""Fixed life-area domains and the display styles used by graph nodes."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Style:
    color: str
    icon: str


DOMAINS: dict[str, Style] = {
    "Work Life": Style("#E8A838", "💼"),
    "Academic Life": Style("#4A90D9", "📚"),
    "Personal Life": Style("#9B59B6", "🌸"),
    "Friends": Style("#2ECC71", "🤝"),
    "Dating": Style("#E74C3C", "💕"),
    "Health": Style("#1ABC9C", "🏃"),
    "Family": Style("#F39C12", "🏡"),
}

TONE_COLORS: dict[str, str] = {
    "positive": "#2ECC71",
    "negative": "#E74C3C",
    "neutral": "#95A5A6",
    "stressed": "#E67E22",
    "anxious": "#9B59B6",
    "happy": "#F1C40F",
    "sad": "#3498DB",
    "grateful": "#1ABC9C",
    "excited": "#FF6B35",
}

ENTITY_STYLES: dict[str, Style] = {
    "place": Style("#3498db", "📍"),
    "person": Style("#e74c3c", "👤"),
    "food": Style("#f39c12", "🍽️"),
    "activity": Style("#9b59b6", "🎯"),
    "preference": Style("#1abc9c", "💡"),
    "object": Style("#95a5a6", "📦"),
    "organization": Style("#34495e", "🏢"),
}

FALLBACK_STYLE = Style("#95a5a6", "⭐")

_DOMAIN_LOOKUP = {name.lower(): name for name in DOMAINS}


def canonical_domain(name: str) -> str | None:
    return _DOMAIN_LOOKUP.get(str(name).strip().lower())


def domain_node_id(name: str) -> str:
    return f"domain:{name}"


def domain_style(name: str) -> Style:
    return DOMAINS.get(name, FALLBACK_STYLE)


def entity_style(entity_type: str) -> Style:
    return ENTITY_STYLES.get(entity_type, FALLBACK_STYLE)


def tone_color(tone: str) -> str:
    return TONE_COLORS.get(tone, TONE_COLORS["neutral"])
