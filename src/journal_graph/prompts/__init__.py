from .extraction import EXTRACT_LIFE_GRAPH
from .reply import COMPANION_REPLY, FALLBACK_REPLIES, WRAP_UP_OFFER, WRAP_UP_REPLY

__all__ = [
    "EXTRACT_LIFE_GRAPH",
    "COMPANION_REPLY",
    "FALLBACK_REPLIES",
    "WRAP_UP_OFFER",
    "WRAP_UP_REPLY",
]
