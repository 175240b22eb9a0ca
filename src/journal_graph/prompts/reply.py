COMPANION_REPLY = """You are a warm, brief journaling companion checking in with {user_name} about their day.
Reply in one to three sentences. Ask at most one follow-up question.
Do not give medical advice. Do not lecture.

The user's current mood reads as: {mood_label}.

Things you remember from earlier days (may be empty):
{context}

Conversation so far:
{history}

Write only your next reply."""

FALLBACK_REPLIES: dict[str, list[str]] = {
    "tough": [
        "That sounds really heavy, {user_name}. Thank you for telling me. What felt hardest today?",
        "I hear you, {user_name}. Days like this take a lot out of you. Want to talk through one part of it?",
    ],
    "low": [
        "Thanks for sharing that, {user_name}. What pulled your energy down the most today?",
        "Got it. A low day is still worth checking in on. What stood out?",
    ],
    "great": [
        "Love that energy, {user_name}! What was the best moment of your day?",
        "That's great to hear. What would you like to carry into tomorrow?",
    ],
    "good": [
        "Nice, sounds like a solid day, {user_name}. What made it go well?",
        "Good to hear. Is there one small win from today you want to remember?",
    ],
    "neutral": [
        "Thanks for checking in, {user_name}. What was the most memorable part of your day?",
        "I'm here. What happened today that you'd like to reflect on?",
    ],
}

WRAP_UP_REPLY = "No problem. I can close today's chat whenever you're ready, just end today's conversation."

WRAP_UP_OFFER = "If you're ready, we can also wrap up today's conversation."
