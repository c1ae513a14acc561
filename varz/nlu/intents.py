"""Map free-form transcripts to assistant intents."""
from __future__ import annotations

from enum import Enum
from typing import Tuple


class CommandIntent(str, Enum):
    """Closed set of actions a transcript can request."""

    RUN = "run"
    SAVE = "save"
    CLEAR = "clear"
    READ = "read"
    GENERATE = "generate"
    UNKNOWN = "unknown"


READ_PHRASES: Tuple[str, ...] = (
    "read",
    "explain",
    "what does this code do",
    "what does this do",
    "explain this code",
    "tell me about this code",
    "summarize this code",
)

# Checked top to bottom; "please run and then save" is a run request.
INTENT_RULES: Tuple[Tuple[CommandIntent, Tuple[str, ...]], ...] = (
    (CommandIntent.RUN, ("run", "execute")),
    (CommandIntent.SAVE, ("save",)),
    (CommandIntent.CLEAR, ("clear", "delete")),
    (CommandIntent.READ, READ_PHRASES),
    (CommandIntent.GENERATE, ("generate", "create", "write")),
)


class CommandIntentClassifier:
    """Keyword classifier with ordered, substring-based rules."""

    def __init__(self, rules: Tuple[Tuple[CommandIntent, Tuple[str, ...]], ...] = INTENT_RULES) -> None:
        self._rules = rules

    def classify(self, transcript: str) -> CommandIntent:
        text = transcript.lower().strip()
        if not text:
            return CommandIntent.UNKNOWN
        for intent, keywords in self._rules:
            if any(keyword in text for keyword in keywords):
                return intent
        return CommandIntent.UNKNOWN


def classify_intent(transcript: str) -> CommandIntent:
    return CommandIntentClassifier().classify(transcript)


__all__ = ["CommandIntent", "CommandIntentClassifier", "INTENT_RULES", "READ_PHRASES", "classify_intent"]
