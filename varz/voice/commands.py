"""Named assistant commands and the fixed utterances they speak."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from varz.nlu.intents import CommandIntent

VARZ_COMMANDS: Dict[str, str] = {
    "TOGGLE": "varz.toggle",
    "VOICE_INPUT": "varz.voiceInput",
    "READ_CODE": "varz.readCode",
    "RUN_CODE": "varz.runCode",
    "SAVE_FILE": "varz.saveFile",
    "CLEAR_EDITOR": "varz.clearEditor",
}


@dataclass(frozen=True)
class EditorCommandMessages:
    progress: str
    success: str
    failure: str


EDITOR_COMMAND_MESSAGES: Dict[CommandIntent, EditorCommandMessages] = {
    CommandIntent.RUN: EditorCommandMessages(
        progress="Running code...",
        success="Code execution started.",
        failure="Failed to run code. Please check your code for errors.",
    ),
    CommandIntent.SAVE: EditorCommandMessages(
        progress="Saving file...",
        success="File saved successfully.",
        failure="Failed to save file.",
    ),
    CommandIntent.CLEAR: EditorCommandMessages(
        progress="Clearing editor...",
        success="Editor cleared.",
        failure="No active editor to clear.",
    ),
}

EDITOR_INTENTS = frozenset(EDITOR_COMMAND_MESSAGES)

UNSUPPORTED_CAPTURE = "Speech recognition is not supported on this system."
ALREADY_LISTENING = "Already listening for voice input."
LISTENING_PROMPT = "Listening for your voice command. Please speak now."
STOPPED_LISTENING = "Stopped listening for voice input."
VOICE_INPUT_ACTIVATED = "Voice input activated. Please speak your command."
READING_CODE = "Reading and explaining the code..."
NO_ACTIVE_EDITOR = "No active editor found. Please open a file first."
NO_CODE_FOUND = "No code found. Please open a file with code or select some text."
ERROR_READING_CODE = "Error reading code. Please try again."
COMMAND_NOT_RECOGNIZED = "Command not recognized."
TOOLBAR_ACTIVATED = "VARZ toolbar activated."
TOOLBAR_HIDDEN = "VARZ toolbar hidden."
UNKNOWN_REQUEST = (
    "I didn't understand that command. Please try saying \"read code\", "
    "\"explain this code\", \"run code\", \"save file\", or \"clear editor\"."
)


def heard(transcript: str) -> str:
    return f"I heard: {transcript}. Processing your request."


def recognition_error(reason: str) -> str:
    return f"Speech recognition error: {reason}. Please try again."


def generating(code: str) -> str:
    return f"I'll generate code for you: {code}"


__all__ = [
    "EDITOR_COMMAND_MESSAGES",
    "EDITOR_INTENTS",
    "EditorCommandMessages",
    "VARZ_COMMANDS",
    "generating",
    "heard",
    "recognition_error",
]
