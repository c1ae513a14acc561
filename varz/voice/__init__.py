"""Voice assistant facade, session state and collaborator implementations."""
from __future__ import annotations

from varz.voice.assistant import AssistantResponse, VoiceAssistant
from varz.voice.collaborators import (
    CommandExecutor,
    ConsoleTranscriptSource,
    EditorSnapshot,
    EditorStateProvider,
    FileEditorState,
    RecordingCommandExecutor,
    SpeechOutput,
    StaticTranscriptSource,
    TranscriptSource,
)
from varz.voice.commands import VARZ_COMMANDS
from varz.voice.session import ListeningSession, SessionState
from varz.voice.speech import ConsoleSpeechOutput, EspeakSpeechOutput, VoiceInfo, select_voice

__all__ = [
    "AssistantResponse",
    "CommandExecutor",
    "ConsoleSpeechOutput",
    "ConsoleTranscriptSource",
    "EditorSnapshot",
    "EditorStateProvider",
    "EspeakSpeechOutput",
    "FileEditorState",
    "ListeningSession",
    "RecordingCommandExecutor",
    "SessionState",
    "SpeechOutput",
    "StaticTranscriptSource",
    "TranscriptSource",
    "VARZ_COMMANDS",
    "VoiceAssistant",
    "VoiceInfo",
    "select_voice",
]
