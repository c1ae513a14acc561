"""Contracts for the assistant's external collaborators.

The assistant never touches audio devices, editors or speech engines directly.
It talks to four narrow protocols defined here, and the module ships small
terminal-friendly implementations used by the CLI and the tests.
"""
from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Set, Tuple, runtime_checkable

from rich.console import Console
from rich.prompt import Prompt

from varz.core.config import SpeechSettings
from varz.utils.errors import SpeechCaptureError
from varz.utils.logging import get_logger

logger = get_logger(__name__)

LANGUAGE_BY_SUFFIX: Dict[str, str] = {
    ".py": "python",
    ".js": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".java": "java",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".cs": "csharp",
    ".go": "go",
    ".rb": "ruby",
    ".php": "php",
    ".rs": "rust",
    ".sh": "shellscript",
    ".html": "html",
    ".sql": "sql",
    ".lua": "lua",
}


@dataclass(frozen=True)
class EditorSnapshot:
    """Text of the active editor, its selection and language id."""

    text: str
    selection: Optional[str] = None
    language: str = "unknown"


@runtime_checkable
class TranscriptSource(Protocol):
    """Produces at most one transcript per capture session."""

    def is_supported(self) -> bool: ...

    async def capture(self) -> str: ...

    async def stop(self) -> None: ...


@runtime_checkable
class EditorStateProvider(Protocol):
    async def snapshot(self) -> Optional[EditorSnapshot]: ...


@runtime_checkable
class CommandExecutor(Protocol):
    async def execute(self, command_id: str) -> bool: ...


@runtime_checkable
class SpeechOutput(Protocol):
    async def speak(self, text: str, settings: SpeechSettings) -> None: ...


class ConsoleTranscriptSource:
    """Read typed utterances from the terminal instead of a microphone."""

    def __init__(self, console: Optional[Console] = None, *, prompt: str = "[bold magenta]Say[/]") -> None:
        self._console = console or Console()
        self._prompt = prompt

    def is_supported(self) -> bool:
        return sys.stdin is not None and not sys.stdin.closed

    async def capture(self) -> str:
        try:
            text = await asyncio.to_thread(Prompt.ask, self._prompt, console=self._console)
        except (EOFError, KeyboardInterrupt) as exc:
            raise SpeechCaptureError("aborted") from exc
        if not text or not text.strip():
            raise SpeechCaptureError("no-speech")
        return text.strip()

    async def stop(self) -> None:
        return None


class StaticTranscriptSource:
    """Replay a fixed list of transcripts, one per capture."""

    def __init__(self, transcripts: Iterable[str], *, supported: bool = True) -> None:
        self._pending: List[str] = list(transcripts)
        self._supported = supported
        self.stopped = False

    def is_supported(self) -> bool:
        return self._supported

    async def capture(self) -> str:
        if not self._pending:
            raise SpeechCaptureError("no-speech")
        return self._pending.pop(0)

    async def stop(self) -> None:
        self.stopped = True


def language_for_path(path: Path) -> str:
    return LANGUAGE_BY_SUFFIX.get(path.suffix.lower(), "unknown")


class FileEditorState:
    """Treat a file on disk as the active editor.

    ``selection`` is an inclusive, 1-based line range that overrides the full
    text when it selects anything.
    """

    def __init__(
        self,
        path: Optional[Path],
        *,
        selection: Optional[Tuple[int, int]] = None,
        language: Optional[str] = None,
    ) -> None:
        self.path = path
        self.selection = selection
        self.language = language

    async def snapshot(self) -> Optional[EditorSnapshot]:
        if self.path is None or not self.path.exists():
            return None
        text = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        selected: Optional[str] = None
        if self.selection is not None:
            start, end = self.selection
            lines = text.split("\n")
            selected = "\n".join(lines[max(start - 1, 0) : max(end, 0)])
        return EditorSnapshot(
            text=text,
            selection=selected,
            language=self.language or language_for_path(self.path),
        )


class RecordingCommandExecutor:
    """Record executed command ids; ids listed in ``failing`` report failure."""

    def __init__(self, *, failing: Optional[Set[str]] = None) -> None:
        self.executed: List[str] = []
        self._failing = set(failing or ())

    async def execute(self, command_id: str) -> bool:
        self.executed.append(command_id)
        ok = command_id not in self._failing
        logger.info("editor command", extra={"command_id": command_id, "ok": ok})
        return ok


__all__ = [
    "CommandExecutor",
    "ConsoleTranscriptSource",
    "EditorSnapshot",
    "EditorStateProvider",
    "FileEditorState",
    "LANGUAGE_BY_SUFFIX",
    "RecordingCommandExecutor",
    "SpeechOutput",
    "StaticTranscriptSource",
    "TranscriptSource",
    "language_for_path",
]
