"""Speech output implementations and voice selection."""
from __future__ import annotations

import asyncio
import shutil
from dataclasses import dataclass
from typing import List, Optional, Sequence

from rich.console import Console
from rich.text import Text

from varz.core.config import SpeechSettings
from varz.utils.errors import SpeechOutputError
from varz.utils.logging import get_logger

logger = get_logger(__name__)

ESPEAK_BINARY = "espeak-ng"
ESPEAK_BASE_WPM = 175


@dataclass(frozen=True)
class VoiceInfo:
    """A voice offered by a speech engine."""

    name: str
    lang: str


def select_voice(
    voices: Sequence[VoiceInfo], preferred: Sequence[str], locale: str = "en-US"
) -> Optional[VoiceInfo]:
    """Pick the voice to speak with.

    Preferred names are tried in order and match a voice whose name equals or
    contains them. Failing that, the first voice for the locale's language is
    used, and ``None`` means the engine default.
    """

    for wanted in preferred:
        for voice in voices:
            if voice.name == wanted or wanted in voice.name:
                return voice
    language = locale.split("-")[0].lower()
    for voice in voices:
        if voice.lang.lower().startswith(language):
            return voice
    return None


class ConsoleSpeechOutput:
    """Render utterances on the terminal, for typed sessions and screen readers."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()
        self.spoken: List[str] = []

    async def speak(self, text: str, settings: SpeechSettings) -> None:
        self.spoken.append(text)
        self.console.print(Text("VARZ: ", style="bold magenta") + Text(text))


class EspeakSpeechOutput:
    """Speak through the ``espeak-ng`` command line synthesiser.

    Rate is relative to 175 words per minute, volume maps onto espeak's
    0-200 amplitude scale with 1.0 as the default 100, and pitch 1.0 maps onto
    espeak's default of 50.
    """

    def __init__(self, binary: str = ESPEAK_BINARY) -> None:
        self._binary = binary
        self._voices: Optional[List[VoiceInfo]] = None
        self._current: Optional[asyncio.subprocess.Process] = None

    def is_available(self) -> bool:
        return shutil.which(self._binary) is not None

    async def voices(self) -> List[VoiceInfo]:
        if self._voices is None:
            output = await self._run_capture("--voices")
            self._voices = parse_espeak_voices(output)
        return self._voices

    async def speak(self, text: str, settings: SpeechSettings) -> None:
        if not self.is_available():
            raise SpeechOutputError(f"{self._binary} is not installed")
        await self.cancel()
        voice = select_voice(await self.voices(), settings.preferred_voices, settings.locale)
        args = espeak_arguments(settings, voice)
        self._current = await asyncio.create_subprocess_exec(
            self._binary,
            *args,
            text,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
        _, stderr = await self._current.communicate()
        if self._current.returncode not in (0, None, -15):
            raise SpeechOutputError(stderr.decode(errors="replace").strip() or "espeak failed")
        logger.debug("speech finished", extra={"voice": voice.name if voice else "default"})

    async def cancel(self) -> None:
        """Stop the utterance currently playing, if any."""

        if self._current is not None and self._current.returncode is None:
            self._current.terminate()
            await self._current.wait()
        self._current = None

    async def _run_capture(self, *args: str) -> str:
        process = await asyncio.create_subprocess_exec(
            self._binary,
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, _ = await process.communicate()
        return stdout.decode(errors="replace")


def espeak_arguments(settings: SpeechSettings, voice: Optional[VoiceInfo]) -> List[str]:
    args = [
        "-s",
        str(int(ESPEAK_BASE_WPM * settings.rate)),
        "-a",
        str(int(min(settings.volume, 1.0) * 100)),
        "-p",
        str(int(min(settings.pitch * 50, 99))),
    ]
    if voice is not None:
        args.extend(["-v", voice.lang])
    return args


def parse_espeak_voices(output: str) -> List[VoiceInfo]:
    """Parse the table printed by ``espeak-ng --voices``."""

    voices: List[VoiceInfo] = []
    for line in output.splitlines()[1:]:
        parts = line.split()
        if len(parts) >= 4:
            voices.append(VoiceInfo(name=parts[3], lang=parts[1]))
    return voices


__all__ = [
    "ConsoleSpeechOutput",
    "EspeakSpeechOutput",
    "VoiceInfo",
    "espeak_arguments",
    "parse_espeak_voices",
    "select_voice",
]
