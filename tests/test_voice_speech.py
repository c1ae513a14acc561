import pytest
from rich.console import Console

from varz.core.config import SpeechSettings
from varz.voice.speech import (
    ConsoleSpeechOutput,
    VoiceInfo,
    espeak_arguments,
    parse_espeak_voices,
    select_voice,
)

VOICES = [
    VoiceInfo(name="German", lang="de"),
    VoiceInfo(name="English_(America)", lang="en-us"),
    VoiceInfo(name="Samantha Premium", lang="en-US"),
]


def test_preferred_voice_by_substring() -> None:
    assert select_voice(VOICES, ["Alex", "Samantha"]) == VOICES[2]


def test_falls_back_to_locale_language() -> None:
    assert select_voice(VOICES, ["Zira"], "en-US") == VOICES[1]
    assert select_voice(VOICES, [], "de-DE") == VOICES[0]
    assert select_voice(VOICES, [], "fr-FR") is None


def test_espeak_arguments_from_settings() -> None:
    assert espeak_arguments(SpeechSettings(), None) == ["-s", "148", "-a", "90", "-p", "50"]
    args = espeak_arguments(SpeechSettings(rate=1.0), VoiceInfo(name="English_(America)", lang="en-us"))
    assert args[:2] == ["-s", "175"]
    assert args[-2:] == ["-v", "en-us"]


def test_parse_espeak_voice_table() -> None:
    output = (
        "Pty Language       Age/Gender VoiceName          File                 Other Languages\n"
        " 5  af              --/M      Afrikaans          gmw/af\n"
        " 2  en-us           --/M      English_(America)  gmw/en-US            (en 3)\n"
    )
    assert parse_espeak_voices(output) == [
        VoiceInfo(name="Afrikaans", lang="af"),
        VoiceInfo(name="English_(America)", lang="en-us"),
    ]


@pytest.mark.asyncio
async def test_console_output_prints_utterance() -> None:
    console = Console(record=True, width=100)
    output = ConsoleSpeechOutput(console)
    await output.speak("Editor cleared.", SpeechSettings())
    assert output.spoken == ["Editor cleared."]
    assert "VARZ: Editor cleared." in console.export_text()
