import asyncio
from typing import List, Optional, Set

import pytest

from varz.core.config import SpeechSettings, VarzSettings
from varz.nlu.intents import CommandIntent
from varz.nlu.synthesizer import GeneratedSnippet
from varz.utils.errors import SpeechOutputError, VarzError
from varz.voice import commands as messages
from varz.voice.assistant import VoiceAssistant
from varz.voice.collaborators import EditorSnapshot, StaticTranscriptSource


class DummySpeech:
    def __init__(self, *, fail: bool = False) -> None:
        self.spoken: List[str] = []
        self.settings: List[SpeechSettings] = []
        self._fail = fail

    async def speak(self, text: str, settings: SpeechSettings) -> None:
        self.spoken.append(text)
        self.settings.append(settings)
        if self._fail:
            raise SpeechOutputError("no audio device")


class DummyExecutor:
    def __init__(self, *, failing: Optional[Set[str]] = None, raising: Optional[Set[str]] = None) -> None:
        self.executed: List[str] = []
        self._failing = failing or set()
        self._raising = raising or set()

    async def execute(self, command_id: str) -> bool:
        self.executed.append(command_id)
        if command_id in self._raising:
            raise RuntimeError(f"command {command_id} crashed")
        return command_id not in self._failing


class DummyEditor:
    def __init__(self, snapshot: Optional[EditorSnapshot] = None, *, broken: bool = False) -> None:
        self._snapshot = snapshot
        self._broken = broken

    async def snapshot(self) -> Optional[EditorSnapshot]:
        if self._broken:
            raise RuntimeError("editor crashed")
        return self._snapshot


class BlockingSource:
    def __init__(self) -> None:
        self.release = asyncio.Event()

    def is_supported(self) -> bool:
        return True

    async def capture(self) -> str:
        await self.release.wait()
        return "run it"

    async def stop(self) -> None:
        self.release.set()


def build(
    *,
    speech: Optional[DummySpeech] = None,
    executor: Optional[DummyExecutor] = None,
    editor: Optional[DummyEditor] = None,
    transcripts=None,
) -> VoiceAssistant:
    return VoiceAssistant(
        VarzSettings(),
        speech=speech or DummySpeech(),
        transcripts=transcripts or StaticTranscriptSource([]),
        executor=executor or DummyExecutor(),
        editor=editor,
    )


@pytest.mark.asyncio
async def test_run_takes_priority_over_save() -> None:
    speech, executor = DummySpeech(), DummyExecutor()
    assistant = build(speech=speech, executor=executor)

    response = await assistant.handle_transcript("please run and then save")

    assert response.intent is CommandIntent.RUN
    assert executor.executed == ["workbench.action.debug.start"]
    assert speech.spoken == [
        "I heard: please run and then save. Processing your request.",
        "Running code...",
        "Code execution started.",
    ]
    assert speech.settings[0].rate == pytest.approx(0.85)


@pytest.mark.asyncio
async def test_clear_stops_at_first_failed_command() -> None:
    executor = DummyExecutor(failing={"editor.action.selectAll"})
    assistant = build(executor=executor)

    response = await assistant.handle_transcript("clear the editor")

    assert executor.executed == ["editor.action.selectAll"]
    assert response.utterance == "No active editor to clear."


@pytest.mark.asyncio
async def test_clear_runs_every_command() -> None:
    executor = DummyExecutor()
    response = await build(executor=executor).execute_command("clear")
    assert executor.executed == ["editor.action.selectAll", "editor.action.clipboardCutAction"]
    assert response.utterance == "Editor cleared."


@pytest.mark.asyncio
async def test_executor_errors_are_spoken() -> None:
    executor = DummyExecutor(raising={"workbench.action.files.save"})
    response = await build(executor=executor).handle_transcript("save the file")
    assert response.intent is CommandIntent.SAVE
    assert response.utterance == "Failed to save file."


@pytest.mark.asyncio
async def test_read_explains_editor_text() -> None:
    speech = DummySpeech()
    editor = DummyEditor(EditorSnapshot(text='for i in range(5): print("hi")', language="python"))
    assistant = build(speech=speech, editor=editor)

    response = await assistant.handle_transcript("explain this code")

    assert response.intent is CommandIntent.READ
    assert response.utterance == 'This python code prints "hi" 5 times.'
    assert messages.READING_CODE in speech.spoken


@pytest.mark.asyncio
async def test_selection_overrides_full_text() -> None:
    editor = DummyEditor(EditorSnapshot(text="import os\nx = 1", selection="import os"))
    response = await build(editor=editor).read_code_from_editor()
    assert response.utterance == "This code imports external modules."


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("editor", "utterance"),
    [
        (None, messages.NO_ACTIVE_EDITOR),
        (DummyEditor(None), messages.NO_ACTIVE_EDITOR),
        (DummyEditor(EditorSnapshot(text="   \n")), messages.NO_CODE_FOUND),
        (DummyEditor(broken=True), messages.ERROR_READING_CODE),
    ],
)
async def test_read_failures_are_spoken(editor: Optional[DummyEditor], utterance: str) -> None:
    response = await build(editor=editor).read_code_from_editor()
    assert response.utterance == utterance


@pytest.mark.asyncio
async def test_generate_notifies_listeners() -> None:
    assistant = build()
    snippets: List[GeneratedSnippet] = []
    assistant.on_did_generate_code(snippets.append)

    response = await assistant.handle_transcript("create a function that adds two numbers")

    assert response.intent is CommandIntent.GENERATE
    assert response.snippet is not None
    assert response.snippet.template_id == "function.sum"
    assert response.utterance.startswith("I'll generate code for you: function a(a, b) {")
    assert snippets == [response.snippet]


@pytest.mark.asyncio
async def test_unknown_request_lists_examples() -> None:
    response = await build().handle_transcript("hello there")
    assert response.intent is CommandIntent.UNKNOWN
    assert response.utterance == messages.UNKNOWN_REQUEST
    assert '"read code"' in response.utterance


@pytest.mark.asyncio
async def test_voice_input_dispatches_transcript() -> None:
    speech, executor = DummySpeech(), DummyExecutor()
    assistant = build(speech=speech, executor=executor, transcripts=StaticTranscriptSource(["save the file"]))
    heard: List[str] = []
    assistant.on_did_recognize_speech(heard.append)

    response = await assistant.start_voice_input()

    assert response is not None and response.intent is CommandIntent.SAVE
    assert heard == ["save the file"]
    assert speech.spoken[0] == messages.LISTENING_PROMPT
    assert not assistant.session.is_listening
    assert not assistant.session.indicator_active


@pytest.mark.asyncio
async def test_unsupported_capture() -> None:
    speech = DummySpeech()
    assistant = build(speech=speech, transcripts=StaticTranscriptSource(["run"], supported=False))
    assert await assistant.start_voice_input() is None
    assert speech.spoken == [messages.UNSUPPORTED_CAPTURE]


@pytest.mark.asyncio
async def test_recognition_error_is_spoken() -> None:
    speech = DummySpeech()
    assistant = build(speech=speech, transcripts=StaticTranscriptSource([]))
    assert await assistant.start_voice_input() is None
    assert speech.spoken[-1] == "Speech recognition error: no-speech. Please try again."
    assert not assistant.session.is_listening


@pytest.mark.asyncio
async def test_second_session_is_rejected_then_stopped() -> None:
    speech, executor = DummySpeech(), DummyExecutor()
    assistant = build(speech=speech, executor=executor, transcripts=BlockingSource())

    first = asyncio.create_task(assistant.start_voice_input())
    while not assistant.session.is_listening:
        await asyncio.sleep(0)

    assert await assistant.start_voice_input() is None
    assert messages.ALREADY_LISTENING in speech.spoken

    await assistant.stop_voice_input()
    assert await first is None
    assert messages.STOPPED_LISTENING in speech.spoken
    assert executor.executed == []


@pytest.mark.asyncio
async def test_speech_failure_does_not_break_dispatch() -> None:
    executor = DummyExecutor()
    assistant = build(speech=DummySpeech(fail=True), executor=executor)
    spoken: List[str] = []
    assistant.on_did_speak(spoken.append)

    response = await assistant.handle_transcript("run")

    assert response.utterance == "Code execution started."
    assert spoken[-1] == "Code execution started."


@pytest.mark.asyncio
async def test_named_commands() -> None:
    speech, executor = DummySpeech(), DummyExecutor()
    assistant = build(speech=speech, executor=executor)

    await assistant.invoke("varz.toggle")
    assert not assistant.visible
    assert speech.spoken[-1] == messages.TOOLBAR_HIDDEN

    response = await assistant.invoke("varz.saveFile")
    assert response is not None and response.intent is CommandIntent.SAVE
    assert executor.executed == ["workbench.action.files.save"]

    with pytest.raises(VarzError):
        await assistant.invoke("varz.unknown")


@pytest.mark.asyncio
async def test_execute_command_rejects_non_editor_intents() -> None:
    response = await build().execute_command("explain")
    assert response.intent is CommandIntent.UNKNOWN
    assert response.utterance == messages.COMMAND_NOT_RECOGNIZED


class UninterruptibleSource:
    """Capture source whose ``stop`` cannot interrupt a pending capture."""

    def __init__(self) -> None:
        self.pending: List[asyncio.Event] = []
        self.stops = 0

    def is_supported(self) -> bool:
        return True

    async def capture(self) -> str:
        done = asyncio.Event()
        self.pending.append(done)
        await done.wait()
        return "run it"

    async def stop(self) -> None:
        self.stops += 1


@pytest.mark.asyncio
async def test_late_transcript_from_stopped_session_is_discarded() -> None:
    speech, executor = DummySpeech(), DummyExecutor()
    source = UninterruptibleSource()
    assistant = build(speech=speech, executor=executor, transcripts=source)

    first = asyncio.create_task(assistant.start_voice_input())
    while len(source.pending) < 1:
        await asyncio.sleep(0)
    await assistant.stop_voice_input()
    assert not assistant.session.is_listening

    second = asyncio.create_task(assistant.start_voice_input())
    while len(source.pending) < 2:
        await asyncio.sleep(0)

    source.pending[0].set()
    assert await first is None
    assert executor.executed == []
    assert assistant.session.is_listening
    assert assistant.session.indicator_active

    assert await assistant.start_voice_input() is None
    assert speech.spoken[-1] == messages.ALREADY_LISTENING

    source.pending[1].set()
    response = await second
    assert response is not None and response.intent is CommandIntent.RUN
    assert executor.executed == ["workbench.action.debug.start"]
    assert not assistant.session.is_listening
