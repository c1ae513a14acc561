"""The voice assistant facade.

:class:`VoiceAssistant` wires the rule-based NLU stages to the external
collaborators. One request flows ``transcript -> intent -> action ->
utterance``; the only state kept between requests is the listening session and
the toolbar visibility flag. Collaborator failures are spoken back to the user
and logged, never raised into the caller.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from varz.core.config import VarzSettings
from varz.nlu.explainer import ExplanationComposer
from varz.nlu.intents import CommandIntent, CommandIntentClassifier
from varz.nlu.structure import CodeSample, StructureAnalyzer
from varz.nlu.synthesizer import CodeSynthesizer, GeneratedSnippet
from varz.utils.errors import SpeechCaptureError, VarzError
from varz.utils.logging import get_logger
from varz.utils.profiling import profile
from varz.voice import commands as messages
from varz.voice.collaborators import (
    CommandExecutor,
    EditorStateProvider,
    SpeechOutput,
    TranscriptSource,
)
from varz.voice.commands import EDITOR_COMMAND_MESSAGES, EDITOR_INTENTS, VARZ_COMMANDS
from varz.voice.session import ListeningSession

logger = get_logger(__name__)

TextListener = Callable[[str], None]
SnippetListener = Callable[[GeneratedSnippet], None]


@dataclass(frozen=True)
class AssistantResponse:
    """Outcome of one request: the intent, the final utterance and any snippet."""

    intent: CommandIntent
    utterance: str
    snippet: Optional[GeneratedSnippet] = None


class VoiceAssistant:
    """Turn transcripts into editor commands, explanations and code."""

    def __init__(
        self,
        settings: VarzSettings,
        *,
        speech: SpeechOutput,
        transcripts: TranscriptSource,
        executor: CommandExecutor,
        editor: Optional[EditorStateProvider] = None,
        classifier: Optional[CommandIntentClassifier] = None,
        analyzer: Optional[StructureAnalyzer] = None,
        composer: Optional[ExplanationComposer] = None,
        synthesizer: Optional[CodeSynthesizer] = None,
    ) -> None:
        self.settings = settings
        self._speech = speech
        self._transcripts = transcripts
        self._executor = executor
        self._editor = editor
        self._classifier = classifier or CommandIntentClassifier()
        self._analyzer = analyzer or StructureAnalyzer()
        self._composer = composer or ExplanationComposer()
        self._synthesizer = synthesizer or CodeSynthesizer()
        self.session = ListeningSession()
        self.visible = True
        self._speak_listeners: List[TextListener] = []
        self._speech_listeners: List[TextListener] = []
        self._snippet_listeners: List[SnippetListener] = []

    # -- events -----------------------------------------------------------------

    def on_did_speak(self, listener: TextListener) -> None:
        self._speak_listeners.append(listener)

    def on_did_recognize_speech(self, listener: TextListener) -> None:
        self._speech_listeners.append(listener)

    def on_did_generate_code(self, listener: SnippetListener) -> None:
        self._snippet_listeners.append(listener)

    @staticmethod
    def _fire(listeners: List[Callable], value: object) -> None:
        for listener in listeners:
            try:
                listener(value)
            except Exception as exc:  # pragma: no cover - listener side effects only
                logger.exception("assistant listener failed", exc_info=exc)

    # -- speech -----------------------------------------------------------------

    async def speak(self, text: str) -> None:
        """Send ``text`` to the speech output and notify listeners."""

        logger.info("speak", extra={"utterance": text})
        try:
            await self._speech.speak(text, self.settings.speech)
        except Exception as exc:
            logger.exception("speech output failed", exc_info=exc)
        self._fire(self._speak_listeners, text)

    # -- voice capture ----------------------------------------------------------

    async def start_voice_input(self) -> Optional[AssistantResponse]:
        """Run one capture session and dispatch the resulting transcript.

        Returns ``None`` when nothing was dispatched: capture unsupported, a
        session already active, a recognition error, or the session was
        stopped before a transcript arrived.
        """

        if not self._transcripts.is_supported():
            await self.speak(messages.UNSUPPORTED_CAPTURE)
            return None
        token = await self.session.begin()
        if token is None:
            await self.speak(messages.ALREADY_LISTENING)
            return None

        self.session.show_indicator(self.settings.capture.indicator_timeout)
        try:
            await self.speak(messages.LISTENING_PROMPT)
            try:
                transcript = await self._transcripts.capture()
            except SpeechCaptureError as exc:
                if not self.session.is_current(token):
                    return None
                logger.warning("speech capture failed", extra={"reason": exc.reason})
                await self.speak(messages.recognition_error(exc.reason))
                return None
            if not self.session.is_current(token):
                logger.info("discarding transcript from a stopped session")
                return None
        finally:
            self.session.clear_indicator(token)
            await self.session.end(token)
        return await self.handle_transcript(transcript)

    async def stop_voice_input(self) -> None:
        if not self.session.is_listening:
            return
        await self._transcripts.stop()
        self.session.clear_indicator()
        await self.session.end()
        await self.speak(messages.STOPPED_LISTENING)

    # -- dispatch ---------------------------------------------------------------

    async def handle_transcript(self, transcript: str) -> AssistantResponse:
        """Classify a transcript and carry out the requested action."""

        self._fire(self._speech_listeners, transcript)
        await self.speak(messages.heard(transcript))
        intent = self._classifier.classify(transcript)
        logger.info("transcript classified", extra={"intent": intent.value})

        with profile(f"assistant.dispatch.{intent.value}"):
            if intent in EDITOR_INTENTS:
                return await self.run_editor_command(intent)
            if intent is CommandIntent.READ:
                await self.speak(messages.READING_CODE)
                return await self.read_code_from_editor()
            if intent is CommandIntent.GENERATE:
                return await self._generate(transcript)
            await self.speak(messages.UNKNOWN_REQUEST)
            return AssistantResponse(CommandIntent.UNKNOWN, messages.UNKNOWN_REQUEST)

    async def execute_command(self, command: str) -> AssistantResponse:
        """Run a short editor command such as ``"save"`` typed or clicked directly."""

        intent = self._classifier.classify(command)
        if intent not in EDITOR_INTENTS:
            await self.speak(messages.COMMAND_NOT_RECOGNIZED)
            return AssistantResponse(CommandIntent.UNKNOWN, messages.COMMAND_NOT_RECOGNIZED)
        return await self.run_editor_command(intent)

    async def run_editor_command(self, intent: CommandIntent) -> AssistantResponse:
        text = EDITOR_COMMAND_MESSAGES[intent]
        await self.speak(text.progress)
        ok = True
        for command_id in self.settings.commands.for_intent(intent.value):
            try:
                ok = await self._executor.execute(command_id)
            except Exception as exc:
                logger.exception("editor command failed", extra={"command_id": command_id}, exc_info=exc)
                ok = False
            if not ok:
                break
        utterance = text.success if ok else text.failure
        await self.speak(utterance)
        return AssistantResponse(intent, utterance)

    async def read_code_from_editor(self) -> AssistantResponse:
        """Explain the selection, or the whole file, of the active editor."""

        if self._editor is None:
            return await self._say(CommandIntent.READ, messages.NO_ACTIVE_EDITOR)
        try:
            snapshot = await self._editor.snapshot()
        except Exception as exc:
            logger.exception("editor state unavailable", exc_info=exc)
            return await self._say(CommandIntent.READ, messages.ERROR_READING_CODE)
        if snapshot is None:
            return await self._say(CommandIntent.READ, messages.NO_ACTIVE_EDITOR)

        code = snapshot.selection if snapshot.selection and snapshot.selection.strip() else snapshot.text
        if not code.strip():
            return await self._say(CommandIntent.READ, messages.NO_CODE_FOUND)
        return await self.read_code(code, snapshot.language)

    async def read_code(self, code: str, language: Optional[str] = None) -> AssistantResponse:
        explanation = self.explain(code, language)
        return await self._say(CommandIntent.READ, explanation)

    def explain(self, code: str, language: Optional[str] = None) -> str:
        sample = CodeSample.from_text(code, language)
        facts = self._analyzer.analyze(sample)
        return self._composer.compose(facts, language)

    def generate_code(self, description: str) -> GeneratedSnippet:
        return self._synthesizer.synthesize(description)

    async def _generate(self, description: str) -> AssistantResponse:
        snippet = self.generate_code(description)
        logger.info("code generated", extra={"template_id": snippet.template_id})
        utterance = messages.generating(snippet.code)
        await self.speak(utterance)
        self._fire(self._snippet_listeners, snippet)
        return AssistantResponse(CommandIntent.GENERATE, utterance, snippet)

    async def _say(self, intent: CommandIntent, utterance: str) -> AssistantResponse:
        await self.speak(utterance)
        return AssistantResponse(intent, utterance)

    # -- named commands ---------------------------------------------------------

    async def toggle(self) -> None:
        self.visible = not self.visible
        await self.speak(messages.TOOLBAR_ACTIVATED if self.visible else messages.TOOLBAR_HIDDEN)

    async def invoke(self, command_id: str) -> Optional[AssistantResponse]:
        """Run one of :data:`~varz.voice.commands.VARZ_COMMANDS` by id."""

        if command_id == VARZ_COMMANDS["TOGGLE"]:
            await self.toggle()
            return None
        if command_id == VARZ_COMMANDS["VOICE_INPUT"]:
            await self.speak(messages.VOICE_INPUT_ACTIVATED)
            return await self.start_voice_input()
        if command_id == VARZ_COMMANDS["READ_CODE"]:
            return await self.read_code_from_editor()
        if command_id == VARZ_COMMANDS["RUN_CODE"]:
            return await self.run_editor_command(CommandIntent.RUN)
        if command_id == VARZ_COMMANDS["SAVE_FILE"]:
            return await self.run_editor_command(CommandIntent.SAVE)
        if command_id == VARZ_COMMANDS["CLEAR_EDITOR"]:
            return await self.run_editor_command(CommandIntent.CLEAR)
        raise VarzError(f"Unknown command {command_id}")


__all__ = ["AssistantResponse", "VoiceAssistant"]
