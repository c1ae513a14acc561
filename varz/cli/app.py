"""Typer-based CLI wiring."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import typer

from varz.core.config import VarzConfigManager, VarzSettings
from varz.core.ui import ConsoleUI
from varz.nlu.explainer import ExplanationComposer
from varz.nlu.intents import CommandIntentClassifier
from varz.nlu.structure import CodeSample, StructuralFacts, StructureAnalyzer
from varz.nlu.synthesizer import CodeSynthesizer
from varz.utils.errors import VarzError
from varz.utils.logging import get_logger
from varz.voice.assistant import AssistantResponse, VoiceAssistant
from varz.voice.collaborators import (
    ConsoleTranscriptSource,
    FileEditorState,
    RecordingCommandExecutor,
    SpeechOutput,
    StaticTranscriptSource,
    TranscriptSource,
    language_for_path,
)
from varz.voice.commands import VARZ_COMMANDS

logger = get_logger(__name__)

app = typer.Typer(help="VARZ voice coding assistant")
config_app = typer.Typer(help="Inspect configuration")
app.add_typer(config_app, name="config")


@dataclass
class RuntimeContext:
    settings: VarzSettings
    config_manager: VarzConfigManager
    ui: ConsoleUI
    speech: SpeechOutput
    executor: RecordingCommandExecutor

    def assistant(
        self,
        *,
        file: Optional[Path] = None,
        lines: Optional[Tuple[int, int]] = None,
        language: Optional[str] = None,
        transcripts: Optional[TranscriptSource] = None,
    ) -> VoiceAssistant:
        editor = FileEditorState(file, selection=lines, language=language) if file else None
        return VoiceAssistant(
            self.settings,
            speech=self.speech,
            transcripts=transcripts or StaticTranscriptSource([]),
            executor=self.executor,
            editor=editor,
        )


runtime: Optional[RuntimeContext] = None


def set_runtime(value: RuntimeContext) -> None:
    global runtime
    runtime = value


def _require_runtime() -> RuntimeContext:
    if runtime is None:  # pragma: no cover - runtime is always set during CLI usage
        raise RuntimeError("Runtime not initialised")
    return runtime


def _parse_lines(value: Optional[str]) -> Optional[Tuple[int, int]]:
    if not value:
        return None
    start, _, end = value.partition("-")
    try:
        first = int(start)
        last = int(end) if end else first
    except ValueError as exc:
        raise typer.BadParameter("Lines must look like 3 or 3-8") from exc
    if first < 1 or last < first:
        raise typer.BadParameter("Lines must be a positive, increasing range")
    return first, last


def _signature(facts: StructuralFacts) -> str:
    if not facts.function_name:
        return ""
    text = f"{facts.function_name}({', '.join(facts.function_parameters)})"
    return f"{text} -> {facts.function_return_type}" if facts.function_return_type else text


def _facts_rows(facts: StructuralFacts) -> List[List[str]]:
    return [
        ["function", str(facts.has_function), _signature(facts)],
        ["loop", str(facts.has_loop), f"{facts.loop_kind} {facts.loop_count}".strip()],
        ["output", str(facts.has_output), ", ".join(facts.output_messages)],
        ["variable", str(facts.has_variable), ""],
        ["conditional", str(facts.has_conditional), ""],
        ["return", str(facts.has_return), ""],
        ["import", str(facts.has_import), ""],
    ]


def _report(ctx: RuntimeContext, response: Optional[AssistantResponse]) -> None:
    if response is None:
        return
    if response.snippet is not None:
        ctx.ui.code(response.snippet.code, title=response.snippet.template_id)
    logger.debug("request complete", extra={"intent": response.intent.value})


@app.command()
def explain(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Source file to explain"),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Override the language id"),
    facts: bool = typer.Option(False, "--facts", help="Also print the detected structure"),
) -> None:
    """Describe what a source file does in one sentence."""

    ctx = _require_runtime()
    language = language or language_for_path(file)
    try:
        text = file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        ctx.ui.error(f"Cannot read {file}: {exc}")
        raise typer.Exit(code=1) from exc
    sample = CodeSample.from_text(text, language)
    result = StructureAnalyzer().analyze(sample)
    ctx.ui.info(ExplanationComposer().compose(result, language))
    if facts and isinstance(result, StructuralFacts):
        ctx.ui.console.print(ctx.ui.table("Structure", ["Fact", "Present", "Detail"], _facts_rows(result)))


@app.command()
def intent(transcript: str) -> None:
    """Show which intent a transcript maps to."""

    ctx = _require_runtime()
    ctx.ui.info(CommandIntentClassifier().classify(transcript).value)


@app.command()
def generate(description: str) -> None:
    """Generate a code snippet from a description."""

    ctx = _require_runtime()
    snippet = CodeSynthesizer().synthesize(description)
    ctx.ui.code(snippet.code, title=snippet.template_id)


@app.command()
def say(
    transcript: str,
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="File acting as the active editor"),
    lines: Optional[str] = typer.Option(None, "--lines", help="Selected line range, e.g. 3-8"),
) -> None:
    """Process one transcript as if it had been spoken."""

    ctx = _require_runtime()
    assistant = ctx.assistant(file=file, lines=_parse_lines(lines))
    _report(ctx, asyncio.run(assistant.handle_transcript(transcript)))


@app.command()
def listen(
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="File acting as the active editor"),
) -> None:
    """Run a single capture session with typed input."""

    ctx = _require_runtime()
    assistant = ctx.assistant(file=file, transcripts=ConsoleTranscriptSource(ctx.ui.console))
    _report(ctx, asyncio.run(assistant.invoke(VARZ_COMMANDS["VOICE_INPUT"])))


@app.command()
def invoke(
    command_id: str = typer.Argument(..., help="One of: " + ", ".join(VARZ_COMMANDS.values())),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="File acting as the active editor"),
) -> None:
    """Run a named assistant command."""

    ctx = _require_runtime()
    assistant = ctx.assistant(file=file, transcripts=ConsoleTranscriptSource(ctx.ui.console))
    try:
        _report(ctx, asyncio.run(assistant.invoke(command_id)))
    except VarzError as exc:
        ctx.ui.error(str(exc))
        raise typer.Exit(code=1) from exc


@app.command()
def shell(
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="File acting as the active editor"),
) -> None:
    """Type utterances in a loop until 'exit'."""

    ctx = _require_runtime()
    assistant = ctx.assistant(file=file)
    ctx.ui.print_header("VARZ Shell (type 'exit' to quit)")
    while True:
        try:
            transcript = ctx.ui.console.input("> ")
        except EOFError:
            break
        if transcript.strip().lower() in {"exit", "quit"}:
            break
        if not transcript.strip():
            continue
        _report(ctx, asyncio.run(assistant.handle_transcript(transcript)))


@config_app.command("show")
def config_show() -> None:
    ctx = _require_runtime()
    ctx.ui.console.print(ctx.settings.model_dump(mode="json"))


def main() -> None:
    """Console script entry point."""

    if runtime is None:
        # Import lazily to avoid circular imports when bootstrapping the CLI.
        from varz.main import main as bootstrap_main

        bootstrap_main()
    else:
        app()


__all__ = ["app", "set_runtime", "RuntimeContext", "main"]
