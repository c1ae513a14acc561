"""Main entrypoint initialising the VARZ runtime."""
from __future__ import annotations

import asyncio
from typing import Optional

from rich.console import Console

from varz.cli.app import RuntimeContext, app, set_runtime
from varz.core.config import VarzConfigManager, VarzSettings
from varz.core.ui import ConsoleUI
from varz.utils.errors import ConfigurationError
from varz.utils.logging import configure_logging, get_logger
from varz.voice.collaborators import RecordingCommandExecutor, SpeechOutput
from varz.voice.speech import ConsoleSpeechOutput, EspeakSpeechOutput

logger = get_logger(__name__)


def build_speech_output(settings: VarzSettings, ui: ConsoleUI) -> SpeechOutput:
    """Return the configured speech engine, falling back to the console."""

    if settings.speech.engine == "espeak":
        espeak = EspeakSpeechOutput()
        if espeak.is_available():
            return espeak
        ui.warn("espeak-ng not found; speaking to the console instead")
        logger.warning("espeak-ng unavailable, using console speech output")
    return ConsoleSpeechOutput(ui.console)


def build_runtime(
    settings: VarzSettings,
    config_manager: Optional[VarzConfigManager] = None,
    *,
    console: Optional[Console] = None,
) -> RuntimeContext:
    ui = ConsoleUI(theme=settings.ui.theme, console=console)
    return RuntimeContext(
        settings=settings,
        config_manager=config_manager or VarzConfigManager(),
        ui=ui,
        speech=build_speech_output(settings, ui),
        executor=RecordingCommandExecutor(),
    )


async def _initialise_runtime() -> None:
    configure_logging()
    config_manager = VarzConfigManager()
    settings = await config_manager.load()
    context = build_runtime(settings, config_manager)

    async def _apply(updated: VarzSettings) -> None:
        context.settings = updated

    config_manager.register_callback(_apply)
    set_runtime(context)
    config_manager.start_watching()
    logger.info("Runtime initialised")


def main() -> None:
    try:
        asyncio.run(_initialise_runtime())
    except ConfigurationError as exc:
        ConsoleUI().error(f"Invalid configuration: {exc}")
        raise SystemExit(2) from exc
    app()


if __name__ == "__main__":  # pragma: no cover - CLI entry
    main()
