"""Configuration management for VARZ.

Operators tune the speech voice, the capture indicator and the editor command
ids each intent maps to through a YAML (or TOML) file. The file is validated
with Pydantic models so the rest of the assistant can rely on typed settings.
"""
from __future__ import annotations

import asyncio
import os
import threading
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from varz.utils.errors import ConfigurationError
from varz.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path("config/varz.yml")

DEFAULT_PREFERRED_VOICES = [
    "Microsoft Zira Desktop - English (United States)",
    "Microsoft David Desktop - English (United States)",
    "Google US English",
    "Alex",
    "Samantha",
    "Victoria",
]


class SpeechSettings(BaseModel):
    """Voice used for every spoken utterance."""

    rate: float = Field(default=0.85, gt=0.0, le=10.0)
    volume: float = Field(default=0.9, ge=0.0, le=1.0)
    pitch: float = Field(default=1.0, ge=0.0, le=2.0)
    locale: str = "en-US"
    preferred_voices: List[str] = Field(default_factory=lambda: list(DEFAULT_PREFERRED_VOICES))
    engine: str = Field(default="console", description="console or espeak")

    @field_validator("engine")
    @classmethod
    def validate_engine(cls, value: str) -> str:
        if value not in {"console", "espeak"}:
            raise ValueError("Speech engine must be 'console' or 'espeak'")
        return value


class CaptureSettings(BaseModel):
    """Voice capture session options."""

    locale: str = "en-US"
    indicator_timeout: float = Field(default=10.0, gt=0.0, description="Seconds")


class CommandSettings(BaseModel):
    """Editor command ids executed for each command intent, in order."""

    run: List[str] = Field(default_factory=lambda: ["workbench.action.debug.start"])
    save: List[str] = Field(default_factory=lambda: ["workbench.action.files.save"])
    clear: List[str] = Field(
        default_factory=lambda: ["editor.action.selectAll", "editor.action.clipboardCutAction"]
    )

    def for_intent(self, intent: str) -> List[str]:
        return list(getattr(self, intent, []))


class UISettings(BaseModel):
    """Settings for the terminal front-end."""

    theme: str = Field(default="default", description="Pygments theme for code panels")


class VarzSettings(BaseModel):
    """Root configuration schema."""

    speech: SpeechSettings = Field(default_factory=SpeechSettings)
    capture: CaptureSettings = Field(default_factory=CaptureSettings)
    commands: CommandSettings = Field(default_factory=CommandSettings)
    ui: UISettings = Field(default_factory=UISettings)


class VarzConfigManager:
    """Load and monitor the assistant configuration file.

    When no path is given the manager reads ``$VARZ_CONFIG`` or
    ``config/varz.yml`` and falls back to built-in defaults if that file does
    not exist. An explicitly requested file must exist. Live reload polls the
    file modification time from a daemon thread.
    """

    def __init__(self, config_path: Optional[Path] = None, *, poll_interval: float = 2.0) -> None:
        env_path = os.environ.get("VARZ_CONFIG")
        self._explicit = config_path is not None or env_path is not None
        self.config_path = config_path or Path(env_path or DEFAULT_CONFIG_PATH)
        self.poll_interval = poll_interval
        self._settings: Optional[VarzSettings] = None
        self._callbacks: List[Callable[[VarzSettings], Awaitable[None]]] = []
        self._stop_event = threading.Event()
        self._watch_task: Optional[threading.Thread] = None
        self._lock = asyncio.Lock()

    async def load(self) -> VarzSettings:
        """Load configuration from disk and validate it."""

        async with self._lock:
            if not self.config_path.exists() and not self._explicit:
                logger.info("no configuration file, using defaults", extra={"path": str(self.config_path)})
                self._settings = VarzSettings()
                return self._settings
            try:
                logger.debug("loading configuration", extra={"path": str(self.config_path)})
                data = self._read_file(self.config_path)
                settings = VarzSettings(**data)
            except ConfigurationError:
                raise
            except Exception as exc:
                raise ConfigurationError(str(exc)) from exc
            self._settings = settings
            return settings

    async def reload(self) -> VarzSettings:
        """Reload configuration explicitly and notify callbacks."""

        settings = await self.load()
        await self._notify(settings)
        return settings

    def start_watching(self) -> None:
        """Begin polling the configuration file for changes."""

        if self._watch_task and self._watch_task.is_alive():  # pragma: no cover - simple guard
            return

        def _watch() -> None:
            last_mtime = 0.0
            while not self._stop_event.is_set():
                try:
                    mtime = self.config_path.stat().st_mtime
                    if mtime != last_mtime:
                        last_mtime = mtime
                        asyncio.run(self.reload())
                except FileNotFoundError:
                    logger.debug("configuration file missing", extra={"path": str(self.config_path)})
                except ConfigurationError as exc:
                    logger.warning("configuration reload failed", extra={"error": str(exc)})
                self._stop_event.wait(self.poll_interval)

        self._stop_event.clear()
        self._watch_task = threading.Thread(target=_watch, name="varz-config-watcher", daemon=True)
        self._watch_task.start()

    def stop_watching(self) -> None:
        """Stop polling the configuration file."""

        self._stop_event.set()
        if self._watch_task and self._watch_task.is_alive():  # pragma: no cover - thread cleanup
            self._watch_task.join(timeout=1)

    def register_callback(self, callback: Callable[[VarzSettings], Awaitable[None]]) -> None:
        """Register a coroutine callback executed after reloads."""

        self._callbacks.append(callback)

    async def get_settings(self) -> VarzSettings:
        """Return the last loaded settings, loading them if necessary."""

        if self._settings is None:
            return await self.load()
        return self._settings

    async def _notify(self, settings: VarzSettings) -> None:
        for callback in self._callbacks:
            try:
                await callback(settings)
            except Exception as exc:  # pragma: no cover - logging side effects only
                logger.exception("configuration callback failed", exc_info=exc)

    @staticmethod
    def _read_file(path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise ConfigurationError(f"Configuration file {path} does not exist")
        if path.suffix in {".yml", ".yaml"}:
            with path.open("r", encoding="utf-8") as handle:
                return yaml.safe_load(handle) or {}
        if path.suffix == ".toml":
            import tomllib

            with path.open("rb") as handle:
                return tomllib.load(handle)
        raise ConfigurationError(f"Unsupported configuration format: {path.suffix}")


__all__ = [
    "VarzConfigManager",
    "VarzSettings",
    "SpeechSettings",
    "CaptureSettings",
    "CommandSettings",
    "UISettings",
    "DEFAULT_PREFERRED_VOICES",
]
