import asyncio
from pathlib import Path
from typing import List

import pytest

from varz.core.config import VarzConfigManager, VarzSettings
from varz.utils.errors import ConfigurationError


def test_load_yaml_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "varz.yml"
    config_path.write_text(
        "speech:\n  rate: 1.2\n  engine: espeak\ncommands:\n  run:\n    - task.run\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("VARZ_CONFIG", str(config_path))
    settings = asyncio.run(VarzConfigManager().load())
    assert settings.speech.rate == pytest.approx(1.2)
    assert settings.speech.engine == "espeak"
    assert settings.commands.for_intent("run") == ["task.run"]
    assert settings.commands.for_intent("save") == ["workbench.action.files.save"]


def test_defaults_without_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("VARZ_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    settings = asyncio.run(VarzConfigManager().load())
    assert settings.speech.volume == pytest.approx(0.9)
    assert settings.speech.locale == "en-US"
    assert settings.capture.indicator_timeout == pytest.approx(10.0)
    assert settings.commands.clear == ["editor.action.selectAll", "editor.action.clipboardCutAction"]


def test_explicit_missing_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        asyncio.run(VarzConfigManager(tmp_path / "absent.yml").load())


def test_invalid_values_are_rejected(tmp_path: Path) -> None:
    config_path = tmp_path / "varz.yml"
    config_path.write_text("speech:\n  engine: festival\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        asyncio.run(VarzConfigManager(config_path).load())


def test_toml_configuration(tmp_path: Path) -> None:
    config_path = tmp_path / "varz.toml"
    config_path.write_text('[speech]\nlocale = "en-GB"\n\n[ui]\ntheme = "dracula"\n', encoding="utf-8")
    settings = asyncio.run(VarzConfigManager(config_path).load())
    assert settings.speech.locale == "en-GB"
    assert settings.ui.theme == "dracula"


def test_reload_notifies_callbacks(tmp_path: Path) -> None:
    config_path = tmp_path / "varz.yml"
    config_path.write_text("capture:\n  indicator_timeout: 5\n", encoding="utf-8")
    manager = VarzConfigManager(config_path)
    seen: List[VarzSettings] = []

    async def _record(settings: VarzSettings) -> None:
        seen.append(settings)

    manager.register_callback(_record)
    asyncio.run(manager.reload())
    assert seen[0].capture.indicator_timeout == pytest.approx(5.0)
