"""Tests for EaselSettings: unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from easel.config.settings import EaselSettings


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EASEL_CONFIG", raising=False)


class TestEaselSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = EaselSettings.from_cli(project_root=tmp_path)
        assert settings.project_root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.verbose is False
        assert settings.plugins.entry_points is True
        assert settings.plugins.disabled == []
        assert settings.configuration == {}

    def test_frozen(self, tmp_path: Path) -> None:
        settings = EaselSettings.from_cli(project_root=tmp_path)
        with pytest.raises(Exception):
            settings.verbose = True  # type: ignore[misc]

    def test_local_plugin_dir_is_relative_to_root(self, tmp_path: Path) -> None:
        settings = EaselSettings.from_cli(project_root=tmp_path)
        assert settings.local_plugin_dir == tmp_path / ".easel" / "plugins"


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "easel.toml").write_text(
            '[plugins]\ndisabled = ["noisy"]\n\n[configuration]\n"editor.theme" = "dark"\n'
        )
        settings = EaselSettings.from_cli(project_root=tmp_path)
        assert settings.plugins.disabled == ["noisy"]
        assert settings.plugins.entry_points is True  # default preserved
        assert settings.configuration == {"editor.theme": "dark"}
        assert settings.config_path == tmp_path / "easel.toml"

    def test_empty_toml_uses_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "easel.toml").write_text("")
        settings = EaselSettings.from_cli(project_root=tmp_path)
        assert settings.plugins.local_dir == ".easel/plugins"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text("[plugins]\nentry_points = false\n")
        settings = EaselSettings.from_cli(config_path=str(custom), project_root=tmp_path)
        assert settings.plugins.entry_points is False
        assert settings.config_path == custom

    def test_invalid_toml_raises_click_exception(self, tmp_path: Path) -> None:
        (tmp_path / "easel.toml").write_text("[plugins\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            EaselSettings.from_cli(project_root=tmp_path)


class TestCliFlags:
    def test_cli_flags_override(self, tmp_path: Path) -> None:
        settings = EaselSettings.from_cli(
            project_root=tmp_path,
            json_output=True,
            verbose=True,
            log_json=True,
        )
        assert settings.json_output is True
        assert settings.verbose is True
        assert settings.log_json is True

    def test_cli_flags_override_toml(self, tmp_path: Path) -> None:
        (tmp_path / "easel.toml").write_text("verbose = true\n")
        settings = EaselSettings.from_cli(project_root=tmp_path, verbose=False)
        assert settings.verbose is False


class TestProjectRootResolution:
    def test_root_from_toml_location(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """When no explicit root, use the directory holding easel.toml."""
        subdir = tmp_path / "sub" / "deep"
        subdir.mkdir(parents=True)
        (tmp_path / "easel.toml").write_text("")
        monkeypatch.chdir(subdir)

        settings = EaselSettings.from_cli()

        assert settings.project_root == tmp_path.resolve()

    def test_root_from_dot_easel_config(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / ".easel").mkdir()
        (tmp_path / ".easel" / "config.toml").write_text("")
        monkeypatch.chdir(tmp_path)

        settings = EaselSettings.from_cli()

        assert settings.project_root == tmp_path.resolve()


class TestEnvVars:
    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EASEL_VERBOSE", "true")
        settings = EaselSettings.from_cli(project_root=tmp_path)
        assert settings.verbose is True

    def test_nested_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EASEL_PLUGINS__ENTRY_POINTS", "false")

        settings = EaselSettings.from_cli(project_root=tmp_path)

        assert settings.plugins.entry_points is False

    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "easel.toml").write_text("log_json = false\n")
        monkeypatch.setenv("EASEL_LOG_JSON", "true")
        settings = EaselSettings.from_cli(project_root=tmp_path)
        assert settings.log_json is True
