"""Tests for CLI utility functions."""

from argparse import Namespace
from pathlib import Path

import pytest

from crossdeps.cli.utils import (
    ProjectConfig,
    load_command_context,
    load_project_config,
    load_yaml_config,
    print_error,
    print_warning,
    resolve_project_root,
    select_targets,
    split_list_arguments,
)
from crossdeps.core.exceptions import ConfigError, RegistryError


class TestLoadYAMLConfig:
    def test_load_existing_config(self, tmp_path):
        """Test loading existing config file."""
        config_file = tmp_path / "test.yaml"
        config_file.write_text("key: value\nlist: [1, 2, 3]")

        config = load_yaml_config(config_file)
        assert config["key"] == "value"
        assert config["list"] == [1, 2, 3]

    def test_load_nonexistent_optional(self, tmp_path):
        """Test loading non-existent optional config."""
        config = load_yaml_config(tmp_path / "missing.yaml", required=False)
        assert config == {}

    def test_load_nonexistent_required(self, tmp_path):
        """Test loading non-existent required config raises error."""
        with pytest.raises(FileNotFoundError):
            load_yaml_config(tmp_path / "missing.yaml", required=True)

    def test_load_invalid_yaml(self, tmp_path):
        """Test invalid YAML raises error."""
        config_file = tmp_path / "invalid.yaml"
        config_file.write_text("invalid: yaml: : :")

        with pytest.raises(ValueError):
            load_yaml_config(config_file)

    def test_load_empty_yaml(self, tmp_path):
        """Test loading empty YAML file returns empty dict."""
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")

        assert load_yaml_config(config_file) == {}


class TestLoadProjectConfig:
    def test_no_file(self, tmp_path):
        """Test defaults when crossdeps.yaml is absent."""
        config = load_project_config(None, tmp_path)

        assert config == ProjectConfig()

    def test_single_target(self, tmp_path):
        """Test the single 'target' key."""
        (tmp_path / "crossdeps.yaml").write_text(
            "target: armv7-linux-gnueabihf\ndependencies: [ssl, dbus]\n"
        )

        config = load_project_config(None, tmp_path)

        assert config.targets == ["armv7-linux-gnueabihf"]
        assert config.dependencies == ["ssl", "dbus"]
        assert config.builtin_registry is True
        assert config.path == tmp_path.resolve() / "crossdeps.yaml"

    def test_registry_paths_relative_to_config(self, tmp_path):
        """Test registry paths are taken relative to the config file."""
        subdir = tmp_path / "conf"
        subdir.mkdir()
        config_file = subdir / "project.yaml"
        config_file.write_text("registries: [extra.yaml, /opt/reg.yaml]\n")

        config = load_project_config(config_file)

        assert config.registries == [subdir / "extra.yaml", Path("/opt/reg.yaml")]

    def test_explicit_missing_file(self, tmp_path):
        """Test that an explicit --config file must exist."""
        with pytest.raises(ConfigError, match="not found"):
            load_project_config(tmp_path / "missing.yaml")

    @pytest.mark.parametrize(
        "content, message",
        [
            ("- a\n- b\n", "mapping"),
            ("target: a-b-c\ntargets: [d-e-f]\n", "not both"),
            ("targets: a-b-c\n", "targets"),
            ("dependencies: ssl\n", "dependencies"),
            ("registries: [1]\n", "registries"),
            ("builtin_registry: maybe\n", "builtin_registry"),
            ("target: [\n", "Invalid YAML"),
        ],
    )
    def test_invalid(self, tmp_path, content, message):
        """Test rejection of malformed configuration values."""
        config_file = tmp_path / "crossdeps.yaml"
        config_file.write_text(content)

        with pytest.raises(ConfigError, match=message):
            load_project_config(config_file)


class TestArgumentHelpers:
    def test_split_list_arguments(self):
        """Test flattening of comma-separated values."""
        assert split_list_arguments(["ssl,dbus", "audio", " ,ssl"]) == [
            "ssl",
            "dbus",
            "audio",
            "ssl",
        ]

    def test_split_none(self):
        """Test splitting when the option was not given."""
        assert split_list_arguments(None) == []

    def test_select_cli_first(self, monkeypatch):
        """Test that CLI targets take precedence."""
        monkeypatch.setenv("CROSSDEPS_TARGET", "env-linux-gnu")
        config = ProjectConfig(targets=["cfg-linux-gnu"])

        assert select_targets(["cli-linux-gnu"], config) == ["cli-linux-gnu"]

    def test_select_environment_second(self, monkeypatch):
        """Test that CROSSDEPS_TARGET beats the config file."""
        monkeypatch.setenv("CROSSDEPS_TARGET", "a-linux-gnu,b-linux-gnu")
        config = ProjectConfig(targets=["cfg-linux-gnu"])

        assert select_targets(None, config) == ["a-linux-gnu", "b-linux-gnu"]

    def test_select_config_last(self, monkeypatch):
        """Test fallback to configured targets."""
        monkeypatch.delenv("CROSSDEPS_TARGET", raising=False)
        config = ProjectConfig(targets=["cfg-linux-gnu"])

        assert select_targets(None, config) == ["cfg-linux-gnu"]

    def test_select_nothing(self, monkeypatch):
        """Test that no source yields no targets."""
        monkeypatch.delenv("CROSSDEPS_TARGET", raising=False)

        assert select_targets([], ProjectConfig()) == []


class TestLoadCommandContext:
    def test_builtin_by_default(self, tmp_path):
        """Test that the built-in registry is loaded by default."""
        args = Namespace(config=None, project_root=tmp_path, registry=None, no_builtin=False)

        _, registry = load_command_context(args)

        assert registry.get_target("armv7-linux-gnueabihf") is not None

    def test_registry_option_layers(self, tmp_path, registry_file):
        """Test that --registry files are layered over the built-in one."""
        args = Namespace(
            config=None, project_root=tmp_path, registry=[registry_file], no_builtin=True
        )

        _, registry = load_command_context(args)

        assert len(registry.targets) == 2

    def test_invalid_registry(self, tmp_path):
        """Test that a broken registry file raises RegistryError."""
        bad = tmp_path / "bad.yaml"
        bad.write_text("version: 9\n")
        args = Namespace(config=None, project_root=tmp_path, registry=[bad], no_builtin=True)

        with pytest.raises(RegistryError):
            load_command_context(args)


class TestOutput:
    def test_print_error(self, capsys):
        """Test the error message format."""
        print_error("Something failed", "more details")

        captured = capsys.readouterr()
        assert "ERROR: Something failed" in captured.err
        assert "more details" in captured.err

    def test_print_warning(self, capsys):
        """Test the warning message format."""
        print_warning("careful")

        assert "WARNING: careful" in capsys.readouterr().err


class TestPaths:
    def test_resolve_project_root_default(self, tmp_path, monkeypatch):
        """Test that the project root defaults to the current directory."""
        monkeypatch.chdir(tmp_path)

        assert resolve_project_root() == tmp_path.resolve()

    def test_resolve_project_root_explicit(self, tmp_path):
        """Test that an explicit project root is resolved."""
        assert resolve_project_root(tmp_path) == tmp_path.resolve()
