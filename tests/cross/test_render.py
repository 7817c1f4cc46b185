"""
Unit tests for rendering resolved environments.
"""

import json

import pytest

from crossdeps.cross.render import (
    format_json,
    format_shell,
    format_text,
    render,
)
from crossdeps.cross.resolver import ResolvedEnvironment, resolve
from crossdeps.cross.targets import TargetTriple


@pytest.fixture
def resolved(armv7_registry):
    return resolve("armv7-linux-gnueabihf", ["ssl", "dbus"], armv7_registry)


@pytest.fixture
def empty_result():
    return ResolvedEnvironment(
        target=TargetTriple("aarch64", "linux", "gnu"),
        multiarch="arm64",
        packages=(),
        environment={},
    )


class TestFormatText:
    def test_two_sections(self, resolved):
        """Test that text output has install and environment sections."""
        output = format_text([resolved])

        assert output.splitlines() == [
            "Target: armv7-unknown-linux-gnueabihf (multiarch: armhf)",
            "",
            "Install packages:",
            "  libdbus-1-dev:armhf",
            "  libssl-dev:armhf",
            "",
            "Environment:",
            "  PKG_CONFIG_LIBDIR_armv7_unknown_linux_gnueabihf="
            "/usr/lib/arm-linux-gnueabihf/pkgconfig",
        ]

    def test_empty_sections(self, empty_result):
        """Test placeholders for empty sections."""
        output = format_text([empty_result])

        assert output.count("(none)") == 2

    def test_multiple_targets_separated(self, resolved, empty_result):
        """Test that target blocks are separated by a blank line."""
        output = format_text([resolved, empty_result])

        assert "\n\nTarget: aarch64-unknown-linux-gnu" in output


class TestFormatJson:
    def test_structure(self, resolved):
        """Test the json document layout."""
        data = json.loads(format_json([resolved]))

        assert data == {
            "targets": [
                {
                    "target": "armv7-unknown-linux-gnueabihf",
                    "multiarch": "armhf",
                    "packages": ["libdbus-1-dev:armhf", "libssl-dev:armhf"],
                    "environment": {
                        "PKG_CONFIG_LIBDIR_armv7_unknown_linux_gnueabihf": (
                            "/usr/lib/arm-linux-gnueabihf/pkgconfig"
                        )
                    },
                }
            ]
        }


class TestFormatShell:
    def test_install_and_export(self, resolved):
        """Test the shell script commands."""
        lines = format_shell([resolved]).splitlines()

        assert lines == [
            "# armv7-unknown-linux-gnueabihf",
            "dpkg --add-architecture armhf",
            "apt-get update",
            "apt-get install --assume-yes libdbus-1-dev:armhf libssl-dev:armhf",
            "export PKG_CONFIG_LIBDIR_armv7_unknown_linux_gnueabihf="
            "/usr/lib/arm-linux-gnueabihf/pkgconfig",
        ]

    def test_no_packages_skips_install(self, empty_result):
        """Test that no install command is emitted without packages."""
        output = format_shell([empty_result])

        assert "apt-get" not in output
        assert "dpkg --add-architecture arm64" in output

    def test_values_quoted(self, empty_result):
        """Test that shell values are quoted."""
        result = ResolvedEnvironment(
            target=empty_result.target,
            multiarch="arm64",
            packages=(),
            environment={"CFLAGS": "-O2 -march=armv8-a"},
        )

        assert "export CFLAGS='-O2 -march=armv8-a'" in format_shell([result])

    def test_invalid_name_rejected(self, empty_result):
        """Test that unexportable names are refused."""
        result = ResolvedEnvironment(
            target=empty_result.target,
            multiarch="arm64",
            packages=(),
            environment={"BAD NAME; rm -rf /": "x"},
        )

        with pytest.raises(ValueError):
            format_shell([result])


class TestRender:
    @pytest.mark.parametrize("fmt", ["text", "json", "shell"])
    def test_known_formats(self, resolved, fmt):
        """Test rendering in every registered format."""
        assert "armv7-unknown-linux-gnueabihf" in render([resolved], fmt)

    def test_default_is_text(self, resolved):
        """Test that text is the default format."""
        assert render([resolved]) == format_text([resolved])

    def test_unknown_format(self, resolved):
        """Test error for an unknown format."""
        with pytest.raises(ValueError, match="Unknown output format"):
            render([resolved], "xml")
