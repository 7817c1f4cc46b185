"""
Pytest configuration and shared fixtures for crossdeps tests.
"""

import textwrap
from pathlib import Path

import pytest

from crossdeps.config.registry import Registry, load_registry, parse_registry


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as fast unit tests")


ARMV7_REGISTRY = {
    "version": 1,
    "targets": [
        {
            "triple": "armv7-unknown-linux-gnueabihf",
            "multiarch": "armhf",
            "gnu_triplet": "arm-linux-gnueabihf",
            "libraries": {
                "ssl": "libssl-dev",
                "audio": ["libasound2-dev"],
                "dbus": "libdbus-1-dev",
            },
            "environment": [
                {
                    "name": "PKG_CONFIG_LIBDIR_armv7_unknown_linux_gnueabihf",
                    "value": "/usr/lib/arm-linux-gnueabihf/pkgconfig",
                }
            ],
        }
    ],
}

REGISTRY_YAML = textwrap.dedent(
    """\
    version: 1
    targets:
      - triple: armv7-unknown-linux-gnueabihf
        multiarch: armhf
        gnu_triplet: arm-linux-gnueabihf
        libraries:
          ssl: libssl-dev
          audio: [libasound2-dev]
          dbus: libdbus-1-dev
        environment:
          - name: "PKG_CONFIG_LIBDIR_{env_key}"
            value: "/usr/lib/{gnu_triplet}/pkgconfig"
      - triple: aarch64-unknown-linux-gnu
        multiarch: arm64
        gnu_triplet: aarch64-linux-gnu
        libraries:
          ssl: libssl-dev
          tls: [libssl-dev, ca-certificates:all]
        environment:
          - name: "PKG_CONFIG_LIBDIR_{env_key}"
            value: "/usr/lib/{gnu_triplet}/pkgconfig"
    """
)


@pytest.fixture
def armv7_registry() -> Registry:
    """Registry with a single armv7 hard-float target."""
    return parse_registry(ARMV7_REGISTRY, source="armv7")


@pytest.fixture
def registry_file(tmp_path) -> Path:
    """Two-target registry written to a YAML file."""
    path = tmp_path / "registry.yaml"
    path.write_text(REGISTRY_YAML)
    return path


@pytest.fixture
def builtin_registry() -> Registry:
    """Registry shipped with the package."""
    return load_registry()
