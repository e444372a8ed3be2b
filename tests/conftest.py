"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path

import pytest

from envhub.adapters.mock import MockCommandAdapter
from envhub.core.models.profile import Overlay, PackageSpec
from envhub.core.services.registry import ProfileRegistry

STORE = "/store"


@pytest.fixture(autouse=True)
def _no_ambient_override(monkeypatch):
    """Keep the developer's own ENVHUB_* variables out of the tests."""
    for var in ("ENVHUB_PROFILE", "ENVHUB_LOG_LEVEL", "ENVHUB_LOG_FILE", "ENVHUB_LOG_FILE_LEVEL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def registry() -> ProfileRegistry:
    """A small catalog: an interpreter, two tools and one GPU library."""
    reg = ProfileRegistry()
    reg.add_package(PackageSpec(name="python313", version="3.13", env={"PYTHONHOME": "${prefix}"}))
    reg.add_package(PackageSpec(name="ruff"))
    reg.add_package(PackageSpec(name="black"))
    reg.add_package(PackageSpec(name="clang", version="19"))
    reg.add_package(
        PackageSpec(name="cudatoolkit", version="12.4", unfree=True, env={"CUDA_PATH": "${prefix}"})
    )
    reg.add_group("py-tools", ["ruff", "black"])
    reg.add_overlay(
        Overlay(
            name="optimized",
            target="python313",
            options={"enableOptimizations": True, "enableLTO": True},
        )
    )
    reg.add_overlay(Overlay(name="clang-build", target="python313", options={"stdenv": "clang"}))
    reg.add_overlay(Overlay(name="gcc-build", target="python313", options={"stdenv": "gcc"}))
    reg.add_overlay(
        Overlay(
            name="cuda-support",
            target="python313",
            flag_options={"requires_gpu": {"cudaSupport": True}},
        )
    )
    return reg


@pytest.fixture
def mock_runner() -> MockCommandAdapter:
    return MockCommandAdapter(
        outputs={
            "python": "Python 3.13.1",
            "clang": "clang version 19.1.0\nTarget: x86_64-unknown-linux-gnu",
        }
    )


@pytest.fixture
def config_yml(tmp_path: Path) -> Path:
    """A valid envhub.yml in a temp directory."""
    content = textwrap.dedent("""\
        settings:
          default: python
          store_root: /store

        packages:
          python313:
            version: "3.13"
          ruff: {}
          black:
          clang:
            version: "19"
          cudatoolkit:
            version: "12.4"
            unfree: true
            env:
              CUDA_PATH: "${prefix}"

        groups:
          py-tools: [ruff, black]

        overlays:
          optimized:
            target: python313
            options:
              enableOptimizations: true
              enableLTO: true

        profiles:
          python:
            description: "Optimized Python"
            interpreter: python313
            python_packages: [numpy, pandas, numpy]
            packages: [python313, "@py-tools", ruff]
            overlays: [optimized]
            diagnostics:
              - label: Python
                tool: python
          cpp:
            packages: [clang]
            diagnostics:
              - label: Clang
                tool: clang
          cuda:
            packages: [clang, cudatoolkit]
            flags: [requires_gpu]
    """)
    path = tmp_path / "envhub.yml"
    path.write_text(content)
    return path
