# tests/conftest.py
"""Pytest configuration with shared fixtures for the smartcomment tests.

Provides ready-made comment syntaxes, a commenter bound to the shell syntax
and a handful of sample documents, and keeps every test away from the real
user configuration directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from smartcomment.core.SmartCommenter import SmartCommenter
from smartcomment.core.SyntaxDetector import CommentSyntax


THEME_TEXT = (
    "# theme config\n"
    "# smc:begin dark\n"
    "# color: black\n"
    "# smc:end dark\n"
    "# smc:begin light\n"
    "# color: white\n"
    "# smc:end light\n"
    "font: mono\n"
)

NESTED_TEXT = (
    "# smc:flag x11\n"
    "xrdb_merge = yes\n"
    "# smc:begin dark\n"
    "bg = black\n"
    "# smc:end dark\n"
    "# smc:begin light\n"
    "# bg = white\n"
    "# smc:end light\n"
    "# smc:end x11\n"
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Points the configuration directory at an empty temporary location."""
    config_home = tmp_path / "xdg"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.delenv("SMARTCOMMENT_CONFIG", raising=False)
    return config_home


@pytest.fixture
def hash_syntax() -> CommentSyntax:
    return CommentSyntax(name="shell", prefixes=("#",))


@pytest.fixture
def css_syntax() -> CommentSyntax:
    return CommentSyntax(name="css", prefixes=("/*",), suffix="*/")


@pytest.fixture
def commenter(hash_syntax: CommentSyntax) -> SmartCommenter:
    return SmartCommenter(hash_syntax)


@pytest.fixture
def theme_text() -> str:
    return THEME_TEXT


@pytest.fixture
def nested_text() -> str:
    return NESTED_TEXT


@pytest.fixture
def theme_file(tmp_path: Path) -> Path:
    """A shell-style theme file on disk."""
    path = tmp_path / "theme.sh"
    path.write_bytes(THEME_TEXT.encode("utf-8"))
    return path
