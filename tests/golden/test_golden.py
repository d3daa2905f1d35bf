"""Golden fixture tests.

Each ``fixtures/<name>.md`` is decoded and re-encoded.  When a sibling
``<name>.expected.md`` exists the output must match it exactly; otherwise
the fixture is already canonical and must come back unchanged.
``fixtures/<name>.json`` holds an editor document whose Markdown form is
``<name>.expected.md``.
"""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from blockmark import Transcoder
from blockmark.config import BlockmarkConfig

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _markdown_fixtures() -> list[Path]:
    return sorted(
        p for p in FIXTURES_DIR.glob("*.md")
        if not p.name.endswith(".expected.md")
    )


def _editor_fixtures() -> list[Path]:
    return sorted(FIXTURES_DIR.glob("*.json"))


def _expected_for(source: Path) -> str:
    expected = source.with_name(source.stem + ".expected.md")
    if not expected.exists():
        expected = source
    return expected.read_text(encoding="utf-8").rstrip("\n")


@pytest.fixture
def transcoder() -> Transcoder:
    return Transcoder(BlockmarkConfig(clock=lambda: 0))


@pytest.mark.parametrize("source", _markdown_fixtures(), ids=lambda p: p.stem)
def test_markdown_fixture(transcoder, source):
    markdown = source.read_text(encoding="utf-8")
    assert transcoder.roundtrip(markdown) == _expected_for(source)


@pytest.mark.parametrize("source", _markdown_fixtures(), ids=lambda p: p.stem)
def test_markdown_fixture_output_is_stable(transcoder, source):
    once = transcoder.roundtrip(source.read_text(encoding="utf-8"))
    assert transcoder.roundtrip(once) == once


@pytest.mark.parametrize("source", _editor_fixtures(), ids=lambda p: p.stem)
def test_editor_fixture(transcoder, source):
    data = json.loads(source.read_text(encoding="utf-8"))
    assert transcoder.editor_to_markdown(data) == _expected_for(source)


def test_fixtures_present():
    assert _markdown_fixtures()
    assert _editor_fixtures()
