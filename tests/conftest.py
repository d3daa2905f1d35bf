"""Shared test fixtures for the blockmark test suite."""

from __future__ import annotations

import pytest

from blockmark.config import BlockmarkConfig
from blockmark.converter.blocks_to_md import BlocksToMarkdownRenderer
from blockmark.converter.md_to_blocks import MarkdownToBlocksConverter
from blockmark.transcoder import Transcoder

FIXED_TIME = 1_700_000_000_000


@pytest.fixture
def config() -> BlockmarkConfig:
    """Default test configuration with a frozen clock."""
    return BlockmarkConfig(clock=lambda: FIXED_TIME)


@pytest.fixture
def converter(config: BlockmarkConfig) -> MarkdownToBlocksConverter:
    return MarkdownToBlocksConverter(config)


@pytest.fixture
def renderer(config: BlockmarkConfig) -> BlocksToMarkdownRenderer:
    return BlocksToMarkdownRenderer(config)


@pytest.fixture
def transcoder(config: BlockmarkConfig) -> Transcoder:
    return Transcoder(config)
