"""tests for data models."""

import dataclasses

import pytest

from chatrender.core.models import CodeBlock, MessageRecord, RenderOptions


def test_render_options_defaults() -> None:
    """RenderOptions has correct defaults."""
    options = RenderOptions()
    assert options.id_prefix == "code-block-"
    assert options.highlight is True
    assert options.style == "github-dark"
    assert options.copy_reset_ms == 2000


def test_code_block_is_frozen() -> None:
    """CodeBlock descriptors are immutable."""
    block = CodeBlock(
        id="code-block-0", language="", raw_content="x", highlighted_content="x"
    )
    with pytest.raises(dataclasses.FrozenInstanceError):
        block.id = "other"  # type: ignore[misc]


def test_timestamp_from_epoch_seconds() -> None:
    """numeric created_at is used as epoch seconds."""
    message = MessageRecord(
        id="1", thread_id="t", role="user", content="", created_at=1700000000
    )
    assert message.timestamp == 1700000000.0


def test_timestamp_from_iso_string() -> None:
    """ISO-8601 created_at is parsed, UTC when no offset is given."""
    zulu = MessageRecord(
        id="1",
        thread_id="t",
        role="user",
        content="",
        created_at="1970-01-01T00:01:00Z",
    )
    naive = MessageRecord(
        id="2", thread_id="t", role="user", content="", created_at="1970-01-01T00:02:00"
    )
    assert zulu.timestamp == 60.0
    assert naive.timestamp == 120.0
