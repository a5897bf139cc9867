"""tests for code block identifier allocation."""

from chatrender.render.ids import BlockIdAllocator


def test_ids_start_at_zero_with_default_prefix() -> None:
    """first identifier is code-block-0."""
    allocator = BlockIdAllocator()
    assert allocator.next_id() == "code-block-0"


def test_ids_are_monotonic() -> None:
    """each call returns the next counter value."""
    allocator = BlockIdAllocator()
    ids = [allocator.next_id() for _ in range(3)]
    assert ids == ["code-block-0", "code-block-1", "code-block-2"]


def test_custom_prefix_and_start() -> None:
    """prefix and starting value are configurable."""
    allocator = BlockIdAllocator(prefix="snippet-", start=7)
    assert allocator.next_id() == "snippet-7"
    assert allocator.next_id() == "snippet-8"


def test_issued_counts_allocations() -> None:
    """issued reports how many identifiers were handed out."""
    allocator = BlockIdAllocator(start=5)
    assert allocator.issued == 0
    allocator.next_id()
    allocator.next_id()
    assert allocator.issued == 2


def test_reset_restarts_counter() -> None:
    """reset restarts numbering for deterministic tests."""
    allocator = BlockIdAllocator()
    allocator.next_id()
    allocator.reset()
    assert allocator.issued == 0
    assert allocator.next_id() == "code-block-0"
