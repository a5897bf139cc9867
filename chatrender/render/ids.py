"""identifier allocation for rendered code blocks."""


class BlockIdAllocator:
    """issues unique, monotonically increasing code block identifiers."""

    def __init__(self, prefix: str = "code-block-", start: int = 0) -> None:
        self.prefix = prefix
        self._next = start
        self._issued = 0

    @property
    def issued(self) -> int:
        """number of identifiers handed out so far."""
        return self._issued

    def next_id(self) -> str:
        """returns a fresh identifier such as ``code-block-3``."""
        block_id = f"{self.prefix}{self._next}"
        self._next += 1
        self._issued += 1
        return block_id

    def reset(self, start: int = 0) -> None:
        """restarts the counter (tests only; renderers never reset)."""
        self._next = start
        self._issued = 0
