"""data models for rendered code blocks and chat messages."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class CodeBlock:
    """fenced code block as it appears in rendered output."""

    id: str
    language: str  # empty when the fence has no info string
    raw_content: str
    highlighted_content: str


@dataclass
class RenderResult:
    """HTML produced by one render call and the code blocks it allocated."""

    html: str
    blocks: list[CodeBlock] = field(default_factory=list)


@dataclass
class RenderOptions:
    """rendering configuration."""

    id_prefix: str = "code-block-"
    highlight: bool = True
    style: str = "github-dark"
    copy_reset_ms: int = 2000


@dataclass
class MessageRecord:
    """single chat message from a message export."""

    id: str
    thread_id: str
    role: str  # "user", "assistant", "system"
    content: str
    created_at: Union[float, str]

    @property
    def timestamp(self) -> float:
        """creation time as epoch seconds, for ordering."""
        return _to_timestamp(self.created_at)


class CopyState(Enum):
    """visual state of a copy control."""

    IDLE = "idle"
    COPIED = "copied"


def _to_timestamp(value: Union[float, str]) -> float:
    """converts epoch seconds or an ISO-8601 string to epoch seconds."""
    if isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.timestamp()
    return float(value)
