"""message listing over JSON message exports."""

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import ijson

from chatrender.core.models import MessageRecord

logger = logging.getLogger(__name__)


class ServerError(Exception):
    """listing failure carrying an HTTP-style status code."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def __str__(self) -> str:
        return f"{self.status_code}: {self.message}"


def _iter_records(source: Path) -> Iterator[dict[str, Any]]:
    """stream-parses message objects from a top-level JSON array."""
    with open(source, "rb") as f:
        for item in ijson.items(f, "item", use_float=True):
            if isinstance(item, dict):
                yield item


def _to_record(item: dict[str, Any]) -> MessageRecord:
    """builds a MessageRecord from a raw export object."""
    return MessageRecord(
        id=str(item.get("id", "")),
        thread_id=str(item.get("thread_id", "")),
        role=item.get("role", "unknown"),
        content=item.get("content") or "",
        created_at=item.get("created_at", 0.0),
    )


def list_messages(source: Path, thread_id: str) -> list[MessageRecord]:
    """
    lists the messages of a thread ordered by creation time.

    Args:
        source: path to a JSON export (array of message objects)
        thread_id: thread to list

    Returns:
        messages of the thread, oldest first (empty if the thread is unknown)

    Raises:
        ServerError: 400 for a missing thread id, 404 for a missing export,
            500 (or the error's own status) for anything else
    """
    if not thread_id:
        raise ServerError(400, "Missing thread id")

    try:
        messages = [
            _to_record(item)
            for item in _iter_records(source)
            if str(item.get("thread_id", "")) == thread_id
        ]
        messages.sort(key=lambda m: m.timestamp)
        return messages
    except FileNotFoundError as e:
        logger.error("Message export not found: %s", source)
        raise ServerError(404, f"Message export not found: {source}") from e
    except Exception as e:
        logger.error("Error listing messages for %s: %s", thread_id, e)
        status = getattr(e, "status_code", None) or getattr(e, "status", None)
        raise ServerError(
            status if isinstance(status, int) else 500,
            str(e) or "Internal server error",
        ) from e


def is_message_export(source: Path) -> bool:
    """
    checks whether a JSON file holds a top-level array, the shape of an export.

    Raises:
        ServerError: 404 for a missing file, 500 for malformed JSON
    """
    try:
        with open(source, "rb") as f:
            for _prefix, event, _value in ijson.parse(f):
                return event == "start_array"
        return False
    except FileNotFoundError as e:
        logger.error("Message export not found: %s", source)
        raise ServerError(404, f"Message export not found: {source}") from e
    except ijson.JSONError as e:
        logger.error("Malformed JSON in %s: %s", source, e)
        raise ServerError(500, f"Malformed message export: {e}") from e


def list_threads(source: Path) -> list[str]:
    """
    lists the thread ids of an export in first-seen order.

    Args:
        source: path to a JSON export

    Returns:
        distinct thread ids

    Raises:
        ServerError: 404 for a missing export, 500 for a malformed one
    """
    try:
        seen: dict[str, None] = {}
        for item in _iter_records(source):
            thread_id = str(item.get("thread_id", ""))
            if thread_id:
                seen.setdefault(thread_id, None)
        return list(seen)
    except FileNotFoundError as e:
        logger.error("Message export not found: %s", source)
        raise ServerError(404, f"Message export not found: {source}") from e
    except ijson.JSONError as e:
        logger.error("Malformed message export %s: %s", source, e)
        raise ServerError(500, f"Malformed message export: {e}") from e
