"""
Identifier generation, checksums and small formatting helpers.

Anki stores most identifiers as plain integers. Note GUIDs are kept as
signed 64-bit integers in memory and serialized as decimal strings in the
``notes.guid`` column.
"""

import random
import secrets
import threading
import time

FIELD_SEPARATOR = "\x1f"

_guid_lock = threading.Lock()
_last_unique_guid = 0


def generate_guid() -> int:
    """Return a signed 64-bit integer from a cryptographically strong source."""
    return int.from_bytes(secrets.token_bytes(8), "big", signed=True)


def generate_unique_guid() -> int:
    """
    Return a time-seeded GUID: ``epoch_ms * 1_000_000 + random(0, 1_000_000)``.

    Strictly increasing within one process: a draw that does not exceed
    the previous value is bumped to one past it. Two processes sharing a
    millisecond and a random draw can still collide.
    """
    global _last_unique_guid
    candidate = int(time.time() * 1000) * 1_000_000 + random.randrange(1_000_000)
    with _guid_lock:
        _last_unique_guid = max(candidate, _last_unique_guid + 1)
        return _last_unique_guid


def anki_time() -> int:
    """Current time in seconds since the epoch, as Anki stores ``mod``."""
    return int(time.time())


def anki_time_ms() -> int:
    return int(time.time() * 1000)


def generate_deck_id() -> int:
    # 1 is reserved for the "Default" deck
    return random.randrange(1_000_000_000) + 1_000_000_000


def generate_model_id() -> int:
    return int(time.time()) * 1000 + random.randrange(1000)


def join_fields(fields: list[str]) -> str:
    """Join field values with the unit separator (0x1F)."""
    return FIELD_SEPARATOR.join(fields)


def split_fields(flds: str) -> list[str]:
    return flds.split(FIELD_SEPARATOR)


def format_tags(tags: list[str]) -> str:
    """
    Format tags for the ``notes.tags`` column.

    :returns: ``""`` for no tags, otherwise ``" tagA tagB "``.
    """
    if not tags:
        return ""
    return " " + " ".join(tags) + " "


def checksum(fields: list[str]) -> int:
    """
    Sum of the code points of the joined field string.

    Deterministic but not collision resistant; Anki only uses ``csum`` as a
    duplicate-detection hint.
    """
    return sum(ord(ch) for ch in join_fields(fields))
