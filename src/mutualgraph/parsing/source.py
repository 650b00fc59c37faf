"""
Source Parser.

Decodes one raw export into a per-source mapping from identity to
FriendRecord. This is the only place where loose record shapes are
accepted: missing or malformed ``mutual`` lists become empty, and either
``avatarUrl`` or ``avatar`` may carry the avatar reference. Nothing past
this boundary ever sees the raw JSON.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

from ..core.exceptions import MalformedSourceError
from ..core.types import FriendRecord

logger = logging.getLogger(__name__)


@dataclass
class ParsedSource:
    """One decoded export file."""

    filename: str
    records: Dict[str, FriendRecord] = field(default_factory=dict)

    @property
    def base_name(self) -> str:
        """File name without directory and final extension."""
        return base_file_name(self.filename)

    def identities(self) -> List[str]:
        return list(self.records.keys())

    def __len__(self) -> int:
        return len(self.records)


def base_file_name(filename: str) -> str:
    name = Path(str(filename or "")).name
    stem, dot, ext = name.rpartition(".")
    return stem if dot and ext else name


def normalize_record(raw: Any) -> FriendRecord:
    """Coerce one raw record into the internal FriendRecord shape."""
    if not isinstance(raw, dict):
        return FriendRecord()

    name = raw.get("name")
    name = name if isinstance(name, str) else ""

    avatar = raw.get("avatarUrl") or raw.get("avatar") or ""
    avatar = avatar if isinstance(avatar, str) else ""

    mutual = raw.get("mutual")
    mutual_ids = {str(m) for m in mutual if m is not None} if isinstance(mutual, list) else set()

    return FriendRecord(name=name, avatar_ref=avatar, mutual_ids=mutual_ids)


def parse_source(filename: str, text: str | bytes) -> ParsedSource:
    """
    Decode and validate one export.

    Raises:
        MalformedSourceError: If the text is not JSON or its top level is
            not an object keyed by identity.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedSourceError(filename, f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedSourceError(filename, "Root must be an object keyed by user id.")

    records = {str(key): normalize_record(value) for key, value in data.items()}
    logger.debug(f"Parsed {len(records)} records from {filename}")
    return ParsedSource(filename=filename, records=records)


def load_sources(files: Iterable[Tuple[str, str | bytes]]) -> List[ParsedSource]:
    """
    Parse a batch of ``(filename, text)`` pairs.

    All-or-nothing: the first malformed file raises and no partial batch is
    returned.
    """
    return [parse_source(filename, text) for filename, text in files]


def read_files(paths: Iterable[Path | str]) -> List[Tuple[str, bytes]]:
    """Read export files from disk as ``(filename, bytes)`` pairs."""
    return [(str(p), Path(p).read_bytes()) for p in paths]
