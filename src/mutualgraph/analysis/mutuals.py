"""
Mutuals breakdown.

For a selected person, lists their mutuals separately for every loaded
source, so that one can tell which export saw which connection.
"""

import re
from typing import List, Mapping, Sequence

from pydantic import BaseModel, Field

from ..core.types import CanonicalRecord
from ..parsing.origin import DEFAULT_IDENTITY_PATTERN
from ..parsing.source import ParsedSource

DEFAULT_LIMIT = 200


class SourceMutuals(BaseModel):
    """Mutuals of one node as seen by one source."""
    source: str
    label: str
    count: int
    names: List[str] = Field(default_factory=list)


def display_name(canonical: Mapping[str, CanonicalRecord], node_id: str) -> str:
    """Merged name, or the id itself when only a placeholder is known."""
    record = canonical.get(node_id)
    if record and record.name and record.name != node_id:
        return record.name
    return node_id


def source_label(
    source: ParsedSource,
    canonical: Mapping[str, CanonicalRecord],
    identity_pattern: str = DEFAULT_IDENTITY_PATTERN,
) -> str:
    """
    Friendly name for a source.

    A file named after an identity is labelled with that person's merged
    name when one is known; otherwise the base file name is used.
    """
    base = source.base_name
    if re.match(identity_pattern, base):
        name = display_name(canonical, base)
        if name != base:
            return name
    return base


def mutuals_by_source(
    sources: Sequence[ParsedSource],
    canonical: Mapping[str, CanonicalRecord],
    node_id: str,
    identity_pattern: str = DEFAULT_IDENTITY_PATTERN,
    limit: int = DEFAULT_LIMIT,
) -> List[SourceMutuals]:
    """
    One block per source in which ``node_id`` has known mutuals.

    Mutuals pointing outside the merged graph are not counted; sources with no
    remaining mutuals are omitted. At most ``limit`` names are listed.
    """
    blocks = []
    for source in sources:
        info = source.records.get(node_id)
        if info is None:
            continue
        mutuals = sorted(m for m in info.mutual_ids if m in canonical)
        if not mutuals:
            continue
        blocks.append(SourceMutuals(
            source=source.filename,
            label=source_label(source, canonical, identity_pattern),
            count=len(mutuals),
            names=[display_name(canonical, m) for m in mutuals[:limit]],
        ))
    return blocks
