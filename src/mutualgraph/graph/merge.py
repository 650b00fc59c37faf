"""
Source Merger.

Unions any number of (augmented) sources into one canonical mapping.

Resolution rules, applied in source order:
- name: the first genuine (non-empty) name wins. A placeholder (the identity
  itself) or an empty name can be upgraded; a genuine one never changes.
- avatar: the first source offering a non-empty avatar reference sets it.
- mutual_ids: union of every source's list for that identity. References to
  unknown identities are kept here and dropped when edges are linked.
"""

import logging
from typing import Dict, Iterable

from ..core.types import CanonicalRecord
from ..parsing.source import ParsedSource
from .style import clean_username, explicit_avatar_url

logger = logging.getLogger(__name__)


def _is_placeholder(record: CanonicalRecord, node_id: str) -> bool:
    return not record.name or record.name == node_id


def merge_sources(sources: Iterable[ParsedSource]) -> Dict[str, CanonicalRecord]:
    """Merge sources into ``{identity: CanonicalRecord}``, preserving first-seen order."""
    out: Dict[str, CanonicalRecord] = {}
    source_count = 0

    for source in sources:
        source_count += 1
        for node_id, info in source.records.items():
            name = clean_username(info.name)
            avatar = explicit_avatar_url(node_id, info.avatar_ref)
            current = out.get(node_id)

            if current is None:
                out[node_id] = CanonicalRecord(
                    name=name or node_id,
                    avatar_url=avatar,
                    mutual_ids=set(info.mutual_ids),
                )
                continue

            if name and _is_placeholder(current, node_id):
                current.name = name
            if not current.avatar_url and avatar:
                current.avatar_url = avatar
            current.mutual_ids |= info.mutual_ids

    logger.debug(f"Merged {source_count} source(s) into {len(out)} identities")
    return out
