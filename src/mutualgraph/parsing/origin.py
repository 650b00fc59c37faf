"""
Origin Augmenter.

An export is usually generated by one person (the origin) who is missing
from it or under-connected in it. When a batch holds several exports, the
file name tells us who that person is:

- ``<id>.json`` where ``<id>`` is keyed in the export: the origin record is
  connected to every other identity of that export.
- ``<id>.json`` where ``<id>`` only looks like an identity: a synthetic
  origin record is added, connected to every identity of that export.
- Anything else: the export is left alone.

Detected origins form the RootSet of the load.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import FrozenSet, List

from ..core.exceptions import AugmentationFailure
from ..core.types import FriendRecord
from .source import ParsedSource

logger = logging.getLogger(__name__)

DEFAULT_IDENTITY_PATTERN = r"^\d{15,22}$"


@dataclass
class AugmentedBatch:
    """Sources after origin augmentation, plus the roots they produced."""

    sources: List[ParsedSource] = field(default_factory=list)
    roots: FrozenSet[str] = frozenset()

    @property
    def is_multi_source(self) -> bool:
        return len(self.sources) > 1


class OriginAugmenter:
    """Detects and wires the origin identity of each source in a batch."""

    def __init__(self, identity_pattern: str = DEFAULT_IDENTITY_PATTERN):
        self._identity_re = re.compile(identity_pattern)

    def looks_like_identity(self, value: str) -> bool:
        return bool(self._identity_re.match(value))

    def augment(self, sources: List[ParsedSource]) -> AugmentedBatch:
        """
        Augment every source of a batch.

        Single-source batches are returned untouched with no roots. A failure
        on one source leaves that source unmodified.
        """
        if len(sources) <= 1:
            return AugmentedBatch(sources=list(sources), roots=frozenset())

        roots = set()
        augmented = []
        for source in sources:
            try:
                result, origin = self._augment_one(source)
            except Exception as e:
                failure = AugmentationFailure(source.filename, e)
                logger.warning(str(failure))
                augmented.append(source)
                continue

            if origin is not None:
                roots.add(origin)
            augmented.append(result)

        if roots:
            logger.info(f"Detected {len(roots)} origin(s): {', '.join(sorted(roots))}")
        return AugmentedBatch(sources=augmented, roots=frozenset(roots))

    def _augment_one(self, source: ParsedSource) -> tuple[ParsedSource, str | None]:
        base = source.base_name
        if not base:
            return source, None

        all_ids = source.identities()

        if base in source.records:
            origin = source.records[base]
            others = {i for i in all_ids if i != base}
            records = dict(source.records)
            records[base] = origin.model_copy(update={"mutual_ids": origin.mutual_ids | others})
            logger.debug(f"{source.filename}: origin {base} connected to {len(others)} identities")
            return ParsedSource(filename=source.filename, records=records), base

        if self.looks_like_identity(base) and all_ids:
            records = dict(source.records)
            records[base] = FriendRecord(name=base, avatar_ref="", mutual_ids=set(all_ids))
            logger.debug(f"{source.filename}: synthesized origin {base}")
            return ParsedSource(filename=source.filename, records=records), base

        return source, None


def augment_sources(
    sources: List[ParsedSource],
    identity_pattern: str = DEFAULT_IDENTITY_PATTERN,
) -> AugmentedBatch:
    """Convenience wrapper around OriginAugmenter.augment."""
    return OriginAugmenter(identity_pattern).augment(sources)
