"""
Snapshot export.

Writes the merged graph in the same shape the exports come in, so that the
output of one run can be loaded as an input of a later one:

    {"<id>": {"name": "...", "avatarUrl": "...", "mutual": ["<id>", ...]}}
"""

import json
from pathlib import Path
from typing import Any, Dict, Mapping

from .core.types import CanonicalRecord


def to_snapshot(canonical: Mapping[str, CanonicalRecord]) -> Dict[str, Any]:
    return {
        node_id: {
            "name": record.name,
            "avatarUrl": record.avatar_url,
            "mutual": sorted(record.mutual_ids),
        }
        for node_id, record in canonical.items()
    }


def write_snapshot(canonical: Mapping[str, CanonicalRecord], output_path: Path | str) -> Path:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(to_snapshot(canonical), indent=2), encoding="utf-8")
    return path
