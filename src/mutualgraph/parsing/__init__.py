"""
Parsing of raw export files.

- source: JSON decoding, shape validation and record normalization
- origin: origin (root) detection and augmentation for multi-source batches
"""

from .origin import AugmentedBatch, OriginAugmenter, augment_sources
from .source import ParsedSource, base_file_name, load_sources, parse_source, read_files

__all__ = [
    "AugmentedBatch", "OriginAugmenter", "augment_sources",
    "ParsedSource", "base_file_name", "load_sources", "parse_source", "read_files",
]
