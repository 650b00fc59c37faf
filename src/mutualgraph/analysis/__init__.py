"""Read-only views over a loaded session."""

from .mutuals import SourceMutuals, mutuals_by_source, source_label

__all__ = ["SourceMutuals", "mutuals_by_source", "source_label"]
