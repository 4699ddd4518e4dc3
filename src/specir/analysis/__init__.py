"""Relationship analysis.

Public API:
    :func:`analyze`, :class:`RelationshipDetector`: build a
        :class:`~specir.models.RelationshipGraph` from a raw document.
"""

from specir.analysis.relationships import (
    EntityIndex,
    RelationshipDetector,
    analyze,
    merge_relationships,
)

__all__ = ["EntityIndex", "RelationshipDetector", "analyze", "merge_relationships"]
