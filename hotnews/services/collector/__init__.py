"""Item collection services.

This package handles:
- Collecting items from sources (Hacker News, RSS/Atom, GitHub)
- Normalizing URLs and hashing content
- Relevance filtering, tagging and entity extraction
- Importance scoring
- Storing items with cross-source dedup linkage
- Retention sweeps
"""

from hotnews.services.collector.base import BaseSource, CollectionResult, RawItem, SourceSpec
from hotnews.services.collector.pipeline import CollectionPipeline
from hotnews.services.collector.scorer import ImportanceScorer
from hotnews.services.collector.sweeper import RetentionSweeper

__all__ = [
    "BaseSource",
    "CollectionPipeline",
    "CollectionResult",
    "ImportanceScorer",
    "RawItem",
    "RetentionSweeper",
    "SourceSpec",
]
