"""Importance scoring.

Calculates a 0-100 importance score for an item from:
- Source weight (base importance 1-10)
- Engagement (points and comments, discussion items only)
- Recency (linear decay to zero over 60 hours)
- Entity mentions (major AI organizations)

Code-host items use fixed rules instead: releases score a flat 70 and
trending repositories score from their star count.

The weights below are a fixed policy, not settings. Changing any of them
means bumping SCORING_POLICY_VERSION.
"""

import math
from datetime import UTC, datetime

from pydantic import BaseModel, Field

from hotnews.core.logging import get_logger
from hotnews.core.types import ensure_utc

logger = get_logger(__name__)

SCORING_POLICY_VERSION = "1"

BASE_WEIGHT = 2
ENGAGEMENT_CAP = 25.0
ENGAGEMENT_MULTIPLIER = 5.0
POINTS_DIVISOR = 100.0
COMMENTS_DIVISOR = 50.0
RECENCY_MAX = 15.0
RECENCY_HOURS_PER_POINT = 4.0
ENTITY_POINTS = 5
ENTITY_CAP = 15

RELEASE_IMPORTANCE = 70
TRENDING_BASE = 30
TRENDING_STARS_DIVISOR = 10

MIN_SCORE = 0
MAX_SCORE = 100


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up."""
    return math.floor(value + 0.5)


def clamp_score(value: float) -> int:
    """Round half-up and clamp into [0, 100]."""
    return max(MIN_SCORE, min(MAX_SCORE, round_half_up(value)))


def hours_since(moment: datetime, now: datetime) -> float:
    """Non-negative hours elapsed between moment and now."""
    delta = ensure_utc(now) - ensure_utc(moment)
    return max(0.0, delta.total_seconds() / 3600)


class ScoreComponents(BaseModel):
    """Individual score components before rounding."""

    source: float = Field(ge=0.0, description="Base importance contribution")
    engagement: float = Field(ge=0.0, le=ENGAGEMENT_CAP, description="Points/comments bonus")
    recency: float = Field(ge=0.0, le=RECENCY_MAX, description="Linear time decay bonus")
    entities: float = Field(ge=0.0, le=ENTITY_CAP, description="Major entity bonus")

    @property
    def total(self) -> float:
        return self.source + self.engagement + self.recency + self.entities


class ImportanceScorer:
    """Calculates importance scores for collected items.

    Scoring formula (discussion items):
        total = 2 * base
              + min(25, 5 * (points / 100 + comments / 50))
              + max(0, 15 - hours_old / 4)
              + min(15, 5 * entity_count)

    Feed entries use the same formula without the engagement term.
    """

    def components(
        self,
        base_importance: int,
        published_at: datetime,
        entity_count: int,
        points: int | None = None,
        comments: int | None = None,
        now: datetime | None = None,
        include_engagement: bool = True,
    ) -> ScoreComponents:
        """Calculate the individual components.

        Args:
            base_importance: Source weight (1-10)
            published_at: Item publication time
            entity_count: Number of major entities mentioned
            points: Upstream points (None treated as 0)
            comments: Upstream comments (None treated as 0)
            now: Reference time (defaults to current UTC time)
            include_engagement: Whether the engagement term applies

        Returns:
            ScoreComponents
        """
        now = now or datetime.now(UTC)

        engagement = 0.0
        if include_engagement:
            engagement_value = (points or 0) / POINTS_DIVISOR + (comments or 0) / COMMENTS_DIVISOR
            engagement = min(ENGAGEMENT_CAP, engagement_value * ENGAGEMENT_MULTIPLIER)

        hours_old = hours_since(published_at, now)
        recency = max(0.0, RECENCY_MAX - hours_old / RECENCY_HOURS_PER_POINT)

        return ScoreComponents(
            source=max(0, base_importance * BASE_WEIGHT),
            engagement=max(0.0, engagement),
            recency=recency,
            entities=min(ENTITY_CAP, entity_count * ENTITY_POINTS),
        )

    def score_discussion(
        self,
        base_importance: int,
        points: int | None,
        comments: int | None,
        published_at: datetime,
        entity_count: int,
        now: datetime | None = None,
    ) -> int:
        """Score a discussion-site story.

        Returns:
            Importance score (0-100)
        """
        components = self.components(
            base_importance=base_importance,
            published_at=published_at,
            entity_count=entity_count,
            points=points,
            comments=comments,
            now=now,
        )
        score = clamp_score(components.total)

        logger.debug(
            "Discussion scored",
            total=score,
            engagement=round(components.engagement, 2),
            recency=round(components.recency, 2),
        )
        return score

    def score_feed_entry(
        self,
        base_importance: int,
        published_at: datetime,
        entity_count: int,
        now: datetime | None = None,
    ) -> int:
        """Score a feed entry (no engagement term).

        Returns:
            Importance score (0-100)
        """
        components = self.components(
            base_importance=base_importance,
            published_at=published_at,
            entity_count=entity_count,
            now=now,
            include_engagement=False,
        )
        return clamp_score(components.total)

    def score_release(self) -> int:
        """Code-host releases always score the same."""
        return RELEASE_IMPORTANCE

    def score_trending_repo(self, stars: int) -> int:
        """Score a trending repository from its star count.

        Returns:
            min(100, round(30 + stars / 10))
        """
        return clamp_score(TRENDING_BASE + max(0, stars) / TRENDING_STARS_DIVISOR)


__all__ = [
    "SCORING_POLICY_VERSION",
    "ImportanceScorer",
    "ScoreComponents",
    "clamp_score",
    "hours_since",
    "round_half_up",
]
