"""Skill rating aggregation from answered drills."""

from pokercoach.ratings.aggregator import RatingConfig, SkillRatingAggregator

__all__ = ["RatingConfig", "SkillRatingAggregator"]
