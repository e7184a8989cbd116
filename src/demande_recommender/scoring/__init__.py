"""Scoring Package - Deterministic candidate scoring."""

from demande_recommender.scoring.deterministic import DeterministicScorer

__all__ = ["DeterministicScorer"]
