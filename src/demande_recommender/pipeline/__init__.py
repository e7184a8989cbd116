"""
Pipeline Package - Orchestration of a Recommendation Run.

Components:
    - RecommendationPipeline: Main orchestrator coordinating all stages
    - RecommendationAssembler: Merges scores with advice into the shortlist
    - RunRegistry: Tracks the current run per demande
    - create_pipeline: Wires a pipeline with default adapters

Design Principles:
    - All dependencies injected via constructor
    - Stages are stateless; per-run configuration is passed explicitly
"""

from demande_recommender.pipeline.assembler import RecommendationAssembler, bounded_delta
from demande_recommender.pipeline.factory import create_pipeline
from demande_recommender.pipeline.recommendation_pipeline import (
    GenerateOptions,
    RecommendationPipeline,
)
from demande_recommender.pipeline.run_registry import RunRegistry, RunToken

__all__ = [
    "GenerateOptions",
    "RecommendationAssembler",
    "RecommendationPipeline",
    "RunRegistry",
    "RunToken",
    "bounded_delta",
    "create_pipeline",
]
