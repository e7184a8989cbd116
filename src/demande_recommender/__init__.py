"""
Demande Recommender - Multi-Stage Professional Recommendation Engine.

Turns a client service request ("demande") plus a pool of candidate
professionals into a ranked, auditable shortlist. Deterministic scoring
is the backbone; an optional external advisory model can nudge the
ranking but is never load-bearing.

Architecture:
    - Hexagonal Architecture (Ports & Adapters)
    - Dependency Injection for testability
    - Strategy Pattern for the advisory model
    - Configuration-driven behavior via YAML

Main Components:
    - domain: Core entities (Demande, Candidate, DemandeRecommendation, ...)
    - interfaces: Protocols for stores, advisor, audit and metrics
    - collection: Data collector, row mappers, population categories
    - filters: Hard/soft eligibility rules
    - scoring: Deterministic scorer
    - sanitization: PII scrubbing before anything leaves the process
    - advisory: Advisory layer, prompts, Groq advisor
    - pipeline: Orchestration, run tokens and result assembly
    - adapters: In-memory stores, loggers, stub advisor
    - config: Configuration models and loaders

Example:
    >>> from demande_recommender.pipeline.factory import create_pipeline
    >>> pipeline = create_pipeline(data_source=source, repository=repo)
    >>> result = pipeline.generate_recommendations("DEM-2026-0042")
    >>> print([r.professional_id for r in result.recommendations])

"""

import logging

__version__ = "0.4.0"


def configure_logging(
    level: int = logging.INFO,
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
) -> None:
    """
    Configure logging for the recommendation engine.

    Call this at application startup to see log messages.
    By default, only WARNING and above are visible.

    Args:
        level: Logging level (default: INFO)
        format: Log message format

    Example:
        >>> import demande_recommender
        >>> demande_recommender.configure_logging(logging.DEBUG)
    """
    logging.basicConfig(
        level=level,
        format=format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("demande_recommender").setLevel(level)
