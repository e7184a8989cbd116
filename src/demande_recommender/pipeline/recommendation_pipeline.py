"""
Recommendation Pipeline - Main Orchestrator.

The RecommendationPipeline coordinates one recommendation run:

    1. Resolve and validate the configuration
    2. Claim a run token
    3. Collect the demande and candidate pool
    4. Filter eligibility (exclusions, near-eligible)
    5. Score deterministically
    6. Sanitize and ask the advisor (optional)
    7. Merge, assemble and persist

Fatal errors (unknown demande, invalid config, sanitization defect) are
raised to the caller. Advisory failures only degrade the run.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, TypeVar

from pydantic import BaseModel

from demande_recommender.advisory.advisory_layer import AdvisoryLayer, AdvisoryResult
from demande_recommender.collection.data_collector import CollectedData, DataCollector
from demande_recommender.config.loader import ConfigLoader, merge_config_dicts
from demande_recommender.config.models import RecommendationConfig, get_default_config
from demande_recommender.domain.entities import (
    DemandeRecommendation,
    EligibilityResult,
    GenerationMetadata,
    NearEligible,
    RecommendationViewEvent,
    ScoredCandidate,
)
from demande_recommender.domain.exceptions import RecommendationError
from demande_recommender.domain.value_objects import AvailabilityWindow
from demande_recommender.filters.eligibility import EligibilityFilter
from demande_recommender.interfaces.advisor import Advisor
from demande_recommender.interfaces.audit_logger import AuditLogger
from demande_recommender.interfaces.data_source import ClinicDataSource, ConfigSource
from demande_recommender.interfaces.metrics_collector import MetricsCollector
from demande_recommender.interfaces.recommendation_repository import (
    RecommendationRepository,
)
from demande_recommender.pipeline.assembler import RecommendationAssembler
from demande_recommender.pipeline.run_registry import RunRegistry, RunToken
from demande_recommender.resilience.error_handler import ErrorHandler
from demande_recommender.sanitization.sanitizer import Sanitizer
from demande_recommender.scoring.deterministic import DeterministicScorer
from demande_recommender.validation.config_validator import ConfigValidator

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GenerateOptions(BaseModel):
    """Caller options for one recommendation run."""

    config_key: str = "default"
    config_override: Optional[Dict[str, Any]] = None
    as_of: Optional[datetime] = None
    reuse_existing: bool = False
    generated_by: Optional[str] = None

    model_config = {"frozen": True}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RecommendationPipeline:
    """Main orchestrator for the recommendation workflow."""

    def __init__(
        self,
        data_source: ClinicDataSource,
        repository: RecommendationRepository,
        audit_logger: AuditLogger,
        metrics_collector: MetricsCollector,
        config_source: Optional[ConfigSource] = None,
        advisor: Optional[Advisor] = None,
        error_handler: Optional[ErrorHandler] = None,
        config_validator: Optional[ConfigValidator] = None,
        run_registry: Optional[RunRegistry] = None,
        clock: Callable[[], datetime] = _utc_now,
        max_workers: int = 4,
    ) -> None:
        """
        Initialize pipeline with all dependencies.

        Args:
            data_source: Request, roster and availability store
            repository: Persistence for results and the view log
            audit_logger: For audit trail
            metrics_collector: For operational metrics
            config_source: Stored configurations (defaults used if None)
            advisor: Advisory model (deterministic-only if None)
            error_handler: For retry/circuit breaker (optional)
            config_validator: Cross-field config checks
            run_registry: Tracks in-flight runs per demande
            clock: Returns the current UTC time
            max_workers: Worker threads for submit_recommendations
        """
        self.data_source = data_source
        self.repository = repository
        self.audit_logger = audit_logger
        self.metrics_collector = metrics_collector
        self.config_source = config_source
        self.error_handler = error_handler
        self.config_validator = config_validator or ConfigValidator()
        self.run_registry = run_registry or RunRegistry(clock=clock)
        self.config_loader = ConfigLoader()
        self.collector = DataCollector(data_source, error_handler)
        self.sanitizer = Sanitizer()
        self.advisory_layer = AdvisoryLayer(advisor, error_handler, max_workers=max_workers)
        self._clock = clock
        self._max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()

    # =========================================================================
    # Public operations
    # =========================================================================

    def generate_recommendations(
        self,
        demande_id: str,
        options: Optional[GenerateOptions] = None,
    ) -> DemandeRecommendation:
        """
        Execute a recommendation run for one demande.

        Args:
            demande_id: Demande to recommend professionals for
            options: Run options

        Returns:
            DemandeRecommendation (persisted unless superseded)

        Raises:
            InvalidConfig: If the configuration is unusable
            RequestNotFound: If the demande does not exist
            RecordMappingError: If the request row is malformed
            SanitizationViolation: If the advisory payload could leak PII
            RetryExhausted: If the store keeps failing transiently
        """
        options = options or GenerateOptions()
        start_time = time.perf_counter()
        correlation_id = str(uuid.uuid4())
        self.audit_logger.set_correlation_id(correlation_id)

        if options.reuse_existing:
            existing = self.repository.get_current(demande_id)
            if existing is not None:
                logger.info(f"Reusing stored recommendation for {demande_id}")
                return existing

        try:
            return self._generate(demande_id, options, correlation_id, start_time)
        except RecommendationError as e:
            self.audit_logger.log_anomaly(
                f"Recommendation run failed: {type(e).__name__}: {e}",
                severity="ERROR",
                context={"demande_id": demande_id},
            )
            raise

    def fetch_recommendations(self, demande_id: str) -> Optional[DemandeRecommendation]:
        """Return the current stored recommendation for a demande."""
        return self.repository.get_current(demande_id)

    def log_recommendation_view(
        self,
        demande_id: str,
        viewer_id: str,
        timestamp: Optional[datetime] = None,
    ) -> RecommendationViewEvent:
        """
        Append a view event to the audit log.

        Args:
            demande_id: Demande whose recommendation was viewed
            viewer_id: Staff member who viewed it
            timestamp: View time (defaults to now)

        Returns:
            The appended event
        """
        current = self.repository.get_current(demande_id)
        event = RecommendationViewEvent(
            demande_id=demande_id,
            recommendation_id=current.recommendation_id if current else None,
            viewer_id=viewer_id,
            viewed_at=timestamp or self._clock(),
        )
        self.repository.append_view(event)
        return event

    def submit_recommendations(
        self,
        demande_id: str,
        options: Optional[GenerateOptions] = None,
    ) -> "Future[DemandeRecommendation]":
        """Schedule generate_recommendations on the worker pool."""
        return self._get_executor().submit(
            self.generate_recommendations, demande_id, options
        )

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker pools."""
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=wait)
                self._executor = None
        self.advisory_layer.shutdown()

    # =========================================================================
    # Run
    # =========================================================================

    def _generate(
        self,
        demande_id: str,
        options: GenerateOptions,
        correlation_id: str,
        start_time: float,
    ) -> DemandeRecommendation:
        # 1. Config is validated before any request or roster fetch
        config = self._resolve_config(options)

        # 2. Claim run
        token = self.run_registry.issue(demande_id)
        try:
            return self._execute(demande_id, token, config, options, correlation_id, start_time)
        finally:
            self.run_registry.release(token)

    def _execute(
        self,
        demande_id: str,
        token: RunToken,
        config: RecommendationConfig,
        options: GenerateOptions,
        correlation_id: str,
        start_time: float,
    ) -> DemandeRecommendation:
        as_of = options.as_of or self._clock()
        if as_of.tzinfo is None:
            as_of = as_of.replace(tzinfo=timezone.utc)
        window = AvailabilityWindow.starting_at(as_of, config.window_days)

        # 3. Collect
        collected: CollectedData = self._run_stage(
            "data_collector",
            0,
            lambda: self.collector.collect(
                demande_id,
                window,
                as_of.date(),
                config.collector.max_concurrent_fetches,
                config.collector.clinic_tz(),
            ),
            lambda c: c.considered_count,
        )
        demande = collected.demande

        # 4. Eligibility
        eligibility_filter = EligibilityFilter(config.eligibility)
        eligibility: EligibilityResult = self._run_stage(
            eligibility_filter.name,
            collected.considered_count,
            lambda: eligibility_filter.apply(
                demande, collected.candidates, collected.unavailable
            ),
            lambda r: r.eligible_count,
        )
        self._log_set_aside(eligibility_filter.name, eligibility)

        # 5. Scoring
        scorer = DeterministicScorer(config.scoring, config.eligibility)
        scored: List[ScoredCandidate] = self._run_stage(
            scorer.name,
            eligibility.eligible_count,
            lambda: scorer.score(demande, eligibility.eligible),
            len,
        )
        near_eligible = self._score_near_eligible(scorer, collected, eligibility)

        # 6. Advisory
        advisory = AdvisoryResult(output=None)
        if self.advisory_layer.is_active(config.advisory) and scored:
            advisory_input = self._run_stage(
                self.sanitizer.name,
                len(scored),
                lambda: self.sanitizer.sanitize(demande, scored),
                lambda a: len(a.candidates),
            )
            advisory = self._run_stage(
                "advisory",
                len(scored),
                lambda: self.advisory_layer.run(advisory_input, config.advisory),
                lambda r: len(r.output.rankings) if r.output else 0,
            )
            if advisory.error:
                self.audit_logger.log_anomaly(
                    f"Advisory fallback: {advisory.error}",
                    severity="WARNING",
                    context={"model": advisory.model_id},
                )
        self.metrics_collector.record_count(
            "advisory_outcome_total", 1, {"outcome": advisory.outcome}
        )

        # 7. Merge and assemble
        assembler = RecommendationAssembler(
            max_results=config.max_results,
            max_adjustment=config.advisory.max_adjustment,
        )
        ranked = self._run_stage(
            assembler.name,
            len(scored),
            lambda: assembler.rank(scored, advisory.output, len(demande.motif_keys)),
            len,
        )

        total_duration = time.perf_counter() - start_time
        metadata = GenerationMetadata(
            generated_at=self._clock(),
            run_sequence=token.sequence,
            config_key=config.key,
            config_fingerprint=config.fingerprint(),
            config_snapshot=config.snapshot(),
            advisory_model=advisory.model_id if advisory.applied else "none",
            ai_assisted=advisory.applied,
            advisory_error=advisory.error,
            processing_time_ms=int(total_duration * 1000),
            candidates_considered=collected.considered_count,
            correlation_id=correlation_id,
            generated_by=options.generated_by,
        )
        # Stored under the id the caller fetches by
        recommendation = assembler.assemble(
            demande_id=demande_id,
            run_token=token.token,
            ranked=ranked,
            eligibility=eligibility,
            near_eligible=near_eligible,
            metadata=metadata,
            advisory=advisory.output,
        )

        self._persist(recommendation, token)

        self.metrics_collector.record_timing(
            "recommendation_total_seconds",
            time.perf_counter() - start_time,
            {"config": config.key},
        )
        self.metrics_collector.record_count("candidates_excluded_total", eligibility.excluded_count)
        self.metrics_collector.record_count("candidates_near_eligible_total", len(near_eligible))
        self.metrics_collector.record_count("candidates_ranked_total", len(ranked))
        return recommendation

    def _resolve_config(self, options: GenerateOptions) -> RecommendationConfig:
        """Load the stored config (or defaults), apply overrides, validate."""
        raw = None
        if self.config_source is not None:
            raw = self._call(
                lambda: self.config_source.fetch_recommendation_config(options.config_key),
                "fetch_recommendation_config",
            )

        if raw is None:
            logger.info(f"No stored config '{options.config_key}', using defaults")
            config_dict = get_default_config().model_dump(mode="json")
            config_dict["key"] = options.config_key
        else:
            config_dict = dict(raw)

        if options.config_override:
            config_dict = merge_config_dicts(config_dict, options.config_override)

        config = self.config_loader.load_from_dict(config_dict)
        self.config_validator.validate(config)
        return config

    def _score_near_eligible(
        self,
        scorer: DeterministicScorer,
        collected: CollectedData,
        eligibility: EligibilityResult,
    ) -> List[NearEligible]:
        """Attach would-be scores to near-eligible candidates."""
        if not eligibility.near_eligible:
            return []
        by_id = {c.professional_id: c for c in collected.candidates}
        near_candidates = [by_id[n.professional_id] for n in eligibility.near_eligible]
        scores = {
            s.professional_id: s.scores
            for s in scorer.score(collected.demande, near_candidates)
        }
        return [
            n.model_copy(update={"scores": scores[n.professional_id]})
            for n in eligibility.near_eligible
        ]

    def _persist(self, recommendation: DemandeRecommendation, token: RunToken) -> None:
        """Save unless a newer run for the same demande has completed."""
        if self.run_registry.is_superseded(token):
            self.audit_logger.log_anomaly(
                f"Run {token.sequence} for {token.demande_id} was superseded; "
                "result not persisted",
                severity="WARNING",
                context={"run_token": token.token},
            )
            self.metrics_collector.record_count("superseded_runs_total", 1)
            return

        if not self.repository.save(recommendation):
            self.audit_logger.log_anomaly(
                f"Repository holds a newer result for {token.demande_id}; "
                f"run {token.sequence} not persisted",
                severity="WARNING",
                context={"run_token": token.token},
            )
            self.metrics_collector.record_count("superseded_runs_total", 1)
            return

        self.run_registry.complete(token)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _run_stage(
        self,
        stage_name: str,
        input_count: int,
        func: Callable[[], T],
        output_count: Callable[[T], int],
    ) -> T:
        """Execute a single stage with audit logging and timing."""
        stage_start = time.perf_counter()
        self.audit_logger.log_stage_start(stage_name, input_count)

        result = func()

        stage_duration = time.perf_counter() - stage_start
        self.audit_logger.log_stage_end(stage_name, output_count(result), stage_duration)
        self.metrics_collector.record_timing(
            "stage_duration_seconds", stage_duration, {"stage": stage_name}
        )
        return result

    def _log_set_aside(self, stage_name: str, eligibility: EligibilityResult) -> None:
        for exclusion in eligibility.exclusions:
            self.audit_logger.log_candidate_excluded(
                exclusion.professional_id,
                stage_name,
                f"{exclusion.reason_code.value}: {exclusion.detail}",
            )
        for near in eligibility.near_eligible:
            self.audit_logger.log_candidate_excluded(
                near.professional_id,
                stage_name,
                f"near_eligible {near.missed_criterion.value}: {near.gap_label}",
            )

    def _call(self, func: Callable[[], T], operation_name: str) -> T:
        if self.error_handler:
            return self.error_handler.retry(func, operation_name=operation_name)
        return func()

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers, thread_name_prefix="recommendation"
                )
            return self._executor
