"""
Sanitizer - Privacy Boundary Before the Advisory Model.

Projects the demande and scored candidates into an AdvisoryInput:
    - Client free text is scrubbed of emails, dates, phone numbers,
      postal codes and honorific + surname patterns
    - Candidates are reduced to the whitelisted keys (no names)
    - The scrubbed text is re-scanned; any surviving pattern is a defect

Design Notes:
    - Fails closed: SanitizationViolation aborts the run before any
      external call, and is logged at CRITICAL
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Pattern, Tuple

from demande_recommender.advisory.holistic import classify_holistic_intent
from demande_recommender.domain.entities import Demande, ScoredCandidate
from demande_recommender.domain.exceptions import SanitizationViolation
from demande_recommender.sanitization.models import AdvisoryInput, SanitizedCandidate

logger = logging.getLogger(__name__)

# Applied in order; emails go first so their digits are not read as phones
PII_PATTERNS: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("[EMAIL]", re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")),
    ("[DATE]", re.compile(r"\d{4}-\d{2}-\d{2}|\d{2}/\d{2}/\d{4}")),
    ("[PHONE]", re.compile(r"(\+?1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")),
    ("[POSTAL]", re.compile(r"[A-Za-z]\d[A-Za-z][\s-]?\d[A-Za-z]\d")),
    ("[NAME]", re.compile(r"\b(M\.|Mme\.|Dr\.|Me\.)\s+[A-Z][a-zÀ-ÿ]+")),
)


def scrub_text(text: str) -> str:
    """Replace every PII pattern with its token."""
    if not text:
        return ""
    for token, pattern in PII_PATTERNS:
        text = pattern.sub(token, text)
    return text


def find_pii(text: str) -> List[str]:
    """Tokens of the patterns still matching text."""
    return [token for token, pattern in PII_PATTERNS if pattern.search(text)]


class Sanitizer:
    """Builds the sanitized advisory input."""

    @property
    def name(self) -> str:
        return "sanitizer"

    def sanitize(
        self,
        demande: Demande,
        scored: List[ScoredCandidate],
    ) -> AdvisoryInput:
        """
        Build the advisory input for a demande.

        Args:
            demande: The demande being matched
            scored: Candidates with deterministic scores

        Returns:
            AdvisoryInput with candidates ordered by deterministic score

        Raises:
            SanitizationViolation: If a candidate projection carries a
                non-whitelisted key or PII survives scrubbing
        """
        try:
            candidates = [
                SanitizedCandidate.model_validate(self.project(demande, s))
                for s in scored
            ]
            candidates.sort(key=lambda c: (-c.deterministic_score, c.id))

            client_text = scrub_text("\n\n".join(demande.clinical_text_parts))
            self.verify_text(client_text)
        except SanitizationViolation as e:
            logger.critical(f"Sanitization failed for {demande.demande_id}: {e}")
            raise

        return AdvisoryInput(
            demand_type=demande.demand_type.value,
            urgency=demande.urgency.value,
            motif_keys=sorted(demande.motif_keys),
            client_text=client_text,
            has_legal_context=demande.has_legal_context,
            population_categories=[c.value for c in demande.population_categories],
            candidates=candidates,
            holistic_signal=classify_holistic_intent(client_text),
        )

    def project(self, demande: Demande, scored: ScoredCandidate) -> Dict[str, object]:
        """Whitelisted view of one scored candidate."""
        candidate = scored.candidate
        return {
            "id": candidate.professional_id,
            "profession_type": candidate.profession_type,
            "deterministic_score": scored.total,
            "matched_motif_count": len(scored.scores.matched_motifs),
            "available_slot_count": candidate.availability.slots_in_window,
            "years_experience": candidate.years_experience,
        }

    def verify_text(self, text: str) -> None:
        """Raise SanitizationViolation if any PII pattern still matches."""
        leaked = find_pii(text)
        if leaked:
            raise SanitizationViolation(
                f"PII patterns survived scrubbing: {', '.join(leaked)}"
            )
