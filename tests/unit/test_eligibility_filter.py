"""
Unit Tests for EligibilityFilter.

Test Aspects Covered:
    ✅ Business Logic: Each hard rule, soft near-eligibility
    ✅ Edge Cases: Several failing rules, no derivable clientele
    ✅ Invariants: Exclusions, near-eligible and eligible are disjoint
"""

from __future__ import annotations

import pytest

from demande_recommender.config.models import EligibilityConfig
from demande_recommender.domain.entities import (
    Demande,
    DemandType,
    ExclusionReason,
    PopulationCategory,
    ProficiencyLevel,
    SoftCriterion,
)
from demande_recommender.filters.eligibility import EligibilityFilter
from tests.fixtures import CandidateFactory


@pytest.fixture
def eligibility_filter(eligibility_config: EligibilityConfig) -> EligibilityFilter:
    return EligibilityFilter(eligibility_config)


class TestHardRules:
    """Test cases for hard exclusions."""

    def test_eligible_candidate_passes(
        self,
        eligibility_filter: EligibilityFilter,
        adult_demande: Demande,
        make_candidate: CandidateFactory,
    ) -> None:
        """
        SCENARIO: Active adult specialist with plenty of slots
        EXPECTED: Eligible, nothing excluded
        """
        # Arrange
        candidate = make_candidate("pro-1")

        # Act
        result = eligibility_filter.apply(adult_demande, [candidate])

        # Assert
        assert result.eligible == [candidate]
        assert result.exclusions == []
        assert result.near_eligible == []

    def test_inactive_status_excluded(
        self,
        eligibility_filter: EligibilityFilter,
        adult_demande: Demande,
        make_candidate: CandidateFactory,
    ) -> None:
        """
        SCENARIO: Professional with suspended status
        EXPECTED: license_inactive
        """
        result = eligibility_filter.apply(
            adult_demande, [make_candidate("pro-1", status="suspended")]
        )

        assert result.exclusions[0].reason_code == ExclusionReason.LICENSE_INACTIVE

    def test_zero_slots_excluded_not_ranked(
        self,
        eligibility_filter: EligibilityFilter,
        adult_demande: Demande,
        make_candidate: CandidateFactory,
    ) -> None:
        """
        SCENARIO: No motif match, 0 slots, 0 experience
        EXPECTED: Excluded with no_availability, never eligible
        """
        # Arrange
        candidate = make_candidate("pro-y", slots=0, years=0, motifs=())

        # Act
        result = eligibility_filter.apply(adult_demande, [candidate])

        # Assert
        assert result.eligible == []
        assert result.exclusions[0].professional_id == "pro-y"
        assert result.exclusions[0].reason_code == ExclusionReason.NO_AVAILABILITY

    def test_couple_requires_couples_specialty(
        self,
        eligibility_filter: EligibilityFilter,
        make_candidate: CandidateFactory,
    ) -> None:
        """
        SCENARIO: Couple demande, candidate without couples specialty
        EXPECTED: demand_type_incompatible
        """
        # Arrange
        demande = Demande(
            demande_id="DEM-1",
            demand_type=DemandType.COUPLE,
            population_categories=(PopulationCategory.ADULTS,),
        )
        with_couples = make_candidate(
            "pro-1",
            specialties=[("adults", ProficiencyLevel.PRIMARY), ("couples", None)],
        )
        without = make_candidate("pro-2")

        # Act
        result = eligibility_filter.apply(demande, [with_couples, without])

        # Assert
        assert [c.professional_id for c in result.eligible] == ["pro-1"]
        assert result.exclusions[0].reason_code == ExclusionReason.DEMAND_TYPE_INCOMPATIBLE

    def test_clientele_not_covered(
        self,
        eligibility_filter: EligibilityFilter,
        make_candidate: CandidateFactory,
    ) -> None:
        """
        SCENARIO: Child demande, adult-only professional
        EXPECTED: clientele_ineligible
        """
        demande = Demande(
            demande_id="DEM-1",
            population_categories=(PopulationCategory.CHILDREN,),
        )

        result = eligibility_filter.apply(demande, [make_candidate("pro-1")])

        assert result.exclusions[0].reason_code == ExclusionReason.CLIENTELE_INELIGIBLE

    def test_any_covered_category_passes(
        self,
        eligibility_filter: EligibilityFilter,
        make_candidate: CandidateFactory,
    ) -> None:
        """
        SCENARIO: Family with a child and adults, candidate covers adults
        EXPECTED: Clientele rule passes
        """
        demande = Demande(
            demande_id="DEM-1",
            population_categories=(PopulationCategory.CHILDREN, PopulationCategory.ADULTS),
        )

        result = eligibility_filter.apply(demande, [make_candidate("pro-1")])

        assert result.eligible_count == 1

    def test_no_derivable_clientele_passes(
        self,
        eligibility_filter: EligibilityFilter,
        make_candidate: CandidateFactory,
    ) -> None:
        """
        SCENARIO: No participant birthdates known
        EXPECTED: Clientele rule skipped
        """
        demande = Demande(demande_id="DEM-1")

        result = eligibility_filter.apply(demande, [make_candidate("pro-1", specialties=())])

        assert result.eligible_count == 1

    def test_required_specialty_missing(
        self,
        eligibility_filter: EligibilityFilter,
        make_candidate: CandidateFactory,
    ) -> None:
        """
        SCENARIO: Demande requires trauma specialty
        EXPECTED: specialty_mismatch listing the missing code
        """
        demande = Demande(demande_id="DEM-1", required_specialties=frozenset({"trauma"}))

        result = eligibility_filter.apply(demande, [make_candidate("pro-1")])

        exclusion = result.exclusions[0]
        assert exclusion.reason_code == ExclusionReason.SPECIALTY_MISMATCH
        assert exclusion.context["missing_specialties"] == ["trauma"]

    def test_motif_overlap_only_when_required(
        self,
        adult_demande: Demande,
        make_candidate: CandidateFactory,
    ) -> None:
        """
        SCENARIO: Candidate shares no motif with the demande
        EXPECTED: Eligible by default, excluded when overlap is required
        """
        # Arrange
        candidate = make_candidate("pro-1", motifs=("grief",))
        strict = EligibilityFilter(EligibilityConfig(require_motif_overlap=True))

        # Act
        lenient_result = EligibilityFilter(EligibilityConfig()).apply(adult_demande, [candidate])
        strict_result = strict.apply(adult_demande, [candidate])

        # Assert
        assert lenient_result.eligible_count == 1
        assert strict_result.exclusions[0].reason_code == ExclusionReason.NO_MOTIF_OVERLAP

    def test_first_failing_rule_is_reason(
        self,
        eligibility_filter: EligibilityFilter,
        make_candidate: CandidateFactory,
    ) -> None:
        """
        SCENARIO: Inactive, no slots and wrong clientele at once
        EXPECTED: license_inactive reported, others kept as additional
        """
        demande = Demande(
            demande_id="DEM-1",
            population_categories=(PopulationCategory.CHILDREN,),
        )
        candidate = make_candidate("pro-1", status="inactive", slots=0)

        result = eligibility_filter.apply(demande, [candidate])

        exclusion = result.exclusions[0]
        assert exclusion.reason_code == ExclusionReason.LICENSE_INACTIVE
        assert exclusion.additional_reasons == [
            ExclusionReason.NO_AVAILABILITY,
            ExclusionReason.CLIENTELE_INELIGIBLE,
        ]

    def test_unavailable_data_excluded(
        self,
        eligibility_filter: EligibilityFilter,
        adult_demande: Demande,
        make_candidate: CandidateFactory,
    ) -> None:
        """
        SCENARIO: Collector could not fetch one professional's data
        EXPECTED: data_unavailable exclusion, sorted first
        """
        result = eligibility_filter.apply(
            adult_demande,
            [make_candidate("pro-1", slots=0)],
            unavailable={"pro-9": "availability fetch failed: ConnectionError"},
        )

        assert [e.reason_code for e in result.exclusions] == [
            ExclusionReason.DATA_UNAVAILABLE,
            ExclusionReason.NO_AVAILABILITY,
        ]


class TestSoftRules:
    """Test cases for near-eligibility."""

    def test_limited_availability_is_near_eligible(
        self,
        adult_demande: Demande,
        make_candidate: CandidateFactory,
    ) -> None:
        """
        SCENARIO: 1 slot against a comfortable threshold of 3
        EXPECTED: Near-eligible with "2 slots short", not excluded
        """
        # Arrange
        f = EligibilityFilter(EligibilityConfig(comfortable_slot_threshold=3))
        candidate = make_candidate("pro-z", slots=1)

        # Act
        result = f.apply(adult_demande, [candidate])

        # Assert
        assert result.eligible == []
        assert result.exclusions == []
        near = result.near_eligible[0]
        assert near.missed_criterion == SoftCriterion.LIMITED_AVAILABILITY
        assert near.gap == 2
        assert near.gap_label == "2 slots short"
        assert near.next_available_slot is not None

    def test_hard_rule_takes_precedence(
        self,
        make_candidate: CandidateFactory,
    ) -> None:
        """
        SCENARIO: 1 slot (soft miss) and wrong clientele (hard miss)
        EXPECTED: Excluded, not near-eligible
        """
        f = EligibilityFilter(EligibilityConfig(comfortable_slot_threshold=3))
        demande = Demande(
            demande_id="DEM-1",
            population_categories=(PopulationCategory.SENIORS,),
        )

        result = f.apply(demande, [make_candidate("pro-z", slots=1)])

        assert result.near_eligible == []
        assert result.exclusions[0].reason_code == ExclusionReason.CLIENTELE_INELIGIBLE

    def test_limited_experience(
        self,
        adult_demande: Demande,
        make_candidate: CandidateFactory,
    ) -> None:
        """
        SCENARIO: 0.5 years against a 2-year soft minimum
        EXPECTED: Near-eligible with "1.5 years short"
        """
        f = EligibilityFilter(EligibilityConfig(soft_min_years_experience=2))

        result = f.apply(adult_demande, [make_candidate("pro-1", years=0.5)])

        near = result.near_eligible[0]
        assert near.missed_criterion == SoftCriterion.LIMITED_EXPERIENCE
        assert near.gap_label == "1.5 years short"

    def test_sets_are_disjoint(
        self,
        adult_demande: Demande,
        make_candidate: CandidateFactory,
    ) -> None:
        """
        SCENARIO: Mixed pool of eligible, near-eligible and excluded
        EXPECTED: Each candidate appears in exactly one list
        """
        # Arrange
        f = EligibilityFilter(EligibilityConfig(comfortable_slot_threshold=3))
        candidates = [
            make_candidate("pro-1"),
            make_candidate("pro-2", slots=1),
            make_candidate("pro-3", slots=0),
            make_candidate("pro-4", status="inactive"),
        ]

        # Act
        result = f.apply(adult_demande, candidates)

        # Assert
        eligible = {c.professional_id for c in result.eligible}
        excluded = {e.professional_id for e in result.exclusions}
        near = {n.professional_id for n in result.near_eligible}
        assert eligible == {"pro-1"}
        assert near == {"pro-2"}
        assert excluded == {"pro-3", "pro-4"}
