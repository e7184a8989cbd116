"""
Holistic Intent Classifier.

Scans sanitized client text for body, energy, lifestyle and global-approach
keywords (French) and for clinical-crisis keywords. The resulting signal is
handed to the advisory model as context: a strong holistic signal without
any crisis keyword favours a naturopath.

Matching is case- and accent-insensitive. Single-word keywords match as a
word prefix ("suicidaire" matches "suicidaires"); phrases match as written.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Dict, List

from demande_recommender.advisory.models import HolisticCategory, HolisticSignal

HOLISTIC_KEYWORDS: Dict[HolisticCategory, List[str]] = {
    HolisticCategory.BODY: [
        "corps", "digestion", "intestin", "alimentation", "poids", "physique",
        "douleur", "tension", "posture", "nutrition", "diète", "métabolisme",
    ],
    HolisticCategory.ENERGY: [
        "énergie", "fatigue", "sommeil", "épuisement", "hormones", "vitalité",
        "burnout", "insomnie", "réveil", "endormissement", "cycles",
        "ménopause", "thyroïde",
    ],
    HolisticCategory.LIFESTYLE: [
        "habitudes de vie", "équilibre de vie", "routine", "mode de vie",
        "stress chronique", "hygiène de vie", "rythme de vie",
        "organisation quotidienne",
    ],
    HolisticCategory.GLOBAL: [
        "approche globale", "holistique", "naturel", "bien-être",
        "naturopathie", "santé naturelle", "médecine douce", "complémentaire",
        "prévention",
    ],
}

CLINICAL_OVERRIDE_KEYWORDS: List[str] = [
    "idées noires", "suicidaire", "suicide", "crise", "trauma", "traumatisme",
    "détresse importante", "détresse sévère", "violence", "urgence", "danger",
    "automutilation", "psychose", "hallucination", "délire", "dissociation",
    "panique", "attaque de panique", "abus", "agression",
]

CATEGORY_WEIGHTS: Dict[HolisticCategory, float] = {
    HolisticCategory.GLOBAL: 0.4,
    HolisticCategory.LIFESTYLE: 0.3,
    HolisticCategory.ENERGY: 0.2,
    HolisticCategory.BODY: 0.2,
}

# Primary category precedence when several match
CATEGORY_PRECEDENCE = (
    HolisticCategory.GLOBAL,
    HolisticCategory.LIFESTYLE,
    HolisticCategory.ENERGY,
    HolisticCategory.BODY,
)

NATUROPATH_THRESHOLD = 0.5


def normalize_text(text: str) -> str:
    """Lowercase, strip accents and collapse whitespace."""
    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return re.sub(r"\s+", " ", stripped).strip()


def contains_keyword(normalized_text: str, keyword: str) -> bool:
    normalized_keyword = normalize_text(keyword)
    if " " in normalized_keyword:
        return normalized_keyword in normalized_text
    return re.search(rf"\b{re.escape(normalized_keyword)}", normalized_text) is not None


def find_keywords(normalized_text: str, keywords: List[str]) -> List[str]:
    return [k for k in keywords if contains_keyword(normalized_text, k)]


def _score(matches: Dict[HolisticCategory, List[str]]) -> float:
    total = 0.0
    categories_matched = 0
    for category, weight in CATEGORY_WEIGHTS.items():
        found = matches[category]
        if found:
            categories_matched += 1
            total += weight + min(len(found) * 0.1, 0.3)

    if categories_matched >= 2:
        total += 0.15
    if categories_matched >= 3:
        total += 0.1
    return min(total, 1.0)


def classify_holistic_intent(text: str) -> HolisticSignal:
    """
    Classify client text for holistic intent.

    Args:
        text: Sanitized client text

    Returns:
        HolisticSignal; empty text yields a neutral signal
    """
    if not text or not text.strip():
        return HolisticSignal()

    normalized = normalize_text(text)
    matches = {
        category: find_keywords(normalized, keywords)
        for category, keywords in HOLISTIC_KEYWORDS.items()
    }
    clinical = find_keywords(normalized, CLINICAL_OVERRIDE_KEYWORDS)

    score = _score(matches)
    category = next(
        (c for c in CATEGORY_PRECEDENCE if matches[c]), HolisticCategory.NONE
    )

    return HolisticSignal(
        score=score,
        category=category,
        matched_keywords=[k for c in HOLISTIC_KEYWORDS for k in matches[c]],
        recommend_naturopath=score >= NATUROPATH_THRESHOLD and not clinical,
        has_clinical_override=bool(clinical),
        clinical_keywords_found=clinical,
    )
