"""
Prompt Builder - System Prompt and User Prompt Template.

The user prompt is a template with ``{{placeholder}}`` markers filled from
the sanitized advisory input. Both prompts can be overridden per
configuration; a custom template must keep the required placeholders.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Dict, Iterable, List

if TYPE_CHECKING:
    from demande_recommender.sanitization.models import AdvisoryInput

PLACEHOLDERS = (
    "demand_type",
    "urgency",
    "motif_keys",
    "client_text",
    "has_legal_context",
    "population_categories",
    "candidates_json",
    "candidates_count",
    "holistic_score",
    "holistic_category",
    "holistic_keywords",
    "recommend_naturopath",
    "has_clinical_override",
)

REQUIRED_PLACEHOLDERS = ("demand_type", "candidates_json")

DEFAULT_SYSTEM_PROMPT = """\
Tu es un assistant d'orientation qui aide le personnel d'une clinique de santé \
mentale et de bien-être à jumeler des demandes de consultation avec des \
professionnels.

Limites:
- Aucun diagnostic clinique, aucune recommandation de traitement
- Tu évalues seulement la correspondance entre les besoins exprimés et les \
profils déjà présélectionnés
- Réponses en français canadien

Approche globale (naturopathe):
- Si le signal holistique recommande un naturopathe et qu'aucun indicateur de \
crise n'est détecté, favorise le naturopathe dans tes ajustements.
- Si des indicateurs de crise sont présents, le psychologue ou le \
psychothérapeute reste prioritaire, même avec des besoins holistiques.

Réponds uniquement avec un objet JSON valide."""

DEFAULT_USER_PROMPT_TEMPLATE = """\
Analyse la demande suivante et ajuste le classement des candidats.

## Demande
- Type de consultation: {{demand_type}}
- Urgence: {{urgency}}
- Motifs: {{motif_keys}}
- Clientèle: {{population_categories}}
- Contexte juridique: {{has_legal_context}}

## Signal holistique
- Score: {{holistic_score}}
- Catégorie: {{holistic_category}}
- Mots-clés: {{holistic_keywords}}
- Naturopathe recommandé: {{recommend_naturopath}}
- Indicateurs de crise: {{has_clinical_override}}

## Description (anonymisée)
{{client_text}}

## Candidats ({{candidates_count}}), triés par score déterministe
{{candidates_json}}

## Réponse attendue (JSON strict)
{
  "extracted_preferences": {
    "preferred_timing": "string ou null",
    "preferred_modality": "string ou null",
    "other_constraints": []
  },
  "rankings": [
    {
      "professional_id": "id du candidat",
      "ranking_adjustment": 0,
      "reasoning": ["3 à 5 points en français"],
      "confidence": 0.8
    }
  ],
  "summary": "2 ou 3 phrases pour le personnel."
}

ranking_adjustment est compris entre -5 et +5; confidence entre 0 et 1."""


def _marker(name: str) -> str:
    return "{{" + name + "}}"


def _join(values: Iterable[str]) -> str:
    items = list(values)
    return ", ".join(items) if items else "aucun"


def _yes_no(flag: bool, yes: str = "oui") -> str:
    return yes if flag else "non"


def format_candidates(advisory_input: AdvisoryInput) -> str:
    """JSON listing of the sanitized candidates with their current rank."""
    rows = [
        {
            "rank": index,
            "id": c.id,
            "profession_type": c.profession_type,
            "deterministic_score": round(c.deterministic_score, 2),
            "matched_motif_count": c.matched_motif_count,
            "available_slot_count": c.available_slot_count,
            "years_experience": c.years_experience,
        }
        for index, c in enumerate(advisory_input.candidates, start=1)
    ]
    return json.dumps(rows, indent=2, ensure_ascii=False)


def placeholder_values(advisory_input: AdvisoryInput) -> Dict[str, str]:
    signal = advisory_input.holistic_signal
    return {
        "demand_type": advisory_input.demand_type,
        "urgency": advisory_input.urgency,
        "motif_keys": _join(advisory_input.motif_keys),
        "has_legal_context": _yes_no(
            advisory_input.has_legal_context, "oui (contexte juridique ou médiation)"
        ),
        "population_categories": _join(advisory_input.population_categories),
        "candidates_json": format_candidates(advisory_input),
        "candidates_count": str(len(advisory_input.candidates)),
        "holistic_score": f"{signal.score:.2f}",
        "holistic_category": signal.category.value,
        "holistic_keywords": _join(signal.matched_keywords),
        "recommend_naturopath": _yes_no(signal.recommend_naturopath),
        "has_clinical_override": _yes_no(signal.has_clinical_override),
        # Last, so markers typed by the client are never expanded
        "client_text": advisory_input.client_text or "Aucune description fournie.",
    }


def build_user_prompt(advisory_input: AdvisoryInput, template: str) -> str:
    """Fill every known placeholder in template."""
    prompt = template
    for name, value in placeholder_values(advisory_input).items():
        prompt = prompt.replace(_marker(name), value)
    return prompt


def missing_placeholders(template: str) -> List[str]:
    """Required placeholders absent from a custom template."""
    return [_marker(name) for name in REQUIRED_PLACEHOLDERS if _marker(name) not in template]
