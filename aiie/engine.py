"""
AIIE clinical scoring engine.

Converts a patient presentation into an explainable 1-9 appropriateness
score for an imaging modality.

GOVERNANCE:
- Deterministic: identical inputs always yield identical output
- Never raises for well-typed input, scoring must not block a render
- Factors are reported in a fixed evaluation order
"""

import logging
import math
from typing import Optional

from aiie.baselines import (
    ALTERNATIVE_RECOMMENDATION,
    FACTOR_WEIGHTS,
    GERIATRIC_AGE_LIMIT,
    MODALITY_BASELINES,
    PEDIATRIC_AGE_LIMIT,
    RED_FLAG_CAP,
    SCORE_MAX,
    SCORE_MIN,
    get_baseline,
    get_score_category,
)
from aiie.models import (
    ClinicalInput,
    Duration,
    ScoringResult,
    Severity,
    ShapFactor,
)

logger = logging.getLogger(__name__)


def _round_half_up(value: float, digits: int = 1) -> float:
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def _factor(
    key: str, factor: str, value: str, explanation: str, contribution=None
) -> ShapFactor:
    weight = FACTOR_WEIGHTS[key]
    return ShapFactor(
        factor=factor,
        contribution=weight.weight if contribution is None else contribution,
        value=value,
        explanation=explanation,
        evidence_citation=weight.citation,
    )


def _collect_factors(clinical_input: ClinicalInput) -> list[ShapFactor]:
    """Active factors in evaluation order."""
    factors: list[ShapFactor] = []
    has_prior_imaging = len(clinical_input.prior_imaging) > 0

    # 1. Red flags increase appropriateness
    if clinical_input.red_flags:
        count = len(clinical_input.red_flags)
        factors.append(
            _factor(
                "red_flag_per_item",
                "Red Flag Symptoms",
                ", ".join(clinical_input.red_flags),
                f"{count} red flag(s) present increase imaging urgency",
                contribution=min(
                    count * FACTOR_WEIGHTS["red_flag_per_item"].weight, RED_FLAG_CAP
                ),
            )
        )

    # 2. Neurologic deficit
    if clinical_input.neurologic_deficit:
        factors.append(
            _factor(
                "neurologic_deficit",
                "Neurologic Deficit",
                "Present",
                "Focal neurologic findings warrant urgent imaging",
            )
        )

    # 3. Cancer history
    if clinical_input.cancer_history:
        factors.append(
            _factor(
                "cancer_history",
                "Cancer History",
                "Present",
                "History of malignancy requires exclusion of metastatic disease",
            )
        )

    # 4. Duration (subacute contributes nothing)
    if clinical_input.duration == Duration.ACUTE:
        factors.append(
            _factor(
                "acute_onset",
                "Acute Onset",
                "<7 days",
                "Recent onset supports imaging workup",
            )
        )
    elif clinical_input.duration == Duration.CHRONIC:
        factors.append(
            _factor(
                "chronic_duration",
                "Chronic Duration",
                ">6 weeks",
                "Chronic conditions often managed conservatively first",
            )
        )

    # 5. Prior imaging without progression
    if has_prior_imaging and not clinical_input.progressive_symptoms:
        factors.append(
            _factor(
                "prior_imaging",
                "Prior Imaging Available",
                ", ".join(clinical_input.prior_imaging),
                "Recent normal imaging reduces utility of repeat study",
            )
        )

    # 6. Age extremes, applied once
    if clinical_input.age < PEDIATRIC_AGE_LIMIT:
        factors.append(
            _factor(
                "age_extreme",
                "Pediatric Patient",
                f"{clinical_input.age} years",
                "Pediatric patients require careful radiation consideration",
            )
        )
    elif clinical_input.age > GERIATRIC_AGE_LIMIT:
        factors.append(
            _factor(
                "age_extreme",
                "Geriatric Patient",
                f"{clinical_input.age} years",
                "Advanced age may increase suspicion for serious pathology",
            )
        )

    # 7. Progression despite prior workup
    if clinical_input.progressive_symptoms and has_prior_imaging:
        factors.append(
            _factor(
                "progressive_symptoms",
                "Progressive Symptoms",
                "Worsening despite prior workup",
                "Progressive symptoms warrant repeat imaging even with prior studies",
            )
        )

    # 8. Recent trauma
    if clinical_input.recent_trauma:
        factors.append(
            _factor(
                "recent_trauma",
                "Recent Trauma",
                "Present",
                "Traumatic mechanism increases likelihood of structural injury",
            )
        )

    # 9. Immunocompromised status
    if clinical_input.immunocompromised:
        factors.append(
            _factor(
                "immunocompromised",
                "Immunocompromised",
                "Present",
                "Immunocompromised patients at higher risk for opportunistic infections",
            )
        )

    # 10. Severity
    if clinical_input.severity == Severity.SEVERE:
        factors.append(
            _factor(
                "severe_symptoms",
                "Severe Symptoms",
                "Severe",
                "High symptom severity increases imaging appropriateness",
            )
        )
    elif (
        clinical_input.severity == Severity.MILD
        and clinical_input.duration == Duration.CHRONIC
    ):
        factors.append(
            _factor(
                "mild_chronic",
                "Mild Chronic Symptoms",
                "Mild, chronic",
                "Mild chronic symptoms may be managed conservatively",
            )
        )

    return factors


def score(clinical_input: Optional[ClinicalInput], modality: str) -> ScoringResult:
    """
    Score the appropriateness of a modality for a presentation.

    Args:
        clinical_input: Patient presentation, or None when case data is
            missing (scored as the plain baseline)
        modality: Modality name; unknown names use the default baseline

    Returns:
        Scoring result with the clamped score, category and factors
    """
    if modality not in MODALITY_BASELINES:
        logger.debug("unknown modality %r, using default baseline", modality)
    baseline = get_baseline(modality)
    factors = _collect_factors(clinical_input) if clinical_input is not None else []

    raw = baseline.base_score + sum(f.contribution for f in factors)
    final_score = max(SCORE_MIN, min(SCORE_MAX, _round_half_up(raw)))
    band = get_score_category(final_score)

    return ScoringResult(
        modality=modality,
        final_score=final_score,
        category=band["category"],
        category_label=band["label"],
        shap_factors=factors,
        radiation_level=baseline.radiation,
        estimated_cost=baseline.cost,
        alternative_recommendation=(
            ALTERNATIVE_RECOMMENDATION if final_score < 4 else None
        ),
    )


def rank_imaging_options(
    clinical_input: Optional[ClinicalInput], modalities: list[str]
) -> list[ScoringResult]:
    """Score every modality, best first. Ties keep their input order."""
    results = [score(clinical_input, m) for m in modalities]
    return sorted(results, key=lambda r: r.final_score, reverse=True)


def explain(result: ScoringResult) -> str:
    """
    Format a scoring result into a human-readable report.

    Args:
        result: Result returned by :func:`score`

    Returns:
        Multi-line explanation string
    """
    lines: list[str] = [
        f"=== AIIE appropriateness: {result.modality} ===",
        f"score: {result.final_score:.1f}/9 ({result.category_label})",
        f"radiation: {result.radiation_level}, cost: {result.estimated_cost}",
        "",
    ]

    if not result.shap_factors:
        lines.append("no clinical adjustments, baseline score applies")
    else:
        lines.append("--- contributing factors ---")
        for factor in result.shap_factors:
            lines.append(
                f"{factor.contribution:+.1f} {factor.factor} ({factor.value})"
            )
            lines.append(f"  {factor.explanation} [{factor.evidence_citation}]")

    if result.alternative_recommendation:
        lines.append("")
        lines.append(f"alternative: {result.alternative_recommendation}")

    return "\n".join(lines)
