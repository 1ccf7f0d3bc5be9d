"""Invalidity confidence scoring over the prior-art catalogue.

Three levels, each derived from the one below:

- Element: the strongest reference covering a claim element, boosted by
  +2 per additional corroborating reference, capped at 98.
- Claim: weakest-link blend, 60% minimum element plus 40% mean.
- Patent: mean of its claim confidences.

All values are integers in [0, 100], rounded half up. Scoring is pure:
the same catalogue always yields the same numbers, and missing catalogue
entries count as zero coverage instead of raising.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple

import polars as pl

from assistdesk.priorart.catalogue import (
    PATENT_CLAIM_ELEMENTS,
    PATENT_PRIOR_ART_MAP,
    PRIOR_ART_ELEMENT_COVERAGE,
)

logger = logging.getLogger(__name__)

CORROBORATION_CAP = 98
CORROBORATION_STEP = 2

CoverageTable = Mapping[str, Mapping[str, int]]
ClaimElementMap = Mapping[str, Sequence[str]]


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative scores (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class ElementConfidence:
    confidence: int
    best_reference: str = ""
    contributing_references: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "confidence": self.confidence,
            "best_reference": self.best_reference,
            "contributing_references": list(self.contributing_references),
        }


@dataclass(frozen=True)
class ClaimScore:
    confidence: int
    elements: Mapping[str, ElementConfidence] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "confidence": self.confidence,
            "elements": {name: e.to_dict() for name, e in self.elements.items()},
        }


@dataclass(frozen=True)
class PatentScore:
    patent_id: str
    confidence: int
    claims: Mapping[str, ClaimScore] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "patent_id": self.patent_id,
            "confidence": self.confidence,
            "claims": {label: c.to_dict() for label, c in self.claims.items()},
        }


def element_confidence(
    element_type: str,
    prior_art_ids: Iterable[str],
    coverage: Optional[CoverageTable] = None,
) -> ElementConfidence:
    """Confidence that the given references disclose one claim element.

    Args:
        element_type: Element type id, e.g. "male_plug".
        prior_art_ids: Candidate references, in priority order. On equal
            coverage the earlier reference is reported as best.
        coverage: Coverage table. Defaults to the catalogue's.

    Returns:
        ElementConfidence. Confidence 0 with no best reference when nothing
        covers the element.
    """
    coverage = PRIOR_ART_ELEMENT_COVERAGE if coverage is None else coverage

    best = 0
    best_ref = ""
    contributing = []
    for ref_id in prior_art_ids:
        strength = coverage.get(ref_id, {}).get(element_type, 0)
        if not strength:
            continue
        contributing.append(ref_id)
        if strength > best:
            best = strength
            best_ref = ref_id

    if len(contributing) > 1:
        best = min(CORROBORATION_CAP, best + (len(contributing) - 1) * CORROBORATION_STEP)

    return ElementConfidence(best, best_ref, tuple(contributing))


def claim_confidence(element_confidences: Sequence[float]) -> int:
    """Weakest-link claim score: 60% of the minimum plus 40% of the mean."""
    if not element_confidences:
        return 0
    weakest = min(element_confidences)
    mean = sum(element_confidences) / len(element_confidences)
    return round_half_up(weakest * 0.6 + mean * 0.4)


def patent_confidence(claim_confidences: Sequence[float]) -> int:
    """Mean of the claim confidences."""
    if not claim_confidences:
        return 0
    return round_half_up(sum(claim_confidences) / len(claim_confidences))


def score_patent(
    patent_id: str,
    claim_element_map: ClaimElementMap,
    prior_art_map: Optional[Mapping[str, Sequence[str]]] = None,
    coverage: Optional[CoverageTable] = None,
) -> PatentScore:
    """Score every claim of one patent against its mapped prior art.

    Elements no reference covers are reported with confidence 0 but do not
    pull the claim score down; a claim with no covered elements scores 0.
    A patent with no mapped prior art scores 0 throughout.

    Args:
        patent_id: Patent short id, e.g. "550".
        claim_element_map: Claim label -> element types recited.
        prior_art_map: Patent id -> reference ids. Defaults to the catalogue's.
        coverage: Coverage table. Defaults to the catalogue's.

    Returns:
        PatentScore with one ClaimScore per claim, in input order.
    """
    prior_art_map = PATENT_PRIOR_ART_MAP if prior_art_map is None else prior_art_map
    prior_art_ids = list(prior_art_map.get(patent_id, ()))
    if not prior_art_ids:
        logger.debug(f"No prior art mapped for patent {patent_id}")

    claims: Dict[str, ClaimScore] = {}
    for label, element_types in claim_element_map.items():
        elements: Dict[str, ElementConfidence] = {}
        confidences = []
        for element_type in element_types:
            result = element_confidence(element_type, prior_art_ids, coverage)
            elements[element_type] = result
            if result.confidence > 0:
                confidences.append(result.confidence)
        claims[label] = ClaimScore(claim_confidence(confidences), elements)

    return PatentScore(
        patent_id=patent_id,
        confidence=patent_confidence([c.confidence for c in claims.values()]),
        claims=claims,
    )


def score_all_patents(
    claim_elements: Optional[Mapping[str, ClaimElementMap]] = None,
) -> Dict[str, PatentScore]:
    """Score every patent in the claim-element map, in map order."""
    claim_elements = PATENT_CLAIM_ELEMENTS if claim_elements is None else claim_elements
    scores = {
        patent_id: score_patent(patent_id, claim_map)
        for patent_id, claim_map in claim_elements.items()
    }
    logger.info(f"Scored {len(scores)} patents")
    return scores


def scores_to_frame(scores: Iterable[PatentScore]) -> pl.DataFrame:
    """Flatten patent scores to one row per (patent, claim, element)."""
    rows = []
    for patent in scores:
        for label, claim in patent.claims.items():
            for element_type, element in claim.elements.items():
                rows.append({
                    "patent_id": patent.patent_id,
                    "claim": label,
                    "element_type": element_type,
                    "element_confidence": element.confidence,
                    "best_reference": element.best_reference,
                    "contributing_references": ";".join(element.contributing_references),
                    "claim_confidence": claim.confidence,
                    "patent_confidence": patent.confidence,
                })

    return pl.DataFrame(
        rows,
        schema={
            "patent_id": pl.Utf8,
            "claim": pl.Utf8,
            "element_type": pl.Utf8,
            "element_confidence": pl.Int64,
            "best_reference": pl.Utf8,
            "contributing_references": pl.Utf8,
            "claim_confidence": pl.Int64,
            "patent_confidence": pl.Int64,
        },
    )
