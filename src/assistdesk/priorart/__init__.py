"""Prior-art catalogue and invalidity confidence scoring."""

from assistdesk.priorart.catalogue import (
    ELEMENT_TYPES,
    PATENT_CLAIM_ELEMENTS,
    PATENT_PRIOR_ART_MAP,
    PRIOR_ART_DB,
    PRIOR_ART_ELEMENT_COVERAGE,
    ElementType,
    PriorArtReference,
    ReferenceType,
    get_all_prior_art,
    get_coverage,
    get_prior_art,
    get_prior_art_for_element,
    get_prior_art_for_patent,
    validate_catalogue,
)
from assistdesk.priorart.scoring import (
    ClaimScore,
    ElementConfidence,
    PatentScore,
    claim_confidence,
    element_confidence,
    patent_confidence,
    score_all_patents,
    score_patent,
    scores_to_frame,
)

__all__ = [
    # Catalogue
    "ELEMENT_TYPES",
    "PATENT_CLAIM_ELEMENTS",
    "PATENT_PRIOR_ART_MAP",
    "PRIOR_ART_DB",
    "PRIOR_ART_ELEMENT_COVERAGE",
    "ElementType",
    "PriorArtReference",
    "ReferenceType",
    "get_all_prior_art",
    "get_coverage",
    "get_prior_art",
    "get_prior_art_for_element",
    "get_prior_art_for_patent",
    "validate_catalogue",
    # Scoring
    "ClaimScore",
    "ElementConfidence",
    "PatentScore",
    "claim_confidence",
    "element_confidence",
    "patent_confidence",
    "score_all_patents",
    "score_patent",
    "scores_to_frame",
]
