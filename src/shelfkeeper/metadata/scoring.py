# ABOUTME: Scoring and reconciliation of candidates gathered from several catalogs.
# ABOUTME: Prefers Russian-language records, then fills cover and language gaps from the rest.

import re

from shelfkeeper.isbn.normalizer import derived_isbn10, region_language
from shelfkeeper.metadata.types import CandidateMetadata, ResolvedMetadata

# Score weights. These pin the current preference for Russian-language
# records; they are heuristics, not a calibrated model.
WEIGHT_PREFERRED_LANGUAGE = 4
WEIGHT_CYRILLIC_TITLE = 3
WEIGHT_CYRILLIC_AUTHORS = 2
WEIGHT_HAS_COVER = 1

PREFERRED_LANGUAGE = "ru"

_CYRILLIC_RE = re.compile(r"[\u0400-\u04FF]")


def contains_cyrillic(text: str | None) -> bool:
    """Whether text contains at least one Cyrillic letter."""
    return bool(text) and _CYRILLIC_RE.search(text) is not None


def score_candidate(candidate: CandidateMetadata) -> int:
    """Score a candidate; higher is better."""
    score = 0
    if (candidate.language or "").lower() == PREFERRED_LANGUAGE:
        score += WEIGHT_PREFERRED_LANGUAGE
    if contains_cyrillic(candidate.title):
        score += WEIGHT_CYRILLIC_TITLE
    if contains_cyrillic(candidate.authors):
        score += WEIGHT_CYRILLIC_AUTHORS
    if candidate.has_cover:
        score += WEIGHT_HAS_COVER
    return score


def pick_best(candidates: list[CandidateMetadata]) -> CandidateMetadata | None:
    """Return the highest-scoring candidate.

    Ties go to the candidate that appears first, so the order sources were
    attempted in decides between equals.
    """
    best: CandidateMetadata | None = None
    best_score = -1
    for candidate in candidates:
        score = score_candidate(candidate)
        if score > best_score:
            best, best_score = candidate, score
    return best


def reconcile(candidates: list[CandidateMetadata], isbn13: str) -> ResolvedMetadata | None:
    """Reduce all candidates for an ISBN to one ResolvedMetadata.

    The winner borrows the first cover found among the other candidates when
    it has none, and takes the ISBN's regional language when it reports none.
    Returns None when there are no candidates.
    """
    winner = pick_best(candidates)
    if winner is None:
        return None

    resolved = ResolvedMetadata.from_candidate(winner, isbn13)

    if not resolved.cover_url:
        borrowed = next((c.cover_url for c in candidates if c.has_cover), None)
        if borrowed:
            resolved = resolved.with_changes(cover_url=borrowed)

    if not resolved.language:
        fallback = region_language(isbn13)
        if fallback:
            resolved = resolved.with_changes(language=fallback)

    if not resolved.isbn10:
        resolved = resolved.with_changes(isbn10=derived_isbn10(isbn13))

    return resolved
