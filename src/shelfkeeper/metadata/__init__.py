# ABOUTME: Metadata package: candidate types, catalog sources, and scoring.
# ABOUTME: Exports the data model and source protocol used by the lookup pipeline.

from shelfkeeper.metadata.provider import CatalogSource
from shelfkeeper.metadata.scoring import pick_best, reconcile, score_candidate
from shelfkeeper.metadata.types import CandidateMetadata, ResolvedMetadata, Source

__all__ = [
    "CandidateMetadata",
    "CatalogSource",
    "ResolvedMetadata",
    "Source",
    "pick_best",
    "reconcile",
    "score_candidate",
]
