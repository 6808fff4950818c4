# ABOUTME: Unit tests for candidate scoring and reconciliation.
# ABOUTME: Pins the current weights, tie-breaking by source order, and cover/language fallbacks.

from dataclasses import replace

from shelfkeeper.metadata.scoring import (
    WEIGHT_CYRILLIC_AUTHORS,
    WEIGHT_CYRILLIC_TITLE,
    WEIGHT_HAS_COVER,
    WEIGHT_PREFERRED_LANGUAGE,
    contains_cyrillic,
    pick_best,
    reconcile,
    score_candidate,
)
from shelfkeeper.metadata.types import CandidateMetadata, Source

RU_ISBN13 = "9785170908257"
EN_ISBN13 = "9780306406157"


class TestContainsCyrillic:
    """Tests for contains_cyrillic."""

    def test_cyrillic(self) -> None:
        assert contains_cyrillic("Мастер")

    def test_mixed(self) -> None:
        """One Cyrillic letter is enough."""
        assert contains_cyrillic("Book Ё")

    def test_latin_and_empty(self) -> None:
        assert not contains_cyrillic("Master")
        assert not contains_cyrillic("")
        assert not contains_cyrillic(None)


class TestScoreCandidate:
    """Tests for score_candidate."""

    def test_current_weights(self) -> None:
        """Pin the heuristic weights as they stand."""
        assert (WEIGHT_PREFERRED_LANGUAGE, WEIGHT_CYRILLIC_TITLE) == (4, 3)
        assert (WEIGHT_CYRILLIC_AUTHORS, WEIGHT_HAS_COVER) == (2, 1)

    def test_russian_everything(self, russian_candidate: CandidateMetadata) -> None:
        """Russian language, Cyrillic title and authors, and a cover score 10."""
        candidate = replace(russian_candidate, cover_url="https://c/1.jpg")
        assert score_candidate(candidate) == 10

    def test_english_no_cover(self, english_candidate: CandidateMetadata) -> None:
        assert score_candidate(english_candidate) == 0

    def test_cover_only(self, english_candidate: CandidateMetadata) -> None:
        candidate = replace(english_candidate, cover_url="https://c/1.jpg")
        assert score_candidate(candidate) == WEIGHT_HAS_COVER

    def test_language_case_insensitive(self, english_candidate: CandidateMetadata) -> None:
        candidate = replace(english_candidate, language="RU")
        assert score_candidate(candidate) == WEIGHT_PREFERRED_LANGUAGE


class TestPickBest:
    """Tests for pick_best."""

    def test_empty(self) -> None:
        assert pick_best([]) is None

    def test_highest_score_wins(
        self, english_candidate: CandidateMetadata, russian_candidate: CandidateMetadata
    ) -> None:
        """The Russian record beats an earlier English one."""
        assert pick_best([english_candidate, russian_candidate]) is russian_candidate

    def test_tie_goes_to_first(self, english_candidate: CandidateMetadata) -> None:
        """Equal scores resolve to the earlier source."""
        first = english_candidate
        second = replace(english_candidate, source=Source.OPENLIBRARY, title="Other")
        assert score_candidate(first) == score_candidate(second)
        assert pick_best([first, second]) is first
        assert pick_best([second, first]) is second


class TestReconcile:
    """Tests for reconcile."""

    def test_no_candidates(self) -> None:
        assert reconcile([], RU_ISBN13) is None

    def test_borrows_cover_from_lower_scored(
        self, english_candidate: CandidateMetadata, russian_candidate: CandidateMetadata
    ) -> None:
        """A coverless winner takes the cover of a lower-scored candidate."""
        with_cover = replace(english_candidate, cover_url="https://covers/en.jpg")
        resolved = reconcile([with_cover, russian_candidate], RU_ISBN13)
        assert resolved is not None
        assert resolved.title == "Мастер и Маргарита"
        assert resolved.cover_url == "https://covers/en.jpg"

    def test_borrows_first_cover_in_source_order(
        self, english_candidate: CandidateMetadata, russian_candidate: CandidateMetadata
    ) -> None:
        first = replace(english_candidate, cover_url="https://covers/first.jpg")
        second = replace(english_candidate, source=Source.RETAILER, cover_url="https://covers/second.jpg")
        resolved = reconcile([russian_candidate, first, second], RU_ISBN13)
        assert resolved is not None
        assert resolved.cover_url == "https://covers/first.jpg"

    def test_keeps_own_cover(self, russian_candidate: CandidateMetadata) -> None:
        winner = replace(russian_candidate, cover_url="https://covers/ru.jpg")
        other = CandidateMetadata(
            source=Source.RETAILER, title="X", cover_url="https://covers/other.jpg"
        )
        resolved = reconcile([other, winner], RU_ISBN13)
        assert resolved is not None
        assert resolved.cover_url == "https://covers/ru.jpg"

    def test_language_from_region(self, russian_candidate: CandidateMetadata) -> None:
        """A missing language is filled from a 978-5 ISBN."""
        candidate = replace(russian_candidate, language=None)
        resolved = reconcile([candidate], RU_ISBN13)
        assert resolved is not None
        assert resolved.language == "ru"

    def test_language_left_empty_without_region(
        self, english_candidate: CandidateMetadata
    ) -> None:
        candidate = replace(english_candidate, language=None)
        resolved = reconcile([candidate], EN_ISBN13)
        assert resolved is not None
        assert resolved.language is None

    def test_reported_language_kept(self, english_candidate: CandidateMetadata) -> None:
        """The region default never overrides a reported language."""
        resolved = reconcile([english_candidate], RU_ISBN13)
        assert resolved is not None
        assert resolved.language == "en"

    def test_canonical_isbns(self, english_candidate: CandidateMetadata) -> None:
        """isbn13 is the canonical key and isbn10 is derived when missing."""
        candidate = replace(english_candidate, isbn13=None, isbn10=None)
        resolved = reconcile([candidate], EN_ISBN13)
        assert resolved is not None
        assert resolved.isbn13 == EN_ISBN13
        assert resolved.isbn10 == "0306406152"
