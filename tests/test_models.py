from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.models import Candidate, Identification, SearchRequest


def test_candidate_upgrades_http_images() -> None:
    candidate = Candidate(
        media_type="book",
        title="The Long Walk",
        image_url="http://books.google.com/books/content?id=abc",
    )
    assert candidate.image_url == "https://books.google.com/books/content?id=abc"


def test_candidate_normalises_year_and_defaults() -> None:
    candidate = Candidate(media_type="movie", title="  Arrival ", year="2016-11-11")
    assert candidate.title == "Arrival"
    assert candidate.year == "2016"
    assert candidate.score == 0
    assert candidate.genres == ()
    assert candidate.platform is None
    assert candidate.platform_confidence is None

    assert Candidate(media_type="anime", title="Naruto", year=2002).year == "2002"
    assert Candidate(media_type="game", title="Doom", year="unknown").year == ""


def test_candidate_requires_title_and_media_type() -> None:
    with pytest.raises(ValidationError):
        Candidate(media_type="movie", title="   ")
    with pytest.raises(ValidationError):
        Candidate(media_type="vinyl", title="Abbey Road")


def test_candidate_rejects_genres_outside_taxonomy() -> None:
    with pytest.raises(ValidationError):
        Candidate(media_type="movie", title="Heat", genres=["Crime"])


def test_candidate_dedupes_genres() -> None:
    candidate = Candidate(
        media_type="movie", title="Heat", genres=["Thriller", "Action", "Thriller"]
    )
    assert candidate.genres == ("Thriller", "Action")


def test_candidate_rejects_negative_scores() -> None:
    with pytest.raises(ValidationError):
        Candidate(media_type="movie", title="Heat", score=-1)


def test_candidate_confidence_follows_platform() -> None:
    confirmed = Candidate(media_type="movie", title="Heat", platform="Netflix")
    assert confirmed.platform_confidence == "confirmed"

    orphan = Candidate(media_type="movie", title="Heat", platform_confidence="inferred")
    assert orphan.platform_confidence is None


def test_candidate_is_immutable() -> None:
    candidate = Candidate(media_type="tv", title="Frieren", genres=["Drama"])
    with pytest.raises(ValidationError):
        candidate.title = "Other"  # type: ignore[misc]
    with pytest.raises(AttributeError):
        candidate.genres.append("Horror")  # type: ignore[attr-defined]

    relabeled = candidate.model_copy(update={"media_type": "anime"})
    assert relabeled.genres == ("Drama",)
    assert candidate.genres == ("Drama",)
    assert candidate.to_payload()["genres"] == ["Drama"]



def test_candidate_payload_uses_camel_case() -> None:
    candidate = Candidate(
        media_type="podcast",
        title="Desert Island Discs",
        platform="Apple Podcasts",
        platform_confidence="confirmed",
        external_url="https://podcasts.apple.com/gb/podcast/id1",
        score=3000,
    )
    payload = candidate.to_payload()
    assert payload["mediaType"] == "podcast"
    assert payload["externalUrl"] == "https://podcasts.apple.com/gb/podcast/id1"
    assert payload["platformConfidence"] == "confirmed"
    assert payload["imageUrl"] is None

    assert Candidate.model_validate(payload) == candidate


def test_search_request_requires_query_and_type() -> None:
    with pytest.raises(ValidationError):
        SearchRequest.model_validate({"query": "Dune"})
    with pytest.raises(ValidationError):
        SearchRequest.model_validate({"query": "   ", "type": "auto"})
    with pytest.raises(ValidationError):
        SearchRequest.model_validate({"query": "Dune", "type": "comic"})

    request = SearchRequest.model_validate({"query": " Dune ", "type": "book"})
    assert request.query == "Dune"


def test_identification_tolerates_loose_model_output() -> None:
    identified = Identification.model_validate(
        {"title": "Spirited Away", "type": "Anime", "confidence": "HIGH"}
    )
    assert identified.type == "anime"
    assert identified.confidence == "high"
    assert identified.identified is True

    unknown = Identification.model_validate(
        {"title": None, "type": "movie|tv", "confidence": "none"}
    )
    assert unknown.type is None
    assert unknown.identified is False


def test_identification_without_confidence_counts_as_identified() -> None:
    answer = Identification.model_validate({"title": "Dune", "type": "movie"})
    assert answer.confidence == "low"
    assert answer.identified is True

    vague = Identification.model_validate(
        {"title": "Dune", "type": "movie", "confidence": "pretty sure"}
    )
    assert vague.confidence == "low"
    assert vague.identified is True

    declined = Identification.model_validate({"title": "Dune", "confidence": "None"})
    assert declined.identified is False


def test_identification_reads_alternate_title() -> None:
    answer = Identification.model_validate(
        {
            "title": "Attack on Titan",
            "alternateTitle": "Shingeki no Kyojin",
            "type": "anime",
            "confidence": "high",
        }
    )
    assert answer.alternate_title == "Shingeki no Kyojin"
    assert answer.to_payload() == {
        "identified": True,
        "title": "Attack on Titan",
        "alternateTitle": "Shingeki no Kyojin",
        "type": "anime",
        "confidence": "high",
    }

    blank = Identification.model_validate({"title": "Dune", "alternateTitle": " "})
    assert blank.alternate_title is None
