"""Tests for the search aggregator."""

from __future__ import annotations

import asyncio

import pytest

from app.models import Candidate
from app.services.aggregator import SearchService
from app.services.base import CatalogAdapter

from conftest import build_settings


class StubAdapter(CatalogAdapter):
    """Adapter double returning canned candidates and recording calls."""

    def __init__(
        self,
        key: str,
        results: list[Candidate] | None = None,
        *,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.key = key
        self._results = results or []
        self._error = error
        self._delay = delay
        self.calls: list[tuple[str, str | None]] = []

    async def search(self, query: str, variant: str | None = None) -> list[Candidate]:
        self.calls.append((query, variant))
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return list(self._results)


def _candidate(title: str, media_type: str = "movie", score: float = 0) -> Candidate:
    return Candidate(media_type=media_type, title=title, score=score)


def _service(*adapters: StubAdapter, **overrides: object) -> SearchService:
    return SearchService(build_settings(**overrides), list(adapters))


@pytest.mark.anyio
@pytest.mark.parametrize(
    ("media_type", "key", "variant"),
    [
        ("movie", "screen", "movie"),
        ("tv", "screen", "tv"),
        ("book", "book", "book"),
        ("audiobook", "book", "audiobook"),
        ("game", "game", None),
        ("manga", "manga", None),
        ("podcast", "podcast", None),
    ],
)
async def test_directed_search_routes_to_one_adapter(
    media_type: str, key: str, variant: str | None
) -> None:
    adapters = {
        name: StubAdapter(name, [_candidate(f"{name} hit", media_type)])
        for name in ("screen", "book", "game", "anime", "manga", "podcast")
    }
    service = _service(*adapters.values())

    results = await service.search("Dune", media_type)

    assert [candidate.media_type for candidate in results] == [media_type]
    assert adapters[key].calls == [("Dune", variant)]
    called = [name for name, adapter in adapters.items() if adapter.calls]
    assert called == [key]


@pytest.mark.anyio
async def test_directed_search_preserves_adapter_order() -> None:
    hits = [
        _candidate("Low", score=1),
        _candidate("High", score=99),
        _candidate("Middle", score=50),
    ]
    service = _service(StubAdapter("screen", hits))

    results = await service.search("x", "movie")

    assert [candidate.title for candidate in results] == ["Low", "High", "Middle"]


@pytest.mark.anyio
async def test_auto_search_ranks_and_survives_failing_sources() -> None:
    service = _service(
        StubAdapter("screen", [_candidate("Film", score=120)]),
        StubAdapter("book", [_candidate("Novel", "book", score=45)]),
        StubAdapter("game", [_candidate("Game", "game", score=300)]),
        StubAdapter("anime", error=RuntimeError("jikan down")),
        StubAdapter("podcast", error=ValueError("bad payload")),
    )

    results = await service.search("Dune", "auto")

    assert [candidate.score for candidate in results] == [300, 120, 45]
    assert [candidate.media_type for candidate in results] == ["game", "movie", "book"]


@pytest.mark.anyio
async def test_auto_search_caps_pool_and_keeps_ties_in_source_order() -> None:
    screen = StubAdapter(
        "screen", [_candidate(f"screen-{index}", score=1) for index in range(5)]
    )
    book = StubAdapter(
        "book", [_candidate(f"book-{index}", "book", score=1) for index in range(5)]
    )
    game = StubAdapter(
        "game", [_candidate(f"game-{index}", "game", score=1) for index in range(5)]
    )
    service = _service(screen, book, game)

    results = await service.search("x", "auto")

    assert len(results) == 10
    assert [candidate.title for candidate in results[:6]] == [
        "screen-0",
        "screen-1",
        "screen-2",
        "screen-3",
        "screen-4",
        "book-0",
    ]


@pytest.mark.anyio
async def test_auto_search_only_queries_configured_sources() -> None:
    manga = StubAdapter("manga", [_candidate("Berserk", "manga", score=10)])
    podcast = StubAdapter("podcast", [_candidate("Show", "podcast", score=5)])
    service = _service(manga, podcast)

    results = await service.search("x", "auto")

    assert [candidate.title for candidate in results] == ["Show"]
    assert manga.calls == []

    opted_in = _service(manga, podcast, AUTO_SOURCES="manga,podcast")
    results = await opted_in.search("x", "auto")
    assert [candidate.title for candidate in results] == ["Berserk", "Show"]


@pytest.mark.anyio
async def test_anime_falls_back_to_tv_and_relabels() -> None:
    anime = StubAdapter("anime", [])
    screen = StubAdapter("screen", [_candidate("Blue Eye Samurai", "tv", score=12)])
    service = _service(anime, screen)

    results = await service.search("Blue Eye Samurai", "anime")

    assert screen.calls == [("Blue Eye Samurai", "tv")]
    [candidate] = results
    assert candidate.media_type == "anime"
    assert candidate.title == "Blue Eye Samurai"


@pytest.mark.anyio
async def test_anime_fallback_skipped_when_jikan_has_results() -> None:
    anime = StubAdapter("anime", [_candidate("Naruto", "anime")])
    screen = StubAdapter("screen", [_candidate("Naruto", "tv")])
    service = _service(anime, screen)

    results = await service.search("Naruto", "anime")

    assert [candidate.media_type for candidate in results] == ["anime"]
    assert screen.calls == []


@pytest.mark.anyio
async def test_directed_adapter_error_yields_empty_list() -> None:
    service = _service(StubAdapter("game", error=RuntimeError("boom")))

    assert await service.search("Hades", "game") == []


@pytest.mark.anyio
async def test_deadline_drops_slow_sources() -> None:
    fast = StubAdapter("screen", [_candidate("Fast", score=1)])
    slow = StubAdapter("book", [_candidate("Slow", "book", score=100)], delay=5)
    service = _service(fast, slow, SEARCH_DEADLINE_SECONDS=0.05)

    results = await service.search("x", "auto")

    assert [candidate.title for candidate in results] == ["Fast"]


@pytest.mark.anyio
async def test_search_best_returns_top_candidate_or_none() -> None:
    service = _service(
        StubAdapter("screen", [_candidate("Film", score=3)]),
        StubAdapter("game", [_candidate("Game", "game", score=9)]),
    )

    best = await service.search_best("x", "auto")
    assert best is not None
    assert best.title == "Game"

    empty = _service(StubAdapter("screen", []))
    assert await empty.search_best("x", "movie") is None


@pytest.mark.anyio
async def test_invalid_arguments_raise_value_error() -> None:
    service = _service(StubAdapter("screen", []))

    with pytest.raises(ValueError):
        await service.search("   ", "movie")
    with pytest.raises(ValueError):
        await service.search("Dune", "comic")


@pytest.mark.anyio
async def test_anime_fallback_copies_do_not_share_genres() -> None:
    original = Candidate(media_type="tv", title="Pluto", genres=["Drama"])
    service = _service(StubAdapter("anime", []), StubAdapter("screen", [original]))

    [relabeled] = await service.search("Pluto", "anime")

    assert relabeled is not original
    assert relabeled.media_type == "anime"
    assert original.media_type == "tv"
    assert relabeled.genres == original.genres == ("Drama",)


class HangingAdapter(StubAdapter):
    """Adapter that never finishes on its own and records cancellation."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.cancelled = False

    async def search(self, query: str, variant: str | None = None) -> list[Candidate]:
        self.calls.append((query, variant))
        try:
            await asyncio.sleep(30)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return []


@pytest.mark.anyio
async def test_cancelling_caller_cancels_pending_sources() -> None:
    hanging = HangingAdapter("book")
    service = _service(
        StubAdapter("screen", [_candidate("Fast")]),
        hanging,
        SEARCH_DEADLINE_SECONDS=20,
    )

    search = asyncio.create_task(service.search("x", "auto"))
    await asyncio.sleep(0.05)
    assert hanging.calls == [("x", None)]
    search.cancel()
    with pytest.raises(asyncio.CancelledError):
        await search
    await asyncio.sleep(0.01)

    assert hanging.cancelled is True


@pytest.mark.anyio
async def test_self_cancelled_source_is_logged_without_deadline(
    caplog: pytest.LogCaptureFixture,
) -> None:
    service = _service(
        StubAdapter("screen", [_candidate("Film", score=2)]),
        StubAdapter("book", error=asyncio.CancelledError()),
    )

    with caplog.at_level("WARNING", logger="app.services.aggregator"):
        results = await service.search("x", "auto")

    assert [candidate.title for candidate in results] == ["Film"]
    assert "book search was cancelled before returning results" in caplog.messages
