"""Entry point for the FastAPI-powered media capture service."""

from __future__ import annotations

import json
import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import HttpUrl, ValidationError

from .config import settings
from .models import BestMatchResponse, Candidate, SearchRequest, SearchResponse
from .services.aggregator import SearchService
from .services.base import ServiceNotConfiguredError, UpstreamError
from .services.google_books import GoogleBooksClient
from .services.itunes import ITunesClient
from .services.jikan import JikanAnimeClient, JikanMangaClient
from .services.notion import NotionClient
from .services.rawg import RAWGClient
from .services.tmdb import SCREEN_TYPES, TMDBClient
from .services.vision import VisionClient

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app: FastAPI


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    exit_stack = AsyncExitStack()
    timeout = httpx.Timeout(settings.http_timeout_seconds, connect=5.0)

    async def _client(base_url: HttpUrl, **kwargs: Any) -> httpx.AsyncClient:
        return await exit_stack.enter_async_context(
            httpx.AsyncClient(base_url=str(base_url), **kwargs)
        )

    tmdb = TMDBClient(settings, await _client(settings.tmdb_api_url, timeout=timeout))
    books = GoogleBooksClient(
        settings, await _client(settings.google_books_api_url, timeout=timeout)
    )
    rawg = RAWGClient(settings, await _client(settings.rawg_api_url, timeout=timeout))
    jikan_http = await _client(settings.jikan_api_url, timeout=timeout)
    itunes = ITunesClient(
        settings, await _client(settings.itunes_api_url, timeout=timeout)
    )
    notion_http = await _client(
        settings.notion_api_url, timeout=httpx.Timeout(20.0, connect=10.0)
    )
    vision_http = await _client(
        settings.anthropic_api_url, timeout=httpx.Timeout(60.0, connect=10.0)
    )

    fastapi_app.state.search_service = SearchService(
        settings,
        [
            tmdb,
            books,
            rawg,
            JikanAnimeClient(settings, jikan_http),
            JikanMangaClient(settings, jikan_http),
            itunes,
        ],
    )
    fastapi_app.state.tmdb_client = tmdb
    fastapi_app.state.notion_client = NotionClient(settings, notion_http)
    fastapi_app.state.vision_client = VisionClient(settings, vision_http)

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Capture movies, shows, books, games and more into a tracking database",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def _state_service(fastapi_app: FastAPI, name: str, expected: type) -> Any:
    service = getattr(fastapi_app.state, name, None)
    if not isinstance(service, expected):
        raise RuntimeError(f"{name} not initialised")
    return service


def get_search_service(fastapi_app: FastAPI) -> SearchService:
    return _state_service(fastapi_app, "search_service", SearchService)


def get_tmdb_client(fastapi_app: FastAPI) -> TMDBClient:
    return _state_service(fastapi_app, "tmdb_client", TMDBClient)


def get_notion_client(fastapi_app: FastAPI) -> NotionClient:
    return _state_service(fastapi_app, "notion_client", NotionClient)


def get_vision_client(fastapi_app: FastAPI) -> VisionClient:
    return _state_service(fastapi_app, "vision_client", VisionClient)


async def _json_body(request: Request) -> dict[str, Any]:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(status_code=400, detail="Invalid JSON body") from None
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid payload")
    return payload


def _parse_search_request(payload: dict[str, Any]) -> SearchRequest:
    try:
        return SearchRequest.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=400, detail=exc.errors(include_url=False, include_context=False)
        ) from exc


def register_routes(fastapi_app: FastAPI) -> None:
    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.post("/api/search", response_model=SearchResponse)
    async def search(request: Request) -> SearchResponse:
        search_request = _parse_search_request(await _json_body(request))
        service = get_search_service(fastapi_app)
        results = await service.search(search_request.query, search_request.type)
        return SearchResponse(results=results)

    @fastapi_app.post("/api/search/best", response_model=BestMatchResponse)
    async def search_best(request: Request) -> BestMatchResponse:
        search_request = _parse_search_request(await _json_body(request))
        service = get_search_service(fastapi_app)
        result = await service.search_best(search_request.query, search_request.type)
        return BestMatchResponse(result=result)

    @fastapi_app.get("/api/details")
    async def details(request: Request) -> JSONResponse:
        media_id = (request.query_params.get("id") or "").strip()
        media_type = (request.query_params.get("type") or "").strip()
        if not media_id or not media_type:
            raise HTTPException(
                status_code=400, detail="ID and type parameters are required"
            )
        if media_type not in SCREEN_TYPES:
            raise HTTPException(status_code=400, detail="Unsupported content type")
        client = get_tmdb_client(fastapi_app)
        try:
            payload = await client.details(media_id, media_type)
        except ServiceNotConfiguredError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        except UpstreamError as exc:
            logger.warning("TMDB details failed for %s/%s: %s", media_type, media_id, exc)
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return JSONResponse(payload)

    @fastapi_app.post("/api/add-to-notion")
    async def add_to_notion(request: Request) -> JSONResponse:
        payload = await _json_body(request)
        try:
            candidate = Candidate.model_validate(payload)
        except ValidationError as exc:
            raise HTTPException(
                status_code=400,
                detail=exc.errors(include_url=False, include_context=False),
            ) from exc
        notion = get_notion_client(fastapi_app)
        try:
            page = await notion.add(candidate)
        except ServiceNotConfiguredError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        except UpstreamError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return JSONResponse({"success": True, "pageId": page.get("id"), "url": page.get("url")})

    @fastapi_app.post("/api/analyse-image")
    async def analyse_image(request: Request) -> JSONResponse:
        payload = await _json_body(request)
        image = payload.get("image")
        if not isinstance(image, str) or not image.strip():
            raise HTTPException(status_code=400, detail="Image data is required")

        vision = get_vision_client(fastapi_app)
        try:
            identified = await vision.identify(image.strip())
        except ServiceNotConfiguredError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        except UpstreamError as exc:
            logger.warning("Image analysis failed: %s", exc)
            raise HTTPException(status_code=502, detail=str(exc)) from exc

        if not identified.identified:
            return JSONResponse(
                {
                    "identified": False,
                    "message": "Could not identify the media in this image",
                }
            )
        return JSONResponse(identified.to_payload())

    @fastapi_app.post("/api/add-from-image")
    async def add_from_image(request: Request) -> JSONResponse:
        payload = await _json_body(request)
        image = payload.get("image")
        if not isinstance(image, str) or not image.strip():
            return JSONResponse(
                {"success": False, "error": "Image data is required"}, status_code=400
            )

        vision = get_vision_client(fastapi_app)
        notion = get_notion_client(fastapi_app)
        service = get_search_service(fastapi_app)
        try:
            identified = await vision.identify(image.strip())
            if not identified.identified:
                return JSONResponse(
                    {"success": False, "error": "Could not identify media in this image"}
                )

            title = (identified.title or "").strip()
            best = await service.search_best(title, identified.type or "auto")
            if best is None:
                return JSONResponse(
                    {
                        "success": False,
                        "error": f'Could not find "{title}" in database',
                        "identified": {"title": title, "type": identified.type},
                    }
                )
            page = await notion.add(best)
        except ServiceNotConfiguredError as exc:
            return JSONResponse({"success": False, "error": str(exc)}, status_code=503)
        except UpstreamError as exc:
            logger.warning("Image capture pipeline failed: %s", exc)
            return JSONResponse({"success": False, "error": str(exc)}, status_code=502)

        return JSONResponse(
            {
                "success": True,
                "title": best.title,
                "type": best.media_type,
                "platform": best.platform,
                "notionUrl": page.get("url"),
            }
        )


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual execution
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )
