"""
FastAPI Endpoints for the Snippet Service

This module defines all REST API endpoints with minimal logic.
Endpoints only handle:
- Request validation (Pydantic models)
- Rate limiting
- Error handling and HTTP responses
- Delegating to the service layer

Retrieval answers in plain text so the output can be piped straight from
curl/wget into a clipboard tool.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from copyit.api.schemas import CreateSnippetRequest, CreateSnippetResponse, to_iso
from copyit.core.exceptions import (
    CapacityError,
    ContentTooLargeError,
    GoneError,
    InternalError,
    NotFoundError,
    RateLimitedError,
    ValidationError,
)
from copyit.core.rate_limit import ACTION_CREATE, ACTION_RETRIEVE, RateLimiter
from copyit.core.resources import get_rate_limiter
from copyit.db.session import get_session
from copyit.services.snippet_service import SnippetService

logger = logging.getLogger(__name__)

router = APIRouter()

NO_STORE_HEADERS = {"Cache-Control": "no-store, max-age=0"}


def get_client_key(request: Request) -> str:
    """
    Extract the rate limiting identity from a request.

    Uses the first address of X-Forwarded-For (set by the proxy in front
    of the service). Requests without it share the "unknown" bucket.

    Args:
        request: FastAPI Request object

    Returns:
        Client key as string
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return "unknown"


async def enforce_rate_limit(request: Request, limiter: RateLimiter, action_class: str) -> None:
    client_key = get_client_key(request)
    if not await limiter.allow(client_key, action_class):
        raise RateLimitedError(action_class, client_key)


def plain_text(message: str, status_code: int) -> PlainTextResponse:
    return PlainTextResponse(f"{message}\n", status_code=status_code)


@router.post(
    "/api/v1/snippets",
    response_model=CreateSnippetResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a snippet",
    description="Stores text under a short random path and returns its URL"
)
async def create_snippet(
    request: Request,
    body: CreateSnippetRequest,
    session: AsyncSession = Depends(get_session),
    limiter: RateLimiter = Depends(get_rate_limiter)
) -> CreateSnippetResponse:
    """
    Create a new snippet.

    Returns:
        CreateSnippetResponse with path, url and timestamps

    Raises:
        HTTPException 400: If content is missing or invalid
        HTTPException 413: If content exceeds 1 MiB
        HTTPException 429: If rate limit exceeded
        HTTPException 500: If no path could be allocated or the store failed
    """
    try:
        await enforce_rate_limit(request, limiter, ACTION_CREATE)

        snippet_service = SnippetService(session)
        created = await snippet_service.create_snippet(
            body.content,
            ttl_seconds=body.ttl_seconds,
            one_time=body.one_time
        )

        return CreateSnippetResponse(
            path=created.path,
            url=created.url,
            expires_at=to_iso(created.expires_at),
            created_at=to_iso(created.created_at)
        )

    except RateLimitedError as e:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=str(e)
        )
    except ContentTooLargeError as e:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=str(e)
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except (CapacityError, InternalError) as e:
        logger.error(f"Error creating snippet: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal Server Error"
        )


@router.get(
    "/{path}",
    response_class=PlainTextResponse,
    summary="Retrieve a snippet",
    description="Returns the raw snippet content as plain text"
)
async def retrieve_snippet(
    path: str,
    request: Request,
    raw: Optional[str] = None,
    session: AsyncSession = Depends(get_session),
    limiter: RateLimiter = Depends(get_rate_limiter)
) -> PlainTextResponse:
    """
    Return the content of a snippet.

    Terminal clients, browsers and ``?raw=1`` all get the same raw text.

    Args:
        path: The snippet path
        request: FastAPI Request object (for the client key)
        raw: Accepted for compatibility with ``curl .../path?raw=1``

    Raises (as plain-text responses):
        400: If the path is too short
        404: If the snippet is unknown or expired
        410: If a one-time snippet was already consumed
        429: If rate limit exceeded
    """
    try:
        await enforce_rate_limit(request, limiter, ACTION_RETRIEVE)

        snippet_service = SnippetService(session)
        content = await snippet_service.retrieve_snippet(path)

    except RateLimitedError as e:
        return plain_text(str(e), status.HTTP_429_TOO_MANY_REQUESTS)
    except ValidationError as e:
        return plain_text(str(e), status.HTTP_400_BAD_REQUEST)
    except NotFoundError as e:
        return plain_text(str(e), status.HTTP_404_NOT_FOUND)
    except GoneError as e:
        return plain_text(str(e), status.HTTP_410_GONE)
    except InternalError as e:
        logger.error(f"Error retrieving snippet: {e}", exc_info=True)
        return plain_text("Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR)

    return PlainTextResponse(content, headers=NO_STORE_HEADERS)
