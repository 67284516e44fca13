"""Serverless-style function endpoint that drafts articles with the AI gateway."""
import asyncio
import logging
from typing import Optional
from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from omninews.schemas import GenerateArticleRequest, GeneratedArticle, ErrorResponse
from omninews.services.generator import GeneratorError, generate_article

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["functions"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


async def _read_source_url(request: Request) -> Optional[str]:
    """Pull sourceUrl out of the body; anything unusable counts as missing."""
    try:
        payload = await request.json()
    except ValueError:
        return None
    try:
        return GenerateArticleRequest.model_validate(payload).sourceUrl
    except ValidationError:
        return None

@router.options("/generate-article", include_in_schema=False)
async def generate_article_preflight():
    """Answer the CORS preflight with an empty body."""
    return Response(content=None, headers=CORS_HEADERS)

@router.post(
    "/generate-article",
    response_model=GeneratedArticle,
    responses={400: {"model": ErrorResponse}, 402: {"model": ErrorResponse},
               429: {"model": ErrorResponse}, 500: {"model": ErrorResponse},
               504: {"model": ErrorResponse}},
    openapi_extra={"requestBody": {
        "required": True,
        "content": {"application/json": {"schema": GenerateArticleRequest.model_json_schema()}},
    }},
)
async def generate_article_endpoint(request: Request):
    """
    Draft an article from a TikTok/Instagram (or other social) URL.

    Body: `{"sourceUrl": "..."}`. Errors come back as `{"error": message}`:
    400 missing sourceUrl (including an empty or malformed body), 402 AI
    credits exhausted, 429 rate limited, 504 gateway timeout, 500 anything else.
    """
    try:
        source_url = await _read_source_url(request)
        # requests is blocking; keep the event loop free
        article = await asyncio.to_thread(generate_article, source_url)
    except GeneratorError as e:
        logger.error(f"Error in generate-article ({e.status_code}): {e.message}")
        return JSONResponse(status_code=e.status_code, content={"error": e.message}, headers=CORS_HEADERS)
    except Exception as e:
        logger.error(f"Unexpected error in generate-article: {str(e)}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Failed to generate article"}, headers=CORS_HEADERS)

    return JSONResponse(content=article.model_dump(), headers=CORS_HEADERS)
