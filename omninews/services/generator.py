"""Article draft generator.

Turns a social-media URL into a news article draft by asking a
chat-completion model to write one:

- Platform label: substring match on the URL (TikTok / Instagram / social media).
- Prompt: fixed Indonesian newsroom system prompt plus a user prompt that asks
  for a JSON object with title, content and category.
- Upstream call: one POST to the AI gateway with a bounded timeout. Transient
  failures (5xx, timeouts, dropped connections) are retried with jitter;
  classified 4xx replies are surfaced immediately.
- Parsing: the first balanced ``{...}`` span of the reply that decodes to a
  JSON object becomes the draft.

Every failure is raised as a ``GeneratorError`` carrying the HTTP status the
caller should answer with.
"""

import json
import logging
import random
import threading
import time
from typing import Dict, List, Optional

import requests

from omninews.config import (
    AI_GATEWAY_URL,
    AI_MAX_RETRIES,
    AI_MODEL,
    AI_TIMEOUT_SECONDS,
    get_ai_api_key,
)
from omninews.schemas import DEFAULT_CATEGORY, Category, GeneratedArticle

logger = logging.getLogger(__name__)

# --------- Tunables --------- #
RETRY_DELAY_RANGE = (1.0, 3.0)  # seconds, jittered between attempts

SYSTEM_PROMPT_TEMPLATE = """Kamu adalah jurnalis profesional Indonesia yang menulis berita viral dari konten media sosial.
Tugasmu adalah mengubah konten video {platform} menjadi artikel berita yang menarik dan informatif.

Panduan penulisan:
- Gunakan bahasa Indonesia yang baik dan benar
- Gaya penulisan jurnalistik: objektif, ringkas, dan informatif
- Mulai dengan lead yang menarik (5W+1H)
- Paragraf pendek (2-3 kalimat)
- Hindari clickbait berlebihan
- Sertakan konteks dan informasi tambahan jika relevan"""

USER_PROMPT_TEMPLATE = """Berdasarkan video {platform} dari URL berikut: {source_url}

Buatkan artikel berita dengan format JSON:
{{
  "title": "Judul berita yang menarik dan SEO-friendly (maks 100 karakter)",
  "content": "Isi artikel berita lengkap (minimal 3 paragraf, pisahkan dengan \\n\\n)",
  "category": "pilih satu: {categories}"
}}

Catatan: Karena tidak bisa mengakses video secara langsung, buatkan artikel berdasarkan pola umum konten viral dari platform tersebut. Buat konten yang masuk akal dan menarik."""


# --------- Errors --------- #
class GeneratorError(Exception):
    """Base class for generator failures; carries the status to answer with."""
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class MissingConfigurationError(GeneratorError):
    status_code = 500


class MissingSourceUrlError(GeneratorError):
    status_code = 400


class RateLimitedError(GeneratorError):
    status_code = 429


class QuotaExhaustedError(GeneratorError):
    status_code = 402


class UpstreamError(GeneratorError):
    status_code = 500


class UpstreamTimeoutError(GeneratorError):
    status_code = 504


class ResponseParseError(GeneratorError):
    status_code = 500


# --------- Shared HTTP session --------- #
_session: Optional[requests.Session] = None
_session_lock = threading.Lock()


def get_http_session() -> requests.Session:
    """Return the process-wide HTTP session, creating it on first use."""
    global _session
    if _session is None:
        with _session_lock:
            if _session is None:
                session = requests.Session()
                session.headers.update({"Content-Type": "application/json"})
                _session = session
    return _session


# --------- Prompt construction --------- #
def detect_platform(source_url: str) -> str:
    """Label the platform a URL belongs to; unknown hosts are not rejected."""
    lowered = source_url.lower()
    if "tiktok.com" in lowered:
        return "TikTok"
    if "instagram.com" in lowered:
        return "Instagram"
    return "social media"


def build_prompts(source_url: str, platform: Optional[str] = None) -> List[Dict[str, str]]:
    """Build the two-message (system + user) prompt for a source URL."""
    platform = platform or detect_platform(source_url)
    categories = "/".join(category.value for category in Category)
    return [
        {"role": "system", "content": SYSTEM_PROMPT_TEMPLATE.format(platform=platform)},
        {
            "role": "user",
            "content": USER_PROMPT_TEMPLATE.format(
                platform=platform, source_url=source_url, categories=categories
            ),
        },
    ]


# --------- Upstream call --------- #
def _is_transient(status_code: int) -> bool:
    return status_code >= 500


def _raise_for_status(response: requests.Response) -> None:
    if response.ok:
        return
    logger.error("AI gateway error: %s %s", response.status_code, response.text[:500])
    if response.status_code == 429:
        raise RateLimitedError("Rate limit exceeded. Please try again later.")
    if response.status_code == 402:
        raise QuotaExhaustedError("AI credits exhausted. Please add more credits.")
    raise UpstreamError("AI gateway error")


def request_completion(
    messages: List[Dict[str, str]],
    api_key: str,
    model: str = AI_MODEL,
    url: str = AI_GATEWAY_URL,
    timeout: float = AI_TIMEOUT_SECONDS,
    max_retries: int = AI_MAX_RETRIES,
) -> str:
    """POST the prompt to the gateway and return the reply text.

    Raises:
        RateLimitedError, QuotaExhaustedError: on 429 / 402, never retried.
        UpstreamError: on other non-2xx replies or connection failures.
        UpstreamTimeoutError: when the last attempt timed out.
        ResponseParseError: when the reply carries no message content.
    """
    session = get_http_session()
    payload = {"model": model, "messages": messages}
    headers = {"Authorization": f"Bearer {api_key}"}

    for attempt in range(max_retries + 1):
        if attempt:
            delay = random.uniform(*RETRY_DELAY_RANGE)
            logger.info("Retry %d/%d after %.1fs pause.", attempt, max_retries, delay)
            time.sleep(delay)

        last_attempt = attempt == max_retries
        start = time.time()
        try:
            response = session.post(url, json=payload, headers=headers, timeout=timeout)
        except requests.Timeout:
            logger.warning("AI gateway timed out after %.1fs (attempt %d).", timeout, attempt + 1)
            if last_attempt:
                raise UpstreamTimeoutError(f"AI gateway timed out after {timeout:.0f}s")
            continue
        except requests.RequestException as exc:
            logger.warning("AI gateway request failed (attempt %d): %s", attempt + 1, exc)
            if last_attempt:
                raise UpstreamError("AI gateway error") from exc
            continue

        logger.info("AI gateway answered %s in %.1fs.", response.status_code, time.time() - start)
        if _is_transient(response.status_code) and not last_attempt:
            logger.warning("AI gateway returned %s; will retry.", response.status_code)
            continue
        _raise_for_status(response)
        break

    try:
        data = response.json()
        content = data["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError):
        content = None

    if not isinstance(content, str) or not content.strip():
        raise ResponseParseError("No response from AI")
    return content


# --------- Reply parsing --------- #
def _balanced_span_end(text: str, start: int) -> Optional[int]:
    """Index just past the brace that closes the one at ``start``, or None."""
    depth = 0
    in_string = False
    escaped = False
    for idx in range(start, len(text)):
        char = text[idx]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return idx + 1
    return None


def extract_json_object(text: str) -> dict:
    """Find the first balanced ``{...}`` span in free text that decodes to a JSON object.

    Braces inside JSON string values do not count toward nesting, so stray
    braces in surrounding commentary or code fences do not break extraction.
    """
    start = text.find("{")
    while start != -1:
        end = _balanced_span_end(text, start)
        if end is not None:
            try:
                parsed = json.loads(text[start:end])
            except json.JSONDecodeError:
                parsed = None
            if isinstance(parsed, dict):
                return parsed
        start = text.find("{", start + 1)
    raise ResponseParseError("Could not parse AI response")


def parse_generated_article(data: dict) -> GeneratedArticle:
    """Map the model's object onto the draft payload, filling defaults."""
    category = data.get("category")
    valid = {c.value for c in Category}
    if isinstance(category, str) and category.strip().lower() in valid:
        category = category.strip().lower()
    else:
        if category:
            logger.warning("Model returned unknown category %r; using %s.", category, DEFAULT_CATEGORY.value)
        category = DEFAULT_CATEGORY.value

    title = data.get("title") or ""
    content = data.get("content") or ""
    return GeneratedArticle(
        title=str(title),
        content=str(content),
        category=category,
        thumbnailUrl="",
    )


# --------- Public API --------- #
def generate_article(source_url: Optional[str], api_key: Optional[str] = None, **request_options) -> GeneratedArticle:
    """Draft an article for ``source_url``.

    Configuration and input are checked before anything goes over the network.
    Extra keyword arguments are passed to ``request_completion``.
    """
    if api_key is None:
        api_key = get_ai_api_key()
    if not api_key:
        raise MissingConfigurationError("AI_GATEWAY_API_KEY is not configured")

    if not source_url or not str(source_url).strip():
        raise MissingSourceUrlError("Source URL is required")
    source_url = str(source_url).strip()

    logger.info("Generating article from URL: %s", source_url)

    platform = detect_platform(source_url)
    messages = build_prompts(source_url, platform)
    reply = request_completion(messages, api_key, **request_options)

    logger.info("AI response: %s", reply)

    return parse_generated_article(extract_json_object(reply))
