import logging
from typing import Any, Dict, List, Optional

import httpx

from specbuilder.errors import GenerationFailed
from specbuilder.settings import settings

logger = logging.getLogger(__name__)


def _headers() -> Dict[str, str]:
    clean_key = settings.get_api_key().strip()
    # Robust Authorization header
    auth_val = clean_key if clean_key.lower().startswith("bearer ") else f"Bearer {clean_key}"
    return {
        "Authorization": auth_val,
        "HTTP-Referer": "http://localhost:8000",
        "X-Title": "App Spec Builder",
        "Content-Type": "application/json",
    }


async def generate(messages: List[Dict[str, str]], response_format: Optional[Dict[str, Any]] = None,
                   temperature: float = 0.7) -> str:
    """
    Send role-tagged messages to the OpenAI-compatible chat completions endpoint
    and return the reply text. With ``response_format`` the reply is expected to
    be JSON text conforming to that schema.

    Raises GenerationFailed on transport errors, timeouts, non-200 replies
    (context-length rejections included) and replies without text content.
    """
    url = f"{settings.get_llm_base_url()}/chat/completions"
    payload: Dict[str, Any] = {
        "model": settings.get_llm_model(),
        "messages": messages,
        "temperature": temperature,
    }
    if response_format:
        payload["response_format"] = response_format

    logger.debug("[LLM] POST %s with %d messages", url, len(messages))
    async with httpx.AsyncClient() as client:
        try:
            response = await client.post(url, headers=_headers(), json=payload,
                                         timeout=settings.get_llm_timeout())
        except httpx.TimeoutException as e:
            raise GenerationFailed(f"Generation timed out after {settings.get_llm_timeout()}s") from e
        except httpx.HTTPError as e:
            raise GenerationFailed(f"Could not reach generation service: {e}") from e

    if response.status_code != 200:
        raise GenerationFailed(f"Generation service returned {response.status_code}: {response.text[:200]}")

    try:
        data = response.json()
        content = data["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise GenerationFailed("Generation service reply had no message content") from e
    if not isinstance(content, str):
        raise GenerationFailed("Generation service reply had no message content")
    return content
