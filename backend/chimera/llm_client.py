# backend/chimera/llm_client.py
import logging
from typing import Optional

import httpx
import openai
from openai import AsyncOpenAI

from chimera.config import CONFIG

logger = logging.getLogger(__name__)

# Every failed generation starts with this marker; agents check for it instead of catching.
FALLBACK_PREFIX = "Fallback:"


def is_fallback(text: str) -> bool:
    return text.startswith(FALLBACK_PREFIX)


class TextGenerationClient:
    """
    Thin async wrapper around a local OpenAI-compatible chat endpoint.

    generate() never raises: transport failures, non-success statuses and
    malformed bodies all come back as a string beginning with FALLBACK_PREFIX.
    No retries, and no timeout beyond the transport default.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        temperature: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or CONFIG["LLM_BASE_URL"]).rstrip("/")
        self.model = model or CONFIG["LLM_MODEL"]
        self.temperature = CONFIG["LLM_TEMPERATURE"] if temperature is None else temperature

        self.client = AsyncOpenAI(
            base_url=self.base_url,
            api_key=api_key or CONFIG["LLM_API_KEY"],
            max_retries=0,
            http_client=http_client,
        )

    async def generate(self, role_instruction: str, context_text: str) -> str:
        try:
            resp = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": role_instruction},
                    {"role": "user", "content": context_text}
                ],
                temperature=self.temperature,
                stream=False,
            )
        except openai.APIStatusError as e:
            logger.error("API call to local model failed: %s", e.status_code)
            return (
                f"{FALLBACK_PREFIX} Could not reach the local agent (status: {e.status_code}). "
                "Is LM Studio running and the server started?"
            )
        except openai.APIConnectionError as e:
            logger.error("Failed to connect to local model: %s", e)
            return (
                f"{FALLBACK_PREFIX} The agent is offline. "
                f"Make sure the LM Studio server is running on {self.base_url}."
            )
        except Exception as e:
            # body did not parse into a chat completion
            logger.error("Unexpected response from local model: %s", e)
            return f"{FALLBACK_PREFIX} Agent returned an invalid response format."

        content = _first_message_content(resp)
        if not content:
            logger.error("API Error: unexpected response format from local model: %r", resp)
            return f"{FALLBACK_PREFIX} Agent returned an invalid response format."

        return content.strip()


def _first_message_content(resp) -> Optional[str]:
    choices = getattr(resp, "choices", None)
    if not choices:
        return None

    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if not isinstance(content, str):
        return None
    return content
