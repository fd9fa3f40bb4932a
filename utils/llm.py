import os
import logging
import httpx
from typing import Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com"
DEFAULT_MODEL = "gpt-4o-mini"


class TextGenerator(Protocol):
    """Anything that turns a prompt into a short piece of text (or nothing)."""

    async def generate(self, prompt: str, max_tokens: int = 80) -> Optional[str]:
        ...


class OpenAIClient:
    def __init__(self, api_key: str, base_url: str = DEFAULT_BASE_URL, model: str = DEFAULT_MODEL,
                 timeout: float = 15.0, temperature: float = 0.7):
        """
        Initialize OpenAI chat-completions client.

        Args:
            api_key: OpenAI API key
            base_url: Base URL for API (default: https://api.openai.com)
            model: Model name (default: gpt-4o-mini)
            timeout: Read timeout in seconds (default: 15.0)
            temperature: Sampling temperature (default: 0.7)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.temperature = temperature

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

    async def chat(self, messages: List[Dict[str, str]], **kwargs) -> str:
        """
        Non-streaming chat completion. Returns the content of the first choice
        ("" when the model returned no content).
        """
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
        }
        if kwargs:
            payload.update(kwargs)

        url = f"{self.base_url}/v1/chat/completions"
        timeout_config = httpx.Timeout(
            connect=5.0,
            read=self.timeout,
            write=5.0,
            pool=5.0
        )
        async with httpx.AsyncClient(timeout=timeout_config) as client:
            resp = await client.post(url, headers=self._headers(), json=payload)
            resp.raise_for_status()
            data = resp.json()
            choices = data.get("choices") or [{}]
            message = choices[0].get("message") or {}
            return message.get("content") or ""

    async def generate(self, prompt: str, max_tokens: int = 80) -> Optional[str]:
        """Single-prompt completion; None when the model returned nothing."""
        content = await self.chat([{"role": "user", "content": prompt}], max_tokens=max_tokens)
        content = content.strip()
        return content or None


def build_text_generator() -> Optional[OpenAIClient]:
    """
    Build the text generator from environment variables.

    Returns None when OPENAI_API_KEY is not set, which disables generated insights.
    """
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        logger.warning("OPENAI_API_KEY not set, generated insights are disabled")
        return None

    client = OpenAIClient(
        api_key=api_key,
        base_url=os.getenv("OPENAI_BASE_URL", DEFAULT_BASE_URL),
        model=os.getenv("OPENAI_MODEL", DEFAULT_MODEL)
    )
    logger.info(f"Text generator configured (model: {client.model})")
    return client
