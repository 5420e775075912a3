"""Language-model client that turns free-text searches into cleaner filters."""

import json
import os
import re

import httpx
import structlog
import yaml
from pydantic import ValidationError

from cleanconnect.config import Settings, get_settings
from cleanconnect.models.user import SearchCriteria

logger = structlog.get_logger(__name__)

# OpenAI-compatible endpoint exposed by the Gemini API
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai"

SYSTEM_PROMPT = """You are a helper for a cleaning service app in Nigeria.

Extract key search terms from the user's query:
- location: city or state mentioned (string)
- service: type of cleaning requested (string)
- maxPrice: highest budget in Naira (number)

Return ONLY a JSON object with the keys "location", "service" and "maxPrice".
If information is missing, use null.
Example: {"location": "Lagos", "service": "Deep Cleaning", "maxPrice": 50000}"""

_ENV_PATTERN = re.compile(r"\$\{env\.([^}]+)\}")
_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)


class AssistantError(Exception):
    """Raised when the assistant is unavailable or replies with garbage."""


def expand_env(value: str | None) -> str | None:
    """Resolve ``${env.NAME}`` and ``${env.NAME:-default}`` placeholders."""
    if not value or "${env." not in value:
        return value

    def replace(match: re.Match) -> str:
        name, _, default = match.group(1).partition(":-")
        return os.getenv(name, default)

    return _ENV_PATTERN.sub(replace, value)


def parse_criteria(reply: str) -> SearchCriteria:
    """Parse the model's reply into search criteria.

    Accepts a bare JSON object or one wrapped in a markdown code fence.

    Raises:
        AssistantError: If no JSON object can be recovered, or its fields have the wrong types
    """
    text = reply.strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        # Fallback: extract JSON from markdown code blocks
        match = _FENCED_JSON.search(text)
        if not match:
            raise AssistantError(f"Unparseable assistant reply: {reply[:200]}") from None
        try:
            data = json.loads(match.group(1))
        except json.JSONDecodeError as exc:
            raise AssistantError("Assistant reply contained invalid JSON") from exc

    if not isinstance(data, dict):
        raise AssistantError("Assistant reply was not a JSON object")

    max_price = data.get("maxPrice", data.get("max_price"))
    if isinstance(max_price, str):
        digits = re.sub(r"[^\d.]", "", max_price)
        try:
            max_price = float(digits)
        except ValueError:
            max_price = None
    elif not isinstance(max_price, (int, float)):
        max_price = None

    try:
        return SearchCriteria(
            location=data.get("location") or None,
            service=data.get("service") or None,
            max_price=max_price or None,
        )
    except ValidationError as exc:
        raise AssistantError(f"Assistant reply had unusable criteria: {data}") from exc


class SearchAssistant:
    """Wrapper around an OpenAI-compatible chat completion endpoint.

    Provider settings come from a YAML file (``ASSISTANT_CONFIG_FILE``) when
    one is configured, otherwise from the ``ASSISTANT_*`` settings.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize search assistant.

        Args:
            settings: Application settings (defaults to process settings)
            http_client: Preconfigured HTTP client (tests inject a mock transport)
        """
        self.settings = settings or get_settings()
        self.base_url = self.settings.assistant_base_url or DEFAULT_BASE_URL
        self.model = self.settings.assistant_model
        self.api_key = self.settings.assistant_api_key
        self.temperature = 0.2
        self.max_tokens = 256

        if self.settings.assistant_config_file:
            self._load_config(self.settings.assistant_config_file)

        self.http_client = http_client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(30.0),
        )

    def _load_config(self, config_path: str) -> None:
        """Load provider configuration from a YAML file."""
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}

        providers = config.get("providers", {}).get("inference", [])
        if not providers:
            raise ValueError(f"No inference providers configured in {config_path}")

        # Use first inference provider
        provider = providers[0]
        self.base_url = expand_env(provider.get("base_url")) or self.base_url
        self.model = provider.get("model", self.model)
        self.api_key = expand_env(provider.get("api_key")) or self.api_key
        self.temperature = provider.get("temperature", self.temperature)
        self.max_tokens = provider.get("max_tokens", self.max_tokens)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) or bool(self.settings.assistant_base_url)

    async def generate(self, prompt: str, system_prompt: str | None = None) -> str:
        """Generate text from the model.

        Args:
            prompt: User prompt
            system_prompt: System prompt (optional)

        Returns:
            Generated text response

        Raises:
            AssistantError: On transport failures or a malformed response
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        request_data = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

        try:
            response = await self.http_client.post(
                "chat/completions", json=request_data, headers=headers
            )
            response.raise_for_status()
            result = response.json()
            return result["choices"][0]["message"]["content"] or ""
        except httpx.HTTPError as exc:
            raise AssistantError(f"Assistant request failed: {exc}") from exc
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise AssistantError("Assistant returned an unexpected payload") from exc

    async def extract_criteria(self, query: str) -> SearchCriteria:
        """Extract location, service and budget from a free-text query.

        Raises:
            AssistantError: If the assistant is not configured or fails
        """
        if not self.is_configured:
            raise AssistantError("Search assistant is not configured")

        reply = await self.generate(
            prompt=f'User query: "{query}"\n\nRespond with JSON only.',
            system_prompt=SYSTEM_PROMPT,
        )
        criteria = parse_criteria(reply)

        logger.info(
            "search_criteria_extracted",
            location=criteria.location,
            service=criteria.service,
            max_price=criteria.max_price,
        )
        return criteria

    async def close(self) -> None:
        """Close HTTP client."""
        await self.http_client.aclose()
