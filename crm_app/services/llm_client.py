import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

import openai

from crm_app.core.config import settings
from crm_app.core.exceptions import (
    AIServiceNotConfiguredError,
    AIServiceUnavailableError,
)
from crm_app.repositories.user_settings_repository import UserSettingsRepository

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], Any]

# Reasoning models only accept the default sampling temperature.
_FIXED_TEMPERATURE_PREFIXES = ("gpt-5", "o1", "o3", "o4")


@dataclass
class Completion:
    text: str
    model: str


def _default_client_factory(api_key: str) -> openai.AsyncOpenAI:
    return openai.AsyncOpenAI(
        api_key=api_key,
        max_retries=0,
        timeout=settings.OPENAI_TIMEOUT_SECONDS,
    )


class TextGenerationClient:
    """Chat-completion client with a primary/fallback model strategy.

    Exactly two attempts are made: the primary model, then the fallback
    model if the primary call failed for any reason other than the key
    being rejected.  There are no further retries.
    """

    def __init__(
        self,
        api_key: Optional[str],
        models: Optional[Sequence[str]] = None,
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        if not api_key:
            raise AIServiceNotConfiguredError()
        self._models: Tuple[str, ...] = tuple(
            models or (settings.OPENAI_PRIMARY_MODEL, settings.OPENAI_FALLBACK_MODEL)
        )
        self._client = (client_factory or _default_client_factory)(api_key)

    @property
    def models(self) -> Tuple[str, ...]:
        return self._models

    async def complete(
        self,
        messages: List[Dict[str, str]],
        *,
        json_response: bool = False,
        temperature: Optional[float] = 0.7,
        max_tokens: int = 500,
    ) -> Completion:
        """Run one chat completion and return the first choice's text.

        Raises:
            AIServiceUnavailableError: If every model attempt failed or
                the API key was rejected.
        """
        last_error: Optional[Exception] = None
        for model in self._models:
            request: Dict[str, Any] = {
                "model": model,
                "messages": messages,
                "max_completion_tokens": max_tokens,
            }
            if temperature is not None and not model.startswith(
                _FIXED_TEMPERATURE_PREFIXES
            ):
                request["temperature"] = temperature
            if json_response:
                request["response_format"] = {"type": "json_object"}

            try:
                response = await self._client.chat.completions.create(**request)
            except openai.AuthenticationError as exc:
                logger.warning("OpenAI rejected the API key (model %s)", model)
                raise AIServiceUnavailableError(
                    "OpenAI rejected the API key. Please check it in Settings."
                ) from exc
            except openai.APIError as exc:
                logger.warning("OpenAI call with model %s failed: %s", model, exc)
                last_error = exc
                continue

            content = response.choices[0].message.content if response.choices else None
            logger.info("Text generation completed with model %s", model)
            return Completion(text=content or "", model=model)

        raise AIServiceUnavailableError("OpenAI API call failed") from last_error


async def resolve_api_key(
    owner_id: UUID, settings_repo: UserSettingsRepository
) -> str:
    """Return the OpenAI key to use for *owner_id*.

    The owner's own key wins; the server key is the fallback.  An owner
    who has a settings row with AI features switched off gets no key.

    Raises:
        AIServiceNotConfiguredError: If AI is disabled or no key exists.
    """
    row = await settings_repo.get_by_owner(owner_id)
    if row is not None and not row.ai_features_enabled:
        raise AIServiceNotConfiguredError(
            "AI features are not enabled. Please enable them in Settings."
        )
    api_key = (row.openai_api_key if row is not None else None) or settings.OPENAI_API_KEY
    if not api_key:
        raise AIServiceNotConfiguredError()
    return api_key
