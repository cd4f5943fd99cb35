import logging
from typing import Any, Callable, Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from crm_app.core.constants import CUSTOMIZATION_NAME_MAX_LENGTH, UI_COMPONENTS
from crm_app.core.exceptions import (
    ChatSessionNotFoundError,
    InvalidRequestError,
    PersistenceError,
)
from crm_app.repositories.chat_repository import ChatRepository
from crm_app.repositories.customization_repository import CustomizationRepository
from crm_app.repositories.user_settings_repository import UserSettingsRepository
from crm_app.schemas.common import ChatRole
from crm_app.schemas.customization import CustomizationCandidate
from crm_app.services.llm_client import TextGenerationClient, resolve_api_key
from crm_app.services.reply_parser import ParsedCustomization, parse_customization_reply

logger = logging.getLogger(__name__)

ClientBuilder = Callable[[str], TextGenerationClient]

_COMPONENT_NAME_MAX_LENGTH = 100

WIZARD_INSTRUCTION = (
    "You are a UI customization assistant for a CRM application. "
    "The CRM has these components (data-component attribute names):\n"
    + "\n".join(f"- {name}" for name in UI_COMPONENTS)
    + """

When the user requests UI changes, reply with a single JSON object:
- component: one component name from the list above
- modifications: object with styling details
- description: what will change
- preview: text description of the visual result

Available modifications:
- colors: { background, text, border }
- spacing: { padding, margin, gap }
- layout: { width, height, display, flexDirection }
- fontSize: size value
- borderRadius: radius value
- theme: "neon", "minimal", "bold", "dark", "light" or "custom"

Example response:
{
  "component": "deal-card",
  "modifications": {
    "colors": { "background": "#10b981", "text": "#ffffff" },
    "fontSize": "18px",
    "theme": "neon"
  },
  "description": "Changed deal cards to vibrant green with neon effect",
  "preview": "Deal cards now have bright green background with white text and glowing border"
}"""
)


def _assistant_summary(parsed: ParsedCustomization) -> str:
    return (
        "I've created a customization for you!\n\n"
        f"**Component:** {parsed.component}\n"
        f"**Changes:** {parsed.description}\n\n"
        f"**Preview:** {parsed.preview}"
    )


class UIWizardService:
    """Turns a natural-language styling request into a stored candidate.

    Candidates are persisted inactive; nothing is applied until the
    owner calls the apply endpoint.
    """

    def __init__(
        self,
        customization_repo: CustomizationRepository,
        chat_repo: ChatRepository,
        settings_repo: UserSettingsRepository,
        client_builder: Optional[ClientBuilder] = None,
    ) -> None:
        self._customization_repo = customization_repo
        self._chat_repo = chat_repo
        self._settings_repo = settings_repo
        self._client_builder: ClientBuilder = client_builder or TextGenerationClient

    async def generate(
        self,
        owner_id: UUID,
        user_request: str,
        session_id: Optional[UUID] = None,
    ) -> CustomizationCandidate:
        """Generate, parse and store one customization candidate.

        Steps:
        1. Validate the request text
        2. Resolve the owner's API key (raises if AI is off)
        3. Verify the chat session, when given, belongs to the owner
        4. Ask the model and parse its reply (never fails on bad JSON)
        5. Persist the candidate, conversation turns and usage count

        Raises:
            InvalidRequestError: If the request is blank.
            AIServiceNotConfiguredError: If AI is disabled or unkeyed.
            ChatSessionNotFoundError: If *session_id* is not the owner's.
            AIServiceUnavailableError: If the model call failed.
            PersistenceError: If the store rejected the writes.
        """
        request_text = (user_request or "").strip()
        if not request_text:
            raise InvalidRequestError("user_request must not be empty")

        api_key = await resolve_api_key(owner_id, self._settings_repo)

        if session_id is not None:
            session = await self._chat_repo.get_for_owner(owner_id, session_id)
            if session is None:
                raise ChatSessionNotFoundError()

        client = self._client_builder(api_key)
        completion = await client.complete(self._build_messages(request_text))
        parsed = parse_customization_reply(completion.text)
        if parsed.degraded:
            logger.info(
                "Degraded customization for owner %s (model %s)",
                owner_id,
                completion.model,
            )

        try:
            rule = await self._customization_repo.create_candidate(
                owner_id,
                customization_name=request_text[:CUSTOMIZATION_NAME_MAX_LENGTH],
                component_name=parsed.component[:_COMPONENT_NAME_MAX_LENGTH],
                modifications=parsed.modifications,
                description=parsed.description,
                preview_text=parsed.preview,
            )

            candidate = CustomizationCandidate(
                id=rule.id,
                component=rule.component_name,
                modifications=parsed.modifications,
                description=parsed.description,
                preview=parsed.preview,
                user_request=request_text,
                degraded=parsed.degraded,
                model=completion.model,
            )

            if session_id is not None:
                await self._record_turns(session_id, request_text, parsed, candidate)

            await self._settings_repo.record_usage(owner_id)
            await self._customization_repo.commit()
        except SQLAlchemyError as exc:
            logger.error("Failed to store customization for owner %s: %s", owner_id, exc)
            await self._customization_repo.rollback()
            raise PersistenceError("Failed to save customization") from exc

        logger.info(
            "Generated customization %s for component %s", candidate.id, candidate.component
        )
        return candidate

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _build_messages(request_text: str) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": WIZARD_INSTRUCTION},
            {
                "role": "user",
                "content": (
                    f'User wants to: "{request_text}"\n\n'
                    "Provide UI customization in JSON format."
                ),
            },
        ]

    async def _record_turns(
        self,
        session_id: UUID,
        request_text: str,
        parsed: ParsedCustomization,
        candidate: CustomizationCandidate,
    ) -> None:
        customization_data: Dict[str, Any] = {
            "id": str(candidate.id),
            "component": candidate.component,
            "modifications": candidate.modifications,
            "description": candidate.description,
            "preview": candidate.preview,
        }
        await self._chat_repo.add_message(session_id, ChatRole.user.value, request_text)
        await self._chat_repo.add_message(
            session_id,
            ChatRole.assistant.value,
            _assistant_summary(parsed),
            customization_data=customization_data,
        )
        await self._chat_repo.touch(session_id)
