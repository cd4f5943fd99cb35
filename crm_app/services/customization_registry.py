"""Per-owner registry of applied customizations.

The registry keeps a local copy of the owner's rules in application
order, merges the active ones into a single component → modifications map
and pushes the compiled result into the owner's dynamic stylesheet
resource.  Each push replaces the resource's content; it never appends.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from crm_app.core.constants import DYNAMIC_STYLES_ID
from crm_app.core.stylesheet import StyleSheetDocument
from crm_app.repositories.customization_repository import CustomizationRepository
from crm_app.schemas.customization import Modifications
from crm_app.services.style_compiler import compile_stylesheet

logger = logging.getLogger(__name__)


@dataclass
class RuleSnapshot:
    """Detached copy of one stored rule, safe to keep across sessions."""

    id: UUID
    component_name: str
    modifications: Dict[str, Any] = field(default_factory=dict)
    is_active: bool = False

    @classmethod
    def from_model(cls, rule: Any) -> "RuleSnapshot":
        return cls(
            id=rule.id,
            component_name=rule.component_name,
            modifications=copy.deepcopy(dict(rule.modifications or {})),
            is_active=bool(rule.is_active),
        )


def merge_customizations(rules: Iterable[Any]) -> Dict[str, Dict[str, Any]]:
    """Merge active rules, later rules winning field by field.

    Category maps (``colors``, ``spacing``, ``layout``) merge key-wise;
    scalar fields (``theme``, ``fontSize``, ``borderRadius``) are
    replaced.  Inactive rules contribute nothing.
    """
    merged: Dict[str, Dict[str, Any]] = {}
    for rule in rules:
        if not rule.is_active:
            continue
        target = merged.setdefault(rule.component_name, {})
        payload = Modifications.lenient(rule.modifications).to_payload()
        for key, value in payload.items():
            current = target.get(key)
            if isinstance(value, dict) and isinstance(current, dict):
                target[key] = {**current, **value}
            else:
                target[key] = copy.deepcopy(value)
    return merged


class CustomizationRegistry:
    """Owns the effective customization set for one owner."""

    def __init__(
        self,
        owner_id: UUID,
        repo: CustomizationRepository,
        document: StyleSheetDocument,
    ) -> None:
        self.owner_id = owner_id
        self._repo = repo
        self._document = document
        self._rules: List[RuleSnapshot] = []
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def rules(self) -> List[RuleSnapshot]:
        return list(self._rules)

    @property
    def merged(self) -> Dict[str, Dict[str, Any]]:
        return merge_customizations(self._rules)

    @property
    def stylesheet(self) -> str:
        """Content currently held by the dynamic stylesheet resource."""
        resource = self._document.get(DYNAMIC_STYLES_ID)
        return resource.content if resource is not None else ""

    async def load(self) -> str:
        """Read the owner's rules from the store and push the result."""
        rows = await self._repo.list_in_application_order(self.owner_id)
        self._rules = [RuleSnapshot.from_model(row) for row in rows]
        self._loaded = True
        logger.debug(
            "Loaded %d customization(s) for owner %s", len(self._rules), self.owner_id
        )
        return self._push()

    def apply(self, rule: Any) -> str:
        """Mark *rule* active and move it to the end of the application order."""
        snapshot = RuleSnapshot.from_model(rule)
        snapshot.is_active = True
        self._rules = [r for r in self._rules if r.id != snapshot.id]
        self._rules.append(snapshot)
        return self._push()

    def remove(self, rule_id: UUID) -> str:
        """Deactivate *rule_id*; the rule stays in the local list."""
        found = self._find(rule_id)
        if found is None:
            logger.debug("Remove of unknown customization %s ignored", rule_id)
        else:
            found.is_active = False
        return self._push()

    def _find(self, rule_id: UUID) -> Optional[RuleSnapshot]:
        for rule in self._rules:
            if rule.id == rule_id:
                return rule
        return None

    def _push(self) -> str:
        css = compile_stylesheet(self.merged)
        self._document.ensure(DYNAMIC_STYLES_ID).replace(css)
        return css
