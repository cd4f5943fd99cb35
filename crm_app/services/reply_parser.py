"""Turn free-form model replies into structured data.

Model output is only loosely JSON: sometimes clean, sometimes wrapped in
prose or a fenced block, sometimes not JSON at all.  Parsing is tiered:

1. the whole reply as JSON;
2. the outermost ``{...}`` span of the reply as JSON;
3. (customizations only) a degraded ``general`` candidate carrying the
   raw text as its preview.

The customization parser never raises.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from crm_app.core.constants import GENERAL_COMPONENT
from crm_app.schemas.customization import Modifications

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

DEGRADED_DESCRIPTION = "Custom styling applied"


@dataclass
class ParsedCustomization:
    component: str
    modifications: Dict[str, Any] = field(default_factory=dict)
    description: str = ""
    preview: str = ""
    degraded: bool = False


def extract_json_payload(text: Optional[str]) -> Optional[Any]:
    """Return the JSON value embedded in *text*, or ``None``."""
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        pass
    match = _JSON_OBJECT.search(text)
    if match is None:
        return None
    try:
        return json.loads(match.group(0))
    except ValueError:
        return None


def _text_field(payload: Dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def parse_customization_reply(text: Optional[str]) -> ParsedCustomization:
    raw = text or ""
    payload = extract_json_payload(raw)

    if not isinstance(payload, dict):
        logger.warning("Model reply was not JSON; using degraded customization")
        return ParsedCustomization(
            component=GENERAL_COMPONENT,
            modifications={"theme": "custom"},
            description=DEGRADED_DESCRIPTION,
            preview=raw,
            degraded=True,
        )

    component = payload.get("component") or payload.get("componentName")
    if not isinstance(component, str) or not component.strip():
        component = GENERAL_COMPONENT

    modifications = payload.get("modifications")
    if not isinstance(modifications, dict):
        modifications = {}

    return ParsedCustomization(
        component=component.strip(),
        modifications=Modifications.lenient(modifications).to_payload(),
        description=_text_field(payload, "description"),
        preview=_text_field(payload, "preview"),
    )
