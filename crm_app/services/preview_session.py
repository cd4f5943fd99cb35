"""Temporary preview of one candidate customization.

The preview lives in its own stylesheet resource.  It never reads or
writes the registry's resource or the customization store, so ending a
preview leaves the applied styling exactly as it was.
"""

from typing import Any, Optional
from uuid import UUID

from crm_app.core.constants import PREVIEW_STYLES_ID
from crm_app.core.stylesheet import StyleSheetDocument
from crm_app.services.style_compiler import compile_stylesheet


class PreviewSession:
    def __init__(self, document: StyleSheetDocument) -> None:
        self._document = document

    @property
    def enabled(self) -> bool:
        return PREVIEW_STYLES_ID in self._document

    @property
    def customization_id(self) -> Optional[UUID]:
        resource = self._document.get(PREVIEW_STYLES_ID)
        return resource.source_id if resource is not None else None

    @property
    def css(self) -> str:
        resource = self._document.get(PREVIEW_STYLES_ID)
        return resource.content if resource is not None else ""

    def enable(self, candidate: Any) -> str:
        """Show *candidate* alone in the preview resource.

        Enabling again replaces the previous preview.
        """
        css = compile_stylesheet(
            {candidate.component_name: candidate.modifications or {}}
        )
        self._document.ensure(PREVIEW_STYLES_ID).replace(css, source_id=candidate.id)
        return css

    def disable(self) -> None:
        self._document.remove(PREVIEW_STYLES_ID)
