"""In-process stylesheet resources.

A :class:`StyleSheetDocument` plays the part of a page ``<head>``: it owns
named stylesheet resources, creates each at most once and hands back the
same instance thereafter.  Writers replace a resource's content wholesale;
nothing is ever appended, so repeated updates never grow the output.
"""

import logging
from typing import Dict, Optional
from uuid import UUID

logger = logging.getLogger(__name__)


class StyleSheetResource:
    """A single named stylesheet with one writer."""

    def __init__(self, element_id: str) -> None:
        self.element_id = element_id
        self._content = ""
        self._revision = 0
        self.source_id: Optional[UUID] = None

    @property
    def content(self) -> str:
        return self._content

    @property
    def revision(self) -> int:
        """Number of replacements performed so far."""
        return self._revision

    def replace(self, content: str, source_id: Optional[UUID] = None) -> None:
        """Swap the whole stylesheet text for *content*."""
        self._content = content
        self.source_id = source_id
        self._revision += 1

    def clear(self) -> None:
        self.replace("")


class StyleSheetDocument:
    """The set of stylesheet resources attached for one owner."""

    def __init__(self) -> None:
        self._resources: Dict[str, StyleSheetResource] = {}

    def ensure(self, element_id: str) -> StyleSheetResource:
        """Return the resource named *element_id*, creating it once."""
        resource = self._resources.get(element_id)
        if resource is None:
            resource = StyleSheetResource(element_id)
            self._resources[element_id] = resource
        return resource

    def get(self, element_id: str) -> Optional[StyleSheetResource]:
        return self._resources.get(element_id)

    def remove(self, element_id: str) -> None:
        """Detach the resource entirely (no-op when absent)."""
        self._resources.pop(element_id, None)

    def __contains__(self, element_id: object) -> bool:
        return element_id in self._resources

    def __len__(self) -> int:
        return len(self._resources)


class StyleSheetHost:
    """Process-wide owner → document map for state that outlives a request.

    Only live previews are kept here; the applied stylesheet is rebuilt
    from the store (or read from Redis) on each request.  A document is
    created on the first write for an owner and released as soon as it
    holds no resources, so lookups for unknown owners never add entries.

    One host exists per process (see ``crm_app.dependencies``).  Requests
    are served on a single event loop, so no locking is needed.
    """

    def __init__(self) -> None:
        self._documents: Dict[UUID, StyleSheetDocument] = {}

    def __len__(self) -> int:
        return len(self._documents)

    def get(self, owner_id: UUID) -> Optional[StyleSheetDocument]:
        """Return the owner's document without creating one."""
        return self._documents.get(owner_id)

    def document(self, owner_id: UUID) -> StyleSheetDocument:
        """Return the owner's document, creating it for a write."""
        document = self._documents.get(owner_id)
        if document is None:
            logger.debug("Creating stylesheet document for owner %s", owner_id)
            document = StyleSheetDocument()
            self._documents[owner_id] = document
        return document

    def release(self, owner_id: UUID) -> None:
        """Forget the owner's document once it holds nothing."""
        document = self._documents.get(owner_id)
        if document is not None and not len(document):
            del self._documents[owner_id]
            logger.debug("Released stylesheet document for owner %s", owner_id)
