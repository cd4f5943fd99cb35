class CRMError(Exception):
    """Base class for all CRM domain exceptions.

    Every custom exception in this module inherits from here so that a
    single ``except CRMError`` clause can catch any domain error.
    """

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(detail)


class AuthenticationRequiredError(CRMError):
    """Raised when a tenant request arrives without an owner identity."""

    def __init__(self, detail: str = "Missing or invalid X-User-Id header"):
        super().__init__(detail)


class InvalidRequestError(CRMError):
    """Raised when request fields are missing or malformed.

    Schema-level problems are rejected by Pydantic before a handler runs;
    this covers checks that need service context (e.g. a blank prompt
    after stripping).  Never retried, surfaced verbatim.
    """

    def __init__(self, detail: str = "Invalid request"):
        super().__init__(detail)


class CustomizationNotFoundError(CRMError):
    """Raised when a UI customization does not exist for the owner."""

    def __init__(self, detail: str = "Customization not found"):
        super().__init__(detail)


class ChatSessionNotFoundError(CRMError):
    """Raised when a wizard conversation does not exist for the owner."""

    def __init__(self, detail: str = "Chat session not found"):
        super().__init__(detail)


class CustomerNotFoundError(CRMError):
    """Raised when a requested customer does not exist."""

    def __init__(self, detail: str = "Customer not found"):
        super().__init__(detail)


class DealNotFoundError(CRMError):
    """Raised when a requested deal does not exist."""

    def __init__(self, detail: str = "Deal not found"):
        super().__init__(detail)


class TicketNotFoundError(CRMError):
    """Raised when a requested ticket does not exist."""

    def __init__(self, detail: str = "Ticket not found"):
        super().__init__(detail)


class ActivityNotFoundError(CRMError):
    """Raised when a requested activity does not exist."""

    def __init__(self, detail: str = "Activity not found"):
        super().__init__(detail)


class WorkflowRuleNotFoundError(CRMError):
    """Raised when a requested workflow rule does not exist."""

    def __init__(self, detail: str = "Workflow rule not found"):
        super().__init__(detail)


class UpstreamUnavailableError(CRMError):
    """Base class for failures of the text-generation collaborator."""

    def __init__(self, detail: str = "AI features unavailable"):
        super().__init__(detail)


class AIServiceNotConfiguredError(UpstreamUnavailableError):
    """Raised when AI features are disabled or no API key is configured."""

    def __init__(
        self,
        detail: str = "OpenAI API key not configured. Please add it in Settings.",
    ):
        super().__init__(detail)


class AIServiceUnavailableError(UpstreamUnavailableError):
    """Raised when the text-generation call itself fails.

    Covers authentication rejection, quota, timeouts and non-success
    statuses.  No automatic retry happens above the client's two-model
    attempt; the caller must re-invoke.  The detail always starts with
    ``AI features unavailable``; *reason* is appended after a colon.
    """

    MESSAGE = "AI features unavailable"

    def __init__(self, reason: str | None = None):
        detail = f"{self.MESSAGE}: {reason}" if reason else self.MESSAGE
        self.reason = reason
        super().__init__(detail)


class PersistenceError(CRMError):
    """Raised when the store rejects a write.

    The transaction is rolled back and the owner's stylesheet resources
    are left as they were.
    """

    def __init__(self, detail: str = "Failed to save changes"):
        super().__init__(detail)
