# backend/errors.py
from typing import Optional


class GrowtimeError(Exception):
    """Base for every error the API knows how to render."""

    code = "INTERNAL_SERVER_ERROR"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# --- Client errors (rendered as 400) ---
class BusinessError(GrowtimeError):
    code = "BUSINESS_ERROR"
    status_code = 400


class UserNotFoundError(BusinessError):
    code = "USER_NOT_FOUND"

    def __init__(self, github_id: str):
        super().__init__(f"User not found: {github_id}")
        self.github_id = github_id


class NoteNotFoundError(BusinessError):
    code = "NOTE_NOT_FOUND"

    def __init__(self, note_id: int):
        super().__init__(f"Note not found: {note_id}")
        self.note_id = note_id


class QuickLinkNotFoundError(BusinessError):
    code = "QUICK_LINK_NOT_FOUND"

    def __init__(self, link_id: int):
        super().__init__(f"Quick link not found: {link_id}")
        self.link_id = link_id


class InvalidUserDataError(BusinessError):
    code = "INVALID_USER_DATA"


class InvalidNoteDataError(BusinessError):
    code = "INVALID_NOTE_DATA"


class InvalidQuickLinkDataError(BusinessError):
    code = "INVALID_QUICK_LINK_DATA"


# --- Identity provider failures ---
class ProviderError(GrowtimeError):
    """An outbound call to GitHub did not produce a usable result."""

    code = "PROVIDER_ERROR"
    status_code = 502


class ProviderNetworkError(ProviderError):
    code = "PROVIDER_NETWORK_ERROR"


class ProviderResponseError(ProviderError):
    code = "PROVIDER_RESPONSE_ERROR"


class ProviderRejectedError(ProviderError):
    code = "PROVIDER_REJECTED"

    def __init__(self, error: str, description: Optional[str] = None, status_code: Optional[int] = None):
        message = f"{error}: {description}" if description else error
        super().__init__(message)
        self.error = error
        self.description = description
        self.http_status = status_code


# --- Store conflicts ---
class AccountConflictError(GrowtimeError):
    code = "ACCOUNT_CONFLICT"
    status_code = 409

    def __init__(self, github_id: str):
        super().__init__(f"Concurrent link for GitHub account {github_id} could not be resolved")
        self.github_id = github_id
