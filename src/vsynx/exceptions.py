"""vsynx exception hierarchy.

All public exceptions inherit from VsynxError, giving callers a single
base class to catch when they want to handle any vsynx-specific failure
without swallowing unrelated errors.
"""


class VsynxError(Exception):
    """Base exception for all vsynx errors."""


class BackendError(VsynxError):
    """Raised when a call to the extension-management backend fails.

    Covers transport failures, timeouts, non-2xx responses and payloads
    that cannot be decoded. The message is human-readable and suitable
    for display as-is.
    """


class InputError(VsynxError):
    """Raised for user input rejected before any backend request.

    Covers empty search queries, empty sync selections, missing targets
    and unavailable editors.
    """


class InvalidStateError(VsynxError):
    """Raised when an operation is not allowed in the current state.

    Covers starting a second audit while one is running for another
    editor and resolving conflicts when no confirmation is pending.
    """


class UnknownEditorError(VsynxError):
    """Raised when an editor id is not present in the editor directory."""
