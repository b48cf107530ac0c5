# core/errors.py

from typing import Optional


# ============================================================
# Domain exception taxonomy
# ============================================================
class CoreError(Exception):
    """Base class for every error raised by the policy core."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PolicyError(CoreError):
    """
    A request was well-formed but violates a policy rule.
    Always caller-recoverable: re-prompt the actor or hide the action.
    """


class Forbidden(PolicyError):
    """The actor lacks the permission required for the action."""

    def __init__(self, permission: Optional[str] = None, message: Optional[str] = None):
        if message is None:
            message = (
                f"Insufficient permissions: '{permission}' required"
                if permission else "Access denied"
            )
        super().__init__(message)
        self.permission = permission


class MissingReasonError(PolicyError):
    """A status transition that requires a justification was requested without one."""

    def __init__(self, target_status):
        self.target_status = target_status
        super().__init__(f'A reason is required when setting status to "{target_status}"')


class NotFound(CoreError):
    """A referenced work order, file, contact, task or actor does not exist."""

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        self.resource = resource
        self.resource_id = resource_id
        suffix = f" {resource_id}" if resource_id else ""
        super().__init__(f"{resource}{suffix} not found")


class TransportError(CoreError):
    """An external collaborator (database, webhook) failed."""

    def __init__(self, operation: str, detail: str = ""):
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation}: {detail}" if detail else operation)


class NoClientAssigned(PolicyError):
    """The work order has no client, so its Client Hub does not apply."""

    def __init__(self, work_order_id: str):
        self.work_order_id = work_order_id
        super().__init__("No client assigned to this work order")


# ============================================================
# Supabase error helpers
# ============================================================
def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1 — Supabase Auth / GoTrue errors
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2 — Supabase errors with args (common)
    if getattr(error, "args", None):
        return str(error.args[0])

    # Case 3 — Plain string fallback
    return str(error) or "Unknown Supabase error"


def handle_supabase_error(error: Exception, operation: str = "Database operation") -> TransportError:
    """
    Convert a Supabase / database failure into a TransportError.
    Returns the exception (doesn't raise) so caller can re-raise with `from`.

    Args:
        error: The exception that occurred
        operation: Description of what operation failed (e.g., "Failed to save work order")
    """
    from core.logging_config import logger

    error_detail = extract_supabase_error(error)
    logger.error(f"{operation}: {error_detail}")

    return TransportError(operation, error_detail)
