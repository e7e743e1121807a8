"""Domain exception hierarchy for Leasing Desk.

All domain-specific exceptions inherit from LeasingDeskError.
This allows catching all application errors with a single base class
while preserving specificity for individual error types.
"""

from typing import Any


class LeasingDeskError(Exception):
    """Base exception for all Leasing Desk errors.

    All domain exceptions should inherit from this class.
    Includes optional error_code for API responses and extra context.
    """

    error_code: str = "LD_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        if status_code:
            self.status_code = status_code
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Property Errors
# =============================================================================


class PropertyError(LeasingDeskError):
    """Base exception for property-related errors."""

    error_code = "PROPERTY_ERROR"
    status_code = 400


class PropertyNotFoundError(PropertyError):
    """Raised when a property cannot be found."""

    error_code = "PROPERTY_NOT_FOUND"
    status_code = 404

    def __init__(self, property_id: str) -> None:
        super().__init__(
            f"Property not found: {property_id}",
            context={"property_id": property_id},
        )


class LeasedPropertyDeletionError(PropertyError):
    """Raised when deleting a property that is currently leased."""

    error_code = "LEASED_PROPERTY_DELETION"
    status_code = 409

    def __init__(self, property_id: str) -> None:
        super().__init__(
            "A leased property cannot be deleted.",
            context={"property_id": property_id},
        )


# =============================================================================
# Visit Errors
# =============================================================================


class VisitError(LeasingDeskError):
    """Base exception for visit-related errors."""

    error_code = "VISIT_ERROR"
    status_code = 400


class VisitNotFoundError(VisitError):
    """Raised when a visit cannot be found."""

    error_code = "VISIT_NOT_FOUND"
    status_code = 404

    def __init__(self, visit_id: str) -> None:
        super().__init__(
            f"Visit not found: {visit_id}",
            context={"visit_id": visit_id},
        )


# =============================================================================
# Lease Resolution Errors
# =============================================================================


class LeaseResolutionError(LeasingDeskError):
    """Base exception for lease resolution errors."""

    error_code = "LEASE_RESOLUTION_ERROR"
    status_code = 409


class LeaseResolutionNotFoundError(LeaseResolutionError):
    """Raised when a lease resolution cannot be found."""

    error_code = "LEASE_RESOLUTION_NOT_FOUND"
    status_code = 404

    def __init__(self, resolution_id: str) -> None:
        super().__init__(
            f"Lease resolution not found: {resolution_id}",
            context={"resolution_id": resolution_id},
        )


class LeaseResolutionPendingError(LeaseResolutionError):
    """Raised when committing while the winner still has pending commitments."""

    error_code = "LEASE_RESOLUTION_PENDING"

    def __init__(self, resolution_id: str, pending_visit_ids: list[str]) -> None:
        super().__init__(
            f"Winner commitments must be resolved first: {', '.join(pending_visit_ids)}",
            context={
                "resolution_id": resolution_id,
                "pending_visit_ids": pending_visit_ids,
            },
        )


class LeaseResolutionStateError(LeaseResolutionError):
    """Raised when acting on a lease resolution that is already closed."""

    error_code = "LEASE_RESOLUTION_STATE"

    def __init__(self, resolution_id: str, state: str, action: str) -> None:
        super().__init__(
            f"Cannot {action} lease resolution {resolution_id} in state {state}",
            context={"resolution_id": resolution_id, "state": state, "action": action},
        )


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(LeasingDeskError):
    """Base exception for validation errors."""

    error_code = "VALIDATION_ERROR"
    status_code = 422


class PropertyValidationError(ValidationError):
    """Raised when a property misses the fields its status requires."""

    error_code = "INVALID_PROPERTY"

    def __init__(self, status: str, missing_fields: list[str]) -> None:
        super().__init__(
            f"Status {status} requires: {', '.join(missing_fields)}",
            context={"status": status, "missing_fields": missing_fields},
        )


class CommitmentValidationError(ValidationError):
    """Raised when a new commitment lacks its action text or due date."""

    error_code = "INVALID_COMMITMENT"

    def __init__(self, visit_id: str, reason: str) -> None:
        super().__init__(
            f"Invalid commitment for visit {visit_id}: {reason}",
            context={"visit_id": visit_id, "reason": reason},
        )


# =============================================================================
# External Service Errors
# =============================================================================


class ExternalServiceError(LeasingDeskError):
    """Base exception for failures of remote collaborators."""

    error_code = "EXTERNAL_SERVICE_ERROR"
    status_code = 503


class ReferenceValueUnavailableError(ExternalServiceError):
    """Raised when the UF reference value cannot be obtained."""

    error_code = "REFERENCE_VALUE_UNAVAILABLE"

    def __init__(self, reason: str) -> None:
        super().__init__(
            f"UF reference value unavailable: {reason}",
            context={"reason": reason},
        )


# =============================================================================
# Authorization Errors
# =============================================================================


class PermissionDeniedError(LeasingDeskError):
    """Raised when a role lacks permission for an action."""

    error_code = "PERMISSION_DENIED"
    status_code = 403

    def __init__(self, action: str, role: str) -> None:
        super().__init__(
            f"Permission denied: role {role} cannot {action}",
            context={"action": action, "role": role},
        )
