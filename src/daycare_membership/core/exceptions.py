class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "domain_error"


class NotFoundError(DomainError):
    """Raised when a member, payment request or attendance record is absent."""

    code = "not_found"


class PreconditionViolation(DomainError):
    """Raised when the entity exists but is in the wrong state for the action."""

    code = "precondition_violation"


class InactiveMember(PreconditionViolation):
    code = "inactive_member"


class AlreadyCheckedIn(PreconditionViolation):
    code = "already_checked_in"


class NoActiveSession(PreconditionViolation):
    code = "no_active_session"


class AlreadyProcessed(PreconditionViolation):
    code = "already_processed"


class InsufficientHours(PreconditionViolation):
    code = "insufficient_hours"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class InvalidRfid(ValidationError):
    code = "invalid_rfid"


class InvalidAmount(ValidationError):
    code = "invalid_amount"


class MissingProof(ValidationError):
    code = "missing_proof"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "forbidden"


class StorageError(DomainError):
    """Raised when the database fails (connectivity, unexpected constraint)."""

    code = "storage_error"


class ConstraintViolation(StorageError):
    """Raised when the database rejects a write because of a unique/foreign key."""

    code = "constraint_violation"
