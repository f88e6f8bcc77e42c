"""Domain-specific exceptions — framework-independent."""


class ServicePortalError(Exception):
    """Base class for every error raised by the complaint core."""


class ValidationError(ServicePortalError):
    """Raised when submitted input is malformed. Nothing is persisted."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class NotFoundError(ServicePortalError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class ConflictError(ServicePortalError):
    """Raised when a write raced with another write on the same record.

    The store is last-writer-wins, so callers treat this as a signal to
    refresh rather than as a hard failure.
    """

    def __init__(self, entity_id: str, message: str = "concurrent modification"):
        self.entity_id = entity_id
        super().__init__(f"Complaint '{entity_id}': {message}")


class StoreUnavailableError(ServicePortalError):
    """Raised when the persistent store cannot be reached. Recoverable."""

    def __init__(self, operation: str, reason: str = ""):
        self.operation = operation
        self.reason = reason
        message = f"Store unavailable during '{operation}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


NetworkError = StoreUnavailableError


class PermissionDeniedError(ServicePortalError):
    """Raised when an actor attempts an operation its role does not allow."""

    def __init__(self, role: str, action: str):
        self.role = role
        self.action = action
        super().__init__(f"Role '{role}' may not {action}")


class AuthenticationError(ServicePortalError):
    """Raised when the identity provider rejects credentials or a token."""

    def __init__(self, message: str, status_code: int = 401):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class IdentityUnavailableError(ServicePortalError):
    """Raised when the identity provider cannot be reached."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Identity provider unavailable: {reason}")
