"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Input rejected before any state was touched"""

    pass


class ConflictError(DomainException):
    """Stale state or an illegal state transition"""

    pass


class NotFoundError(DomainException):
    """Entity does not exist or belongs to another business"""

    pass


class AuthorizationError(DomainException):
    """Caller is not allowed to perform the operation"""

    pass


class PersistenceError(DomainException):
    """Store unavailable or write failed; nothing was committed"""

    pass


class PaymentGatewayError(DomainException):
    """Payment gateway returned an error or is unavailable"""

    pass
