"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidRequestError(DomainException):
    """Loan request value is outside the documented bounds"""

    def __init__(self, message: str, field: str):
        self.field = field
        super().__init__(message)


class ConfigError(DomainException):
    """Rate table or fee schedule is missing or malformed"""

    pass


class InvalidApplicationError(DomainException):
    """Application is missing structurally required data"""

    pass


class RateStoreError(DomainException):
    """Rate store returned an error or is unavailable"""

    pass
