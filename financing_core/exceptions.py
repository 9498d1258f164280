"""Custom exception hierarchy for financing-core."""


class FinancingError(Exception):
    """Base exception for all financing-core errors."""


class FinancingValidationError(FinancingError):
    """Raised when financing input is malformed."""


class DomainError(FinancingError):
    """Raised when an operation violates a financing domain rule."""


class UnsupportedAmortizationSystemError(DomainError):
    """Raised when a schedule is requested for an unknown amortization system."""


class NoPendingInstallmentsError(DomainError):
    """Raised when a restructure is committed on a fully paid financing."""


class PersistenceError(FinancingError):
    """Raised when the persistent store fails to load or save."""


class ConfigurationError(FinancingError):
    """Raised when configuration is invalid or missing."""
