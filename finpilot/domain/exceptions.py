"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class SummaryServiceError(DomainException):
    """Remote summary service failed, timed out, or returned unusable content"""

    pass


class AnalysisNotFoundError(DomainException):
    """Requested analysis does not exist in the store"""

    pass
