"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class AIServiceError(DomainException):
    """AI completion endpoint is unconfigured, unavailable or returned an error"""

    pass


class InvalidProfileDataError(DomainException):
    """Generated profile payload is malformed"""

    pass


class UnknownReportTypeError(DomainException):
    """Requested report type is not supported"""

    pass


class ProfileNotFoundError(DomainException):
    """No stored profile for the requested user"""

    pass
