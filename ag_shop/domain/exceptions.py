"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class UserNotFoundError(DomainException):
    """No user exists with the requested id"""

    pass


class PurchaseNotFoundError(DomainException):
    """No purchase exists with the requested id"""

    pass


class InvalidUserReferenceError(DomainException):
    """A purchase refers to a user that does not exist"""

    pass
