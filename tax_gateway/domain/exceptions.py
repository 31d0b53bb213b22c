"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ResultStoreError(DomainException):
    """Result store is unreachable or returned malformed data"""

    pass


class ChatServiceError(DomainException):
    """LLM service is not configured, unavailable, or returned no answer"""

    pass


class ChatNotConfiguredError(ChatServiceError):
    """No LLM model or API key configured"""

    pass
