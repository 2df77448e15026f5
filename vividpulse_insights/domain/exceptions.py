"""Domain-specific exceptions"""

from enum import Enum


class FailureKind(str, Enum):
    """Tag identifying why remote augmentation did not succeed"""

    CREDENTIAL_MISSING = "CREDENTIAL_MISSING"
    CREDENTIAL_INVALID = "CREDENTIAL_INVALID"
    RATE_LIMITED = "RATE_LIMITED"
    TIMEOUT = "TIMEOUT"
    EMPTY_RESPONSE = "EMPTY_RESPONSE"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    PROVIDER_UNAVAILABLE = "PROVIDER_UNAVAILABLE"

    @property
    def retryable(self) -> bool:
        """Whether asking again later may succeed without user action"""
        return self in (
            FailureKind.RATE_LIMITED,
            FailureKind.TIMEOUT,
            FailureKind.PROVIDER_UNAVAILABLE,
            FailureKind.EMPTY_RESPONSE,
        )


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidTransactionError(DomainException, ValueError):
    """Transaction record violates its amount or category invariants"""

    pass


class RemoteInsightError(DomainException):
    """Remote augmentation failed; `failure` tags the specific condition"""

    failure: FailureKind = FailureKind.PROVIDER_UNAVAILABLE

    def __init__(self, message: str = "", failure: FailureKind | None = None):
        super().__init__(message or self.__class__.__doc__)
        if failure is not None:
            self.failure = failure


# Error categories


class ConfigurationError(RemoteInsightError):
    """Remote augmentation is not configured"""

    failure = FailureKind.CREDENTIAL_MISSING


class AuthorizationError(RemoteInsightError):
    """Credential present but rejected by the provider"""

    failure = FailureKind.CREDENTIAL_INVALID


class ThrottlingError(RemoteInsightError):
    """Provider is throttling requests"""

    failure = FailureKind.RATE_LIMITED


class TransportError(RemoteInsightError):
    """Provider could not be reached in time"""

    failure = FailureKind.PROVIDER_UNAVAILABLE


class ContractViolation(RemoteInsightError):
    """Provider reply does not match the insight schema"""

    failure = FailureKind.MALFORMED_RESPONSE


# Tagged failure conditions


class CredentialMissingError(ConfigurationError):
    """No API credential found in the environment"""

    failure = FailureKind.CREDENTIAL_MISSING


class CredentialInvalidError(AuthorizationError):
    """API credential was rejected (expired, revoked or forbidden)"""

    failure = FailureKind.CREDENTIAL_INVALID


class RateLimitedError(ThrottlingError):
    """Provider returned a rate-limit response"""

    failure = FailureKind.RATE_LIMITED


class RemoteTimeoutError(TransportError):
    """Provider did not answer within the deadline"""

    failure = FailureKind.TIMEOUT


class ProviderUnavailableError(TransportError):
    """Provider unreachable or answered with a server error"""

    failure = FailureKind.PROVIDER_UNAVAILABLE


class EmptyResponseError(ContractViolation):
    """Provider answered with an empty body"""

    failure = FailureKind.EMPTY_RESPONSE


class MalformedResponseError(ContractViolation):
    """Provider answered with unparseable or unusable JSON"""

    failure = FailureKind.MALFORMED_RESPONSE
