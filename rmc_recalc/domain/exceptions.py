"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class NoRecordsFoundError(DomainException):
    """Statement text produced no payment candidates"""

    pass


class InvalidContractInputError(DomainException):
    """Contract terms or payment list cannot feed the amortization engine"""

    pass


class MalformedNumericTokenError(DomainException, ValueError):
    """Value matched the money pattern but is not a valid number"""

    pass


class RateProviderError(DomainException):
    """Rate series API returned an error or is unavailable"""

    pass


class TextExtractionError(DomainException):
    """PDF/OCR backend failed to produce text"""

    pass


class UnsupportedFileError(DomainException):
    """Uploaded file is empty or cannot be handled"""

    pass


class DegradedDateRecovery(UserWarning):
    """
    No candidate carried a competence date, so the reconciler anchored the
    sequence on the current month. Results are usable but low confidence.
    """
