"""
x402 custom exception hierarchy
"""

from typing import Any


class X402Error(Exception):
    """x402 base exception"""

    pass


class ConfigurationError(X402Error):
    """Configuration-related error"""

    pass


class UnsupportedNetworkError(ConfigurationError):
    """Unsupported network"""

    pass


class UnknownTokenError(ConfigurationError):
    """Unknown token"""

    pass


class WalletNotFoundError(ConfigurationError):
    """Raised when no signing identity can be resolved for a chain family"""

    def __init__(self, chain_family: str, checked_locations: list[str]):
        self.chain_family = chain_family
        self.checked_locations = list(checked_locations)
        locations = "; ".join(self.checked_locations) or "none"
        super().__init__(
            f"No {chain_family} signing identity available. Checked: {locations}"
        )


class InvalidWalletError(ConfigurationError):
    """A wallet secret was found but could not be decoded"""

    def __init__(self, chain_family: str, source: str, reason: str):
        self.chain_family = chain_family
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid {chain_family} wallet from {source}: {reason}")


class ValidationError(X402Error):
    """Validation-related error"""

    pass


class QuoteError(ValidationError):
    """Payment required response carries no usable priced option"""

    pass


class InvalidPaymentError(ValidationError):
    """Payment proof inputs are missing or inconsistent"""

    pass


class SignatureError(X402Error):
    """Signature-related error"""

    pass


class SignatureCreationError(SignatureError):
    """Signature creation failed"""

    def __init__(self, message: str, chain_family: str | None = None):
        self.chain_family = chain_family
        if chain_family:
            message = f"[{chain_family}] {message}"
        super().__init__(message)


class TransportError(X402Error):
    """Unexpected HTTP status or unusable response body"""

    def __init__(self, message: str, status_code: int | None = None, body: Any = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class PaymentRejectedError(TransportError):
    """Server answered the paid retry with another 402"""

    pass


class SettlementError(X402Error):
    """Settlement-related error"""

    pass
