"""
Error taxonomy for the cartridge.

Local precondition failures raise PaymentProcessingError. Remote failures
arrive as stripe.StripeError with an ``{"error": {"code", "message"}}``
envelope. Handlers never let either escape: they call extract_error() and
render the result for their call site.
"""

from dataclasses import dataclass

import stripe


class CartridgeException(Exception):
    """Base for all cartridge exceptions."""

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: dict | None = None,
    ):
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class PaymentProcessingError(CartridgeException):
    """Raised when a local precondition of a payment flow does not hold."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(
            status_code=400,
            error_code="PAYMENT_PROCESSING_ERROR",
            message=message,
            details=details,
        )


@dataclass(frozen=True)
class LocalError:
    message: str

    def to_payload(self) -> dict:
        return {"error": {"message": self.message}}


@dataclass(frozen=True)
class RemoteError:
    code: str | None
    message: str

    def to_payload(self) -> dict:
        return {"error": {"code": self.code, "message": self.message}}


def extract_error(exc: Exception) -> LocalError | RemoteError:
    if isinstance(exc, stripe.StripeError):
        body = exc.json_body if isinstance(exc.json_body, dict) else {}
        envelope = body.get("error")
        if isinstance(envelope, dict) and envelope.get("message"):
            return RemoteError(code=envelope.get("code"), message=envelope["message"])
        return RemoteError(code=exc.code, message=exc.user_message or str(exc))

    if isinstance(exc, CartridgeException):
        return LocalError(exc.message)

    return LocalError(str(exc))
