"""
Matching Exceptions
"""

from typing import Optional


class MatchingError(Exception):
    """Base class for matching and match confirmation failures."""


class RequestNotFoundError(MatchingError):
    """Raised when the request under match does not exist."""

    def __init__(self, service_type: str, request_id: int):
        self.service_type = service_type
        self.request_id = request_id
        label = service_type.replace("_", " ").capitalize()
        super().__init__(f"{label} request with ID {request_id} not found")


class OfferNotFoundError(MatchingError):
    """Raised when a confirmation names an offer that does not exist."""

    def __init__(self, service_type: str, offer_id: int):
        self.service_type = service_type
        self.offer_id = offer_id
        label = service_type.replace("_", " ").capitalize()
        super().__init__(f"{label} offer with ID {offer_id} not found")


class MatchConflictError(MatchingError):
    """
    Raised when a match confirmation cannot be applied.

    Covers both business-rule conflicts (request already matched, offer no
    longer available) and lost races against a concurrent confirmation.
    """

    def __init__(
        self,
        service_type: str,
        request_id: int,
        offer_id: int,
        reason: str,
        message: Optional[str] = None
    ):
        self.service_type = service_type
        self.request_id = request_id
        self.offer_id = offer_id
        self.reason = reason

        if message is None:
            message = (
                f"Cannot match {service_type} request {request_id} "
                f"with offer {offer_id}: {reason}"
            )
        super().__init__(message)
