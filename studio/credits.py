"""
Credit gate.

Checks a caller-supplied balance against a production estimate before a
run starts. Debiting the ledger stays with the caller.
"""
import logging
from typing import Optional

from studio.production.cost import CreditEstimate

logger = logging.getLogger(__name__)


class CreditError(Exception):
    """Base credit error."""

    def __init__(self, message: str, code: str = "CREDIT_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class InsufficientCreditsError(CreditError):
    """Raised when the balance does not cover the estimate."""

    def __init__(self, user_id: Optional[str], required: int = 1, available: int = 0):
        self.user_id = user_id
        self.required = required
        self.available = available
        super().__init__(
            message=f"Insufficient credits: required={required}, available={available}",
            code="INSUFFICIENT_CREDITS",
        )

    def to_dict(self) -> dict:
        return {
            "error": "Insufficient credits",
            "code": self.code,
            "required": self.required,
            "available": self.available,
        }


class CreditGate:
    """Pre-run balance check. Never debits."""

    def has_enough(self, balance: int, estimate: CreditEstimate, unlimited: bool = False) -> bool:
        if unlimited:
            return True
        return balance >= estimate.total

    def require(
        self,
        balance: int,
        estimate: CreditEstimate,
        user_id: Optional[str] = None,
        unlimited: bool = False,
    ) -> None:
        """
        Raise InsufficientCreditsError if ``balance`` is below the estimate.
        """
        if unlimited:
            logger.info(f"User {user_id} has unlimited credits, skipping check")
            return

        if not self.has_enough(balance, estimate):
            logger.warning(
                f"Insufficient credits for user {user_id}: "
                f"required={estimate.total}, available={balance}"
            )
            raise InsufficientCreditsError(user_id, required=estimate.total, available=balance)
