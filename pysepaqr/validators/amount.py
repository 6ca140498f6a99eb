"""Checks the amount of the credit transfer.

The amount is optional. An empty string means "no amount" and lets the
payer enter one; any other string is rejected on the boolean channel. A
number is first normalized to two decimal places on the payload itself and
must then lie above 0.01 and at most 999999999.99, otherwise the check
raises.
"""
from decimal import Decimal

from ..core.base_validator import BaseValidator

# Exclusive: an amount of exactly 0.01 is rejected.
MIN_AMOUNT_EXCLUSIVE = 0.01
MAX_AMOUNT = 999999999.99


class AmountValidator(BaseValidator):
    """Validates, and normalizes, the amount in euro."""

    name = "Amount"
    field = "amount_euro"
    description = "Amount must be empty or between 0.01 (exclusive) and 999999999.99."
    order = 70

    def _check(self) -> bool:
        amount = self.get_field()
        if isinstance(amount, str):
            return len(amount) == 0
        if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal)):
            return False

        amount = self.payload.normalize_amount()
        self.add_info("Normalized Amount", amount)
        # NaN and infinity are out of range; Decimal NaN cannot be compared.
        if not Decimal(str(amount)).is_finite():
            self.fail("Amount not valid!")
        if not MIN_AMOUNT_EXCLUSIVE < amount <= MAX_AMOUNT:
            self.fail("Amount not valid!")
        return True
