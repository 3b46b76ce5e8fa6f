"""Simulated payment gateway. No money moves; every valid charge succeeds."""
import time
import uuid
from dataclasses import dataclass

from flask import current_app

from .errors import PaymentError, ValidationError

PAYMENT_METHODS = ("gcash", "paypal", "bank_transfer", "paymaya", "credit_card")


@dataclass
class PaymentResult:
    method: str
    amount: float
    transaction_id: str
    status: str = "completed"

    def to_dict(self):
        return {"method": self.method, "amount": self.amount,
                "transactionId": self.transaction_id, "status": self.status}


def process_payment(method, amount):
    if method not in PAYMENT_METHODS:
        raise ValidationError(f"Unsupported payment method: {method}")
    if not amount or amount <= 0:
        raise PaymentError("Invalid payment amount")

    delay = current_app.config.get("PAYMENT_DELAY_SECONDS", 0)
    if delay:
        time.sleep(delay)

    result = PaymentResult(method=method, amount=amount, transaction_id=f"TXN-{uuid.uuid4().hex[:12].upper()}")
    current_app.logger.info("Payment %s via %s for %s", result.transaction_id, method, amount)
    return result
