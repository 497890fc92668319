from enum import StrEnum


class PaymentStatus(StrEnum):
    PAID = 'paid'
    PENDING_PAYMENT = 'pending_payment'
    PAYMENT_FAILED = 'payment_failed'
