# core/exceptions.py
"""
Business errors raised by the service layer.

The RPC view turns every ``AppError`` into a JSON error envelope carrying
``code`` and ``message``; anything else is a crash and propagates.
"""


class AppError(Exception):
    status_code = 400
    code = 'BAD_REQUEST'
    default_message = 'An error occurred'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(AppError):
    status_code = 404
    code = 'NOT_FOUND'
    default_message = 'Resource not found'


class ValidationFailure(AppError):
    status_code = 400
    code = 'VALIDATION_FAILED'
    default_message = 'Validation failed'

    def __init__(self, message=None, status_code=None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class PriceMismatch(ValidationFailure):
    code = 'PRICE_MISMATCH'
    default_message = 'Price mismatch'


class InsufficientStock(ValidationFailure):
    code = 'INSUFFICIENT_STOCK'
    default_message = 'Insufficient stock'


class InvalidCoupon(ValidationFailure):
    code = 'INVALID_COUPON'
    default_message = 'Invalid coupon code'


class CouponExpired(ValidationFailure):
    code = 'COUPON_EXPIRED'
    default_message = 'Coupon has expired'


class CouponExhausted(ValidationFailure):
    code = 'COUPON_EXHAUSTED'
    default_message = 'Coupon usage limit reached'


class MinimumOrderNotMet(ValidationFailure):
    code = 'MINIMUM_ORDER_NOT_MET'
    default_message = 'Minimum order amount not met'


class Conflict(AppError):
    status_code = 409
    code = 'CONFLICT'
    default_message = 'Resource already exists'


class InvalidTransition(AppError):
    status_code = 409
    code = 'INVALID_TRANSITION'
    default_message = 'Invalid status transition'
