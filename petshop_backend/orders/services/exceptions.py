# orders/services/exceptions.py


class OrderServiceError(Exception):
    code = "ORDER_ERROR"
    http_status = 400

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details


# ---------------- checkout ----------------
class CheckoutError(OrderServiceError):
    code = "CHECKOUT_ERROR"


class EmptyCartError(CheckoutError):
    code = "EMPTY_CART"


class ProductUnavailableError(CheckoutError):
    code = "PRODUCT_UNAVAILABLE"


class StockValidationError(CheckoutError):
    code = "INSUFFICIENT_STOCK"
    http_status = 409


class MembershipRequiredError(CheckoutError):
    code = "MEMBERSHIP_REQUIRED"
    http_status = 403


class InvalidPaymentMethodError(CheckoutError):
    code = "INVALID_PAYMENT_METHOD"


class WalletCoverageError(CheckoutError):
    code = "WALLET_INSUFFICIENT"


class AddressNotFoundError(CheckoutError):
    code = "ADDRESS_NOT_FOUND"
    http_status = 404


class ShippingAddressRequiredError(CheckoutError):
    code = "SHIPPING_ADDRESS_REQUIRED"


# ---------------- lifecycle ----------------
class OrderNotFoundError(OrderServiceError):
    code = "ORDER_NOT_FOUND"
    http_status = 404


class InvalidOrderTransitionError(OrderServiceError):
    code = "INVALID_STATUS_TRANSITION"
    http_status = 409


class OrderNotCancellableError(OrderServiceError):
    code = "ORDER_NOT_CANCELLABLE"
    http_status = 409
