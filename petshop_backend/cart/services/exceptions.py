# cart/services/exceptions.py


class CartError(Exception):
    code = "CART_ERROR"
    http_status = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ProductUnavailableError(CartError):
    code = "PRODUCT_UNAVAILABLE"


class OutOfStockError(CartError):
    code = "OUT_OF_STOCK"
    http_status = 409


class CartItemNotFoundError(CartError):
    code = "CART_ITEM_NOT_FOUND"
    http_status = 404


class InvalidQuantityError(CartError):
    code = "INVALID_QUANTITY"
