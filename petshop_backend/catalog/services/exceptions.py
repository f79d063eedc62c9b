# catalog/services/exceptions.py


class InventoryError(Exception):
    """Base inventory error."""


class InsufficientStockError(InventoryError):
    def __init__(self, product, requested: int, available: int):
        self.product = product
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {getattr(product, 'name', 'product')}: "
            f"requested {requested}, available {available}"
        )


class InvalidQuantityError(InventoryError):
    pass
