"""Business rule errors raised by the backend services and mapped to HTTP statuses."""


class ServiceError(Exception):
    """Base class for service errors."""

    status_code = 400


class EntityExistsError(ServiceError):
    """An entity with the requested identifier already exists."""

    status_code = 409


class CategoryInUseError(ServiceError):
    """A category still referenced by active products cannot be deleted."""

    status_code = 409

    def __init__(self, category_id: str, active_products: int) -> None:
        super().__init__(
            f"Category {category_id} has {active_products} active product(s) and cannot be deleted"
        )
        self.category_id = category_id
        self.active_products = active_products


class InvalidStatusTransition(ServiceError):
    """An order status change the lifecycle does not allow."""

    status_code = 409

    def __init__(self, order_id: str, current: str, target: str) -> None:
        super().__init__(f"Order {order_id} cannot move from {current} to {target}")
        self.order_id = order_id
        self.current = current
        self.target = target
