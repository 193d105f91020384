"""
Domain errors raised by the services.

Services raise these and never translate them to HTTP themselves; the
handlers registered in main.py map each class to a status code.
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse


class EShopError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(EShopError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class InsufficientStockError(EShopError):
    def __init__(self, product_name: str, available: int):
        super().__init__(f"Insufficient stock for {product_name}. Available: {available}")
        self.product_name = product_name
        self.available = available


class InsufficientBalanceError(EShopError):
    def __init__(self, balance: float, requested: float):
        super().__init__("Insufficient balance")
        self.balance = balance
        self.requested = requested


class ValidationError(EShopError):
    status_code = 422

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


class ConflictError(EShopError):
    status_code = status.HTTP_409_CONFLICT


class ImmutableRecordError(ConflictError):
    pass


class AuthenticationError(EShopError):
    status_code = status.HTTP_401_UNAUTHORIZED


async def eshop_error_handler(request: Request, exc: EShopError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )
