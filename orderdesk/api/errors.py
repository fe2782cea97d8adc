"""
Domain exception to HTTP error translation shared by the routers
"""
from fastapi import HTTPException, status

from orderdesk.exceptions import (
    InsufficientStockError,
    NotFoundError,
    OrderDeskError,
    TransactionConflictError,
    ValidationError,
)


def http_error(e: OrderDeskError) -> HTTPException:
    if isinstance(e, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(e, (InsufficientStockError, TransactionConflictError)):
        code = status.HTTP_409_CONFLICT
    elif isinstance(e, ValidationError):
        code = status.HTTP_422_UNPROCESSABLE_ENTITY
    else:
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(e))


def not_found(kind: str, key) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{kind} with {key} not found")


def conflict(e: OrderDeskError) -> HTTPException:
    """For writes where a rule violation means a clash with existing data (duplicate SKU, referenced customer)"""
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
