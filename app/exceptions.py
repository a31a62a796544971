"""Error taxonomy and the handlers that turn errors into HTTP responses."""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Producto no encontrado"
INTERNAL_ERROR_MESSAGE = "Error interno del servidor"
INVALID_BODY_MESSAGE = "Cuerpo de la petición no válido"


class StoreError(Exception):
    """The backing store was unreachable or rejected the operation."""


class ProductNotFoundError(Exception):
    """Raised when a product id does not resolve."""

    def __init__(self, product_id: int):
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class ProductValidationError(Exception):
    """Raised when product fields break the data-model invariants."""

    def __init__(self, errors: List[Dict[str, Any]]):
        super().__init__("; ".join(error["msg"] for error in errors))
        self.errors = errors


# =============================================================================
# Validation messages
# =============================================================================


@dataclass(frozen=True)
class ValidationRule:
    """Message reported for a failing field.

    ``error_types`` limits the rule to some pydantic error types; ``None``
    matches any failure on the field.
    """

    location: str
    field: str
    message: str
    error_types: Optional[Tuple[str, ...]] = None

    def matches(self, location: str, field: str, error_type: str) -> bool:
        if self.location != location or self.field != field:
            return False
        return self.error_types is None or error_type in self.error_types


# First matching rule wins
VALIDATION_RULES = [
    ValidationRule("params", "id", "ID no válido"),
    ValidationRule("body", "name", "El nombre es obligatorio", ("missing", "string_too_short", "string_type")),
    ValidationRule("body", "name", "El nombre no puede superar los 255 caracteres", ("string_too_long",)),
    ValidationRule("body", "name", "Nombre no válido"),
    ValidationRule("body", "price", "Precio no válido", ("greater_than", "finite_number")),
    ValidationRule("body", "price", "El precio debe ser un número"),
    ValidationRule("body", "availability", "La disponibilidad debe ser un valor booleano"),
]

# Request parameter names as the API documents them
PARAM_NAMES = {"product_id": "id"}
LOCATIONS = {"path": "params", "query": "query", "body": "body"}


def message_for(location: str, field: str, error_type: str, default: str) -> str:
    for rule in VALIDATION_RULES:
        if rule.matches(location, field, error_type):
            return rule.message
    return default


def field_error(location: str, field: str, message: str, value: Any = None) -> Dict[str, Any]:
    return {
        "type": "field",
        "value": value,
        "msg": message,
        "path": field,
        "location": location,
    }


def format_validation_errors(errors) -> List[Dict[str, Any]]:
    """Flatten pydantic's error list into one entry per rejected field."""
    formatted = []
    for error in errors:
        loc = error.get("loc", ())
        location = LOCATIONS.get(loc[0], str(loc[0])) if loc else "body"
        error_type = error.get("type", "")

        if len(loc) < 2 or not isinstance(loc[1], str):
            # The body itself is missing, not JSON or not an object
            formatted.append(field_error(location, "", INVALID_BODY_MESSAGE))
            continue

        field = PARAM_NAMES.get(loc[1], loc[1])
        message = message_for(location, field, error_type, error.get("msg", ""))
        value = None if error_type == "missing" else error.get("input")
        formatted.append(field_error(location, field, message, value))
    return formatted


# =============================================================================
# Exception Handlers
# =============================================================================


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Reject malformed input with 400 and the list of failing fields."""
    errors = format_validation_errors(exc.errors())
    logger.info(f"Rejected {request.method} {request.url.path}: {len(errors)} invalid field(s)")
    return JSONResponse(
        status_code=400, content=jsonable_encoder({"errors": errors})
    )


async def product_validation_exception_handler(
    request: Request, exc: ProductValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=400, content=jsonable_encoder({"errors": exc.errors})
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return HTTP errors as ``{"error": ...}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def store_exception_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Last resort for store failures no handler translated."""
    logger.error(f"Unhandled store error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})


async def product_not_found_exception_handler(
    request: Request, exc: ProductNotFoundError
) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": NOT_FOUND_MESSAGE})
