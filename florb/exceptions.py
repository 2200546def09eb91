#   ______ _      ____  _____  ____
#  |  ____| |    / __ \|  __ \|  _ \
#  | |__  | |   | |  | | |__) | |_) |
#  |  __| | |   | |  | |  _  /|  _ <
#  | |    | |___| |__| | | \ \| |_) |
#  |_|    |______\____/|_|  \_\____/
#

# Exceptions - Error types raised by the generator and services.

# --------------------------------------------------------------------------
#                                  Functions
# --------------------------------------------------------------------------
# parse_model: Validates input into a pydantic model, wrapping pydantic errors.

# --------------------------------------------------------------------------
#                            Variables and others
# --------------------------------------------------------------------------
# FlorbError: Base class for all package errors.
# FlorbValidationError: Caller input violates a domain constraint.
# FlorbNotFoundError: Referenced Florb does not exist.

# --------------------------------------------------------------------------
#                                   imports
# --------------------------------------------------------------------------
# pydantic: Validation errors and models.
# typing: Type hints.

from pydantic import BaseModel, ValidationError
from typing import Any, Type, TypeVar

ModelT = TypeVar("ModelT", bound=BaseModel)


class FlorbError(Exception):
    """Base error for the florb package"""


class FlorbValidationError(FlorbError, ValueError):
    """Raised when a caller-supplied value fails a domain constraint"""


class FlorbNotFoundError(FlorbError, LookupError):
    """Raised when a referenced Florb cannot be found"""


def parse_model(model_cls: Type[ModelT], data: Any) -> ModelT:
    """
    Coerce `data` into `model_cls`.

    Accepts an existing instance, a mapping, or None (treated as an empty
    mapping). Pydantic errors are re-raised as FlorbValidationError so callers
    only deal with one error type.
    """
    if isinstance(data, model_cls):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump()
    try:
        return model_cls.model_validate(data if data is not None else {})
    except ValidationError as e:
        raise FlorbValidationError(str(e)) from e
