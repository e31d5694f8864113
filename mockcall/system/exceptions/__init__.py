from mockcall.system.exceptions.api_exception_handler import common_exception_handler
from mockcall.system.exceptions.base_exception import (
    BadRequestException,
    BaseHTTPException,
    InternalServerException,
    NotFoundException,
)

__all__ = [
    "BaseHTTPException",
    "BadRequestException",
    "NotFoundException",
    "InternalServerException",
    "common_exception_handler"
]
