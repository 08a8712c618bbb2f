"""
Middlewares restopos.
"""
from restopos.middleware.request_id import RequestIDMiddleware
from restopos.middleware.exception_handler import register_exception_handlers

__all__ = ["RequestIDMiddleware", "register_exception_handlers"]
