"""
Middleware components for the Aino framework.

- pipeline: the reducer that runs a middleware tree over a context
- request: built-in middleware normalizing the raw request
- params: the bracketed key-path parser used for queries and form bodies
"""

from aino.middleware.pipeline import Middleware, MiddlewareEntry, ignore_halt, flatten, reduce
from aino.middleware import request
from aino.middleware.request import common, request_header

__all__ = [
    'Middleware', 'MiddlewareEntry', 'ignore_halt', 'flatten', 'reduce',
    'request', 'common', 'request_header'
]
