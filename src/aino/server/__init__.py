"""
Aino server layer: the per-request entry point, the ASGI adapter and the
Hypercorn runner.
"""

from aino.server.handler import create_context, run_handler, handle
from aino.server.application import Application
from aino.server.server import Server

__all__ = ['create_context', 'run_handler', 'handle', 'Application', 'Server']
