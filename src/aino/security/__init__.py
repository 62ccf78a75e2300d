"""
Aino security components.
"""

from aino.security import csrf

__all__ = ['csrf']
