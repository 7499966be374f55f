"""
API route modules.
"""

from . import auth, reward, system, token

__all__ = ["auth", "reward", "system", "token"]
