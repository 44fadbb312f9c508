"""
API package.
"""

from .api_app import create_api_app

__all__ = ["create_api_app"]
