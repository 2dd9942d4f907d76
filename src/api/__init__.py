"""API routers package."""

from src.api import socket, system

__all__ = [
    "socket",
    "system",
]
