"""Utility helpers for the airport operations backend."""

from .security import hash_password, verify_password

__all__ = ["hash_password", "verify_password"]
