"""Base types shared across MovieVault models."""

from .base import BaseDataclass

__all__ = ["BaseDataclass"]
