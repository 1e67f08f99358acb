"""API module."""

from .conversations import router as conversations_router

__all__ = ['conversations_router']
