"""Services module - boundaries to the user's environment."""

from .interaction import InteractionService, AutoInteraction

__all__ = ['InteractionService', 'AutoInteraction']
