"""Responder module - produces assistant replies."""

from .base import Responder, ResponderError
from .simulated import SimulatedResponder

__all__ = ['Responder', 'ResponderError', 'SimulatedResponder']
