"""Argument completion for prompts and resources."""

from .completer import MAX_COMPLETION_VALUES, Completer

__all__ = ["Completer", "MAX_COMPLETION_VALUES"]
