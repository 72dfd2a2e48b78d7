"""Prompt catalog."""

from .catalog import PromptArgumentSpec, PromptCatalog, PromptEntry, PROMPT_DEFINITIONS

__all__ = ["PromptArgumentSpec", "PromptCatalog", "PromptEntry", "PROMPT_DEFINITIONS"]
