"""Suggestions for completion/complete requests."""

import logging
from typing import Any, Dict, Iterable, List

from mcp.types import CompleteResult, Completion

from ...errors import InvalidParamsError
from ..prompts.catalog import PromptCatalog
from ..resources.catalog import ResourceCatalog
from ..tools.validation import ID_PREFIXES

logger = logging.getLogger(__name__)

MAX_COMPLETION_VALUES = 100


def filter_candidates(candidates: Iterable[str], value: str) -> List[str]:
    """Distinct candidates starting with ``value`` (case-insensitive), sorted."""
    prefix = value.lower()
    return sorted({candidate for candidate in candidates if candidate.lower().startswith(prefix)})


class Completer:
    """
    Completes prompt arguments and resource URIs.

    Prompt arguments are completed from the suggestions declared on the
    argument, plus the ID prefix for arguments that name an entity ID.
    Resource references are completed from the catalogued URIs.
    """

    def __init__(self, prompt_catalog: PromptCatalog, resource_catalog: ResourceCatalog):
        self.prompt_catalog = prompt_catalog
        self.resource_catalog = resource_catalog

    def complete(self, ref: Dict[str, Any], argument: Dict[str, Any]) -> CompleteResult:
        """
        Suggest values for one argument.

        Args:
            ref: ``{"type": "ref/prompt", "name": ...}`` or ``{"type": "ref/resource", "uri": ...}``
            argument: ``{"name": ..., "value": ...}`` with the value typed so far

        Raises:
            InvalidParamsError: For malformed or unsupported references
            PromptNotFoundError: If a prompt reference names no prompt
        """
        name = argument.get("name")
        value = argument.get("value", "")
        if not isinstance(name, str) or not name:
            raise InvalidParamsError("completion argument requires a string 'name'")
        if not isinstance(value, str):
            raise InvalidParamsError("completion argument 'value' must be a string")

        ref_type = ref.get("type")
        if ref_type == "ref/prompt":
            candidates = self._prompt_candidates(ref.get("name"), name)
        elif ref_type == "ref/resource":
            candidates = [entry.uri for entry in self.resource_catalog.list_resources()]
        else:
            raise InvalidParamsError(f"Unsupported reference type: {ref_type}")

        matches = filter_candidates(candidates, value)
        values = matches[:MAX_COMPLETION_VALUES]
        logger.debug(f"Completing {ref_type} argument '{name}': {len(matches)} match(es)")
        return CompleteResult(
            completion=Completion(values=values, total=len(matches), hasMore=len(matches) > len(values))
        )

    def _prompt_candidates(self, prompt_name: Any, argument_name: str) -> List[str]:
        if not isinstance(prompt_name, str) or not prompt_name:
            raise InvalidParamsError("ref/prompt requires a string 'name'")

        spec = self.prompt_catalog.get_entry(prompt_name).get_argument(argument_name)
        if spec is None:
            return []
        candidates = list(spec.suggestions)
        if argument_name in ID_PREFIXES:
            candidates.append(ID_PREFIXES[argument_name])
        return candidates
