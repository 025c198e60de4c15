"""Decode structured data out of free-form model replies.

Models are asked for JSON but often wrap it in prose or a markdown fence.
The decoder tries, in order:

1. the first fenced code block (```json ... ``` or a bare ``` fence)
2. the widest brace-delimited substring (first ``{`` to last ``}``)

and returns ``None`` when neither yields a JSON object. Callers own the
fallback.
"""
import json
import re
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound=BaseModel)


class JSONExtractor:
    JSON_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*\n(.*?)\n?```", re.DOTALL | re.IGNORECASE)
    JSON_OBJECT_PATTERN = re.compile(r"\{.*\}", re.DOTALL)

    def extract_object(self, response: str) -> Optional[Dict[str, Any]]:
        """Extract a JSON object from an LLM response, or ``None``."""
        if not response or not response.strip():
            return None

        block = self.JSON_BLOCK_PATTERN.search(response)
        if block:
            result = self._parse_object(block.group(1).strip())
            if result is not None:
                return result

        match = self.JSON_OBJECT_PATTERN.search(response)
        if match:
            return self._parse_object(match.group(0))

        return None

    def extract_to_model(self, response: str, model_class: Type[T]) -> Optional[T]:
        """Extract a JSON object and validate it into ``model_class``.

        Returns ``None`` if no object is found or it does not validate.
        """
        data = self.extract_object(response)
        if data is None:
            return None

        try:
            return model_class.model_validate(data)
        except ValidationError:
            return None

    @staticmethod
    def _parse_object(text: str) -> Optional[Dict[str, Any]]:
        try:
            result = json.loads(text)
        except (ValueError, RecursionError):
            return None
        return result if isinstance(result, dict) else None
