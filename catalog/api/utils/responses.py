"""JSON response class using orjson serialization.

``ORJSONResponse`` is the application's default response class. orjson
handles ``date`` values and Pydantic models natively, which covers the
product payloads and error envelopes this API returns.
"""

from typing import Any

import orjson
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ORJSONResponse(JSONResponse):
    """FastAPI Response class using orjson for JSON serialization."""

    media_type = "application/json"

    def render(self, content: Any) -> bytes:  # noqa: ANN401 - accepts any JSON-serializable content
        """Render the content as JSON using orjson.

        Args:
            content: The content to serialize to JSON.

        Returns:
            bytes: The JSON-encoded bytes.
        """
        if isinstance(content, BaseModel):
            content = content.model_dump(mode="json")
        elif isinstance(content, list):
            content = [
                item.model_dump(mode="json") if isinstance(item, BaseModel) else item
                for item in content
            ]

        return orjson.dumps(content, option=orjson.OPT_SORT_KEYS)
