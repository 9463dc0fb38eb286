import json
from typing import Any

from fastapi import Request

from contact_service.shared.errors import ValidationError

__all__ = ["json_payload"]


async def json_payload(request: Request) -> Any:
    """Parse the request body as JSON; schema validation happens in the service."""
    try:
        return await request.json()
    except (ValueError, json.JSONDecodeError) as e:
        raise ValidationError(f"Invalid JSON payload: {e}") from e
