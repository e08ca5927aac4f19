from typing import Any


def success_response(data: Any = None, *, message: str | None = None) -> dict:
    """Standard `{success, data}` envelope shared by every route."""
    content: dict[str, Any] = {"success": True}
    if message:
        content["message"] = message
    if data is not None:
        content["data"] = data
    return content
