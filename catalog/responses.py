"""
Response envelopes shared by every API route.
"""
from typing import Any, Dict


def error_res(error_key: str) -> Dict[str, Any]:
    """Make an API response body carrying the error `error_key`"""
    return {"type": "error", "error": error_key}


def data_res(data: Any) -> Dict[str, Any]:
    """Make an API response body carrying `data`"""
    return {"type": "data", "data": data}


def success_res() -> Dict[str, Any]:
    """Make an API response body for an action with nothing to return"""
    return {"type": "success"}
