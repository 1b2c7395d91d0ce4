from typing import Optional, Dict
from fastapi import Request

HDR_REQUEST_ID = "X-Request-Id"
HDR_SESSION_ID = "X-Session-Id"
HDR_FORWARDED_FOR = "X-Forwarded-For"


def _client_ip(request: Request) -> Optional[str]:
    # Behind the dashboard proxy the first X-Forwarded-For hop is the browser
    forwarded_for = request.headers.get(HDR_FORWARDED_FOR)
    if forwarded_for:
        return forwarded_for.split(",")[0].strip() or None
    return request.client.host if request.client else None


def get_request_context(request: Request) -> Dict[str, Optional[str]]:
    """
    Request details stored on every audit entry.
    - endpoint is "<METHOD> <path>"
    - request_id/session_id come from headers and fall back to None
    """
    return {
        "ip_address": _client_ip(request),
        "user_agent": request.headers.get("user-agent"),
        "endpoint": f"{request.method} {request.url.path}",
        "request_id": request.headers.get(HDR_REQUEST_ID),
        "session_id": request.headers.get(HDR_SESSION_ID),
    }
