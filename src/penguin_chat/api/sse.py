import json


def format_sse_event(event_type: str, data: str) -> dict:
    """Format an SSE event for sse-starlette's EventSourceResponse."""
    return {"event": event_type, "data": data}


def sse_message(message: dict) -> dict:
    return format_sse_event("message", json.dumps(message))


def sse_status(status: str) -> dict:
    return format_sse_event("status", status)


def sse_error(error: str) -> dict:
    return format_sse_event("error", error)


def sse_init(data: dict) -> dict:
    return format_sse_event("init", json.dumps(data))


def sse_done(data: dict) -> dict:
    return format_sse_event("done", json.dumps(data))
