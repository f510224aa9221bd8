from flask import current_app, request, session

DEBUG_USER_HEADER = "X-Debug-User-Id"

def get_viewer_id():
    """
    The resolved current user id, or None.

    Identity is established upstream and stored in the session. In debug
    mode, local requests may pass the id in a header so scripts can drive
    the API without a login round trip.
    """
    viewer_id = session.get("user_id")
    if viewer_id:
        return int(viewer_id)

    if current_app.debug and request.remote_addr in ("127.0.0.1", "::1"):
        raw = (request.headers.get(DEBUG_USER_HEADER) or "").strip()
        try:
            return int(raw) if raw else None
        except ValueError:
            return None

    return None
