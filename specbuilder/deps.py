from typing import Optional

from fastapi import Header, HTTPException, status


def get_current_user(x_user_id: Optional[str] = Header(default=None)) -> int:
    """
    Owner identity for the request, as set by the auth proxy in front of this service.

    Requests without a usable identity are rejected here, before any service code runs.
    """
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Authentication required",
    )
    if x_user_id is None:
        raise unauthorized
    value = x_user_id.strip()
    # Latin-1 header decoding lets digits like "²" through isdigit()
    if not (value.isascii() and value.isdigit()):
        raise unauthorized
    return int(value)
