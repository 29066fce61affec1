"""Principal resolution.

Identity is established upstream (API gateway / identity provider), which
forwards the verified caller id in a trusted header. No header, no principal.
"""

from fastapi import Header

from pldbot.chat.gateway import Principal

PRINCIPAL_HEADER = "X-Principal-Id"


def get_principal(
    principal_id: str | None = Header(default=None, alias=PRINCIPAL_HEADER),
) -> Principal | None:
    """Return the caller, or None when the request is unauthenticated."""
    if principal_id is None or not principal_id.strip():
        return None
    return Principal(id=principal_id.strip())
