"""Join parameter extraction from the WebSocket request path."""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qs, urlsplit

from audioshare_relay.core.types import PARAM_ROLE, PARAM_ROOM


@dataclass(frozen=True)
class JoinParams:
    """Room id and role requested by a connecting client."""

    room_id: Optional[str]
    role: Optional[str]


def parse_join_params(path: Optional[str]) -> JoinParams:
    """
    Read ``room`` and ``role`` from the query string of a request path.

    Missing or blank values come back as None; the router decides what
    to do about them.
    """
    if not path:
        return JoinParams(None, None)

    query = parse_qs(urlsplit(path).query)

    def first(name: str) -> Optional[str]:
        values = query.get(name)
        if not values:
            return None
        value = values[0].strip()
        return value or None

    return JoinParams(room_id=first(PARAM_ROOM), role=first(PARAM_ROLE))
