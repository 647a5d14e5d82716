"""Handler outcomes — maps return values to what dispatch should do.

A handler (or error handler) either wrote the response itself or wants
dispatch to apply a status and body. ``negotiate`` turns the raw return
value into one of two tagged cases so the caller's branch is total:

1. ``None``               -> ``Written``
2. ``Reply``              -> pass through
3. ``(int, str | bytes)`` -> ``Reply(status, body)``

Anything else is a handler bug and raises ``TypeError``.
"""

import logging
from dataclasses import dataclass
from typing import Any, TypeAlias

from roost.http.response import Response

logger = logging.getLogger("roost.server")


@dataclass(frozen=True, slots=True)
class Written:
    """The handler already wrote (or is writing) the response."""


@dataclass(frozen=True, slots=True)
class Reply:
    """Dispatch should set ``status`` and end the response with ``body``."""

    status: int
    body: str | bytes = ""


Outcome: TypeAlias = Written | Reply

WRITTEN = Written()


def negotiate(value: Any) -> Outcome:
    """Convert a handler's return value to an ``Outcome``."""
    match value:
        case None:
            return WRITTEN
        case Reply():
            return value
        case (int() as status, str() | bytes() as body) if not isinstance(status, bool):
            return Reply(status, body)
        case _:
            msg = (
                f"Handler returned {type(value).__name__!r}; expected None, "
                "a Reply, or a (status, body) tuple."
            )
            raise TypeError(msg)


async def apply(outcome: Outcome, response: Response) -> None:
    """Write a ``Reply`` to *response* unless it is already finished.

    ``Written`` needs nothing.
    """
    match outcome:
        case Reply(status=status) if response.finished:
            logger.debug("Response already finished; dropping %d reply", status)
        case Reply(status=status, body=body):
            response.status = status
            await response.end(body)
        case Written():
            pass
