"""
Events produced by the client and upstream socket pumps.

Both pumps of a relay session post these onto one queue; the session's
dispatch loop consumes them in order and is the only code that touches
session state.
"""

from dataclasses import dataclass
from typing import Optional

from ws_proxy.models.frames import Frame


@dataclass(frozen=True)
class ClientMessage:
    frame: Frame


@dataclass(frozen=True)
class ClientClosed:
    code: int
    reason: str = ""


@dataclass(frozen=True)
class ClientErrored:
    error: BaseException


@dataclass(frozen=True)
class UpstreamOpened:
    pass


@dataclass(frozen=True)
class UpstreamMessage:
    frame: Frame


@dataclass(frozen=True)
class UpstreamClosed:
    code: int
    reason: str = ""


@dataclass(frozen=True)
class UpstreamErrored:
    error: Optional[BaseException] = None


@dataclass(frozen=True)
class SetupFailed:
    """The upstream connection could not be set up (e.g. connect timeout)."""

    error: BaseException
