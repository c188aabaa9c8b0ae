from dataclasses import dataclass
from enum import Enum


class OpCode(Enum):
    CHECK_STATUS = 5002
    DISPATCH_TICKET = 5004
    GET_TICKET = 5101


@dataclass(frozen=True)
class Ticket:
    """
    Admission grant issued by the gate.

    `id` is the raw result token, kept for pass-through to other services
    behind the same gate. `ip`/`port` name the service instance and are
    informational only. `key` identifies the caller's slot in the queue.
    """
    id: str
    ip: str
    key: str
    nnext: int
    nwait: int
    port: int
    tps: int
    ttl: int


@dataclass(frozen=True)
class NetFunnelAPIResponse:
    status_code: int
    body: bytes = b""
    url: str = ""
