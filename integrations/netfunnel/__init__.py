from integrations.netfunnel.settings import NetFunnelClientBaseConfiguration, get_settings
from integrations.netfunnel.models import (
    NetFunnelAPIResponse,
    OpCode,
    Ticket
)
from integrations.netfunnel.exceptions import (
    NetFunnelError,
    ConnectivityError,
    UnexpectedStatusError,
    DecodeError,
    WaitlistTimeoutError
)

from integrations.netfunnel.NetFunnelClient import NetFunnelClient
from integrations.netfunnel.Gate import Gate

from integrations.netfunnel.utils import build_request_url, parse_ticket

__all__ = [
    "NetFunnelClientBaseConfiguration",
    "UnexpectedStatusError",
    "WaitlistTimeoutError",
    "NetFunnelAPIResponse",
    "build_request_url",
    "ConnectivityError",
    "NetFunnelClient",
    "NetFunnelError",
    "get_settings",
    "parse_ticket",
    "DecodeError",
    "OpCode",
    "Ticket",
    "Gate"
]
