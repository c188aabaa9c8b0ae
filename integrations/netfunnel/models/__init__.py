from integrations.netfunnel.models.TicketModel import (
    NetFunnelAPIResponse,
    OpCode,
    Ticket
)

__all__ = [
    "NetFunnelAPIResponse",
    "OpCode",
    "Ticket"
]
