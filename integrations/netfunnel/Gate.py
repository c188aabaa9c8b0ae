from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from integrations.netfunnel.NetFunnelClient import NetFunnelClient
from integrations.netfunnel.exceptions import NetFunnelError, WaitlistTimeoutError
from integrations.netfunnel.models import Ticket
from configs.log_utils import get_logger

logger = get_logger(__name__)


class Gate:
    """
    Waiting-room wrapper around `NetFunnelClient`.

    **Responsibilities**:
    - Enters the waiting room via `NetFunnelClient.get_ticket`.
    - Leaves it via `NetFunnelClient.dispatch_ticket`.
    - Pairs both in `admission()` so an issued ticket is always dispatched,
      including when the wait times out or the guarded block raises.

    :param client: Client bound to one gate endpoint.
    :type client: `NetFunnelClient`
    """
    def __init__(self, client: NetFunnelClient):
        self.client = client

    async def enter(self, max_wait: Optional[float] = None) -> Ticket:
        return await self.client.get_ticket(max_wait=max_wait)

    async def leave(self, ticket: Ticket) -> None:
        await self.client.dispatch_ticket(ticket)

    async def status(self, ticket: Ticket) -> int:
        """Raw status-check code for `ticket`; 200 means admitted."""
        return await self.client.check_waitlist(ticket.key)

    @asynccontextmanager
    async def admission(self, max_wait: Optional[float] = None) -> AsyncIterator[Ticket]:
        """
        Hold a ticket for the duration of the block.

        ```python
        async with gate.admission() as ticket:
            await call_protected_api(ticket.id)
        ```

        If the block raises and the dispatch fails too, the dispatch failure
        is logged and the block's exception propagates.
        """
        try:
            ticket = await self.enter(max_wait=max_wait)
        except WaitlistTimeoutError as e:
            logger.info(f"Gave up waiting, dispatching ticket (key={e.ticket.key})")
            await self.leave(e.ticket)
            raise

        try:
            yield ticket
        except BaseException:
            try:
                await self.leave(ticket)
            except NetFunnelError as dispatch_error:
                logger.error(f"Dispatch failed while leaving after an error (key={ticket.key}): {dispatch_error}")
            raise

        logger.info(f"Leaving waiting room (key={ticket.key})")
        await self.leave(ticket)
