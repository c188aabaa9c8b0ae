from typing import Callable, Optional

from integrations.netfunnel.models import NetFunnelAPIResponse, OpCode, Ticket
from integrations.netfunnel.settings import NetFunnelClientBaseConfiguration
from integrations.netfunnel.exceptions import (
    ConnectivityError,
    UnexpectedStatusError,
    WaitlistTimeoutError
)
from integrations.netfunnel.utils import MillisClock, build_request_url, parse_ticket
from configs.constants import (
    STATUS_ADMITTED, STATUS_QUEUED,
    RETRY_INTERVAL, REQUEST_TIMEOUT,
    DEFAULT_SERVICE_ID, DEFAULT_ACTION_ID
)
from configs.log_utils import get_logger

from yarl import URL
import asyncio
import aiohttp


class NetFunnelClient:
    """
    NetFunnel gate client.

    **Protocol**:
    - `get_ticket` requests a ticket (opcode 5101). HTTP 200 means admitted,
      HTTP 201 means queued: the client then polls `check_waitlist` every
      `retry_interval` seconds until the gate answers 200.
    - `check_waitlist` asks whether a queued key is admitted yet (opcode 5002).
    - `dispatch_ticket` hands the ticket back so its slot is reclaimed (opcode 5004).

    The client keeps no state between calls besides its configuration and
    the last timestamp suffix, so one instance can serve concurrent
    acquisitions. Without a `session`
    every request opens its own short-lived `aiohttp.ClientSession`; an
    injected session is used as-is and never closed here.

    :param api_endpoint: Gate endpoint. Each protected API server has its own.
    :type api_endpoint: str
    :param retry_interval: Seconds between status checks while queued.
    :type retry_interval: float
    :param max_wait: Default bound on the polling phase, None waits until admitted.
    :type max_wait: Optional[float]
    """
    def __init__(
        self,
        api_endpoint: str,
        session: Optional[aiohttp.ClientSession] = None,
        retry_interval: float = RETRY_INTERVAL,
        request_timeout: float = REQUEST_TIMEOUT,
        max_wait: Optional[float] = None,
        service_id: str = DEFAULT_SERVICE_ID,
        action_id: str = DEFAULT_ACTION_ID,
        clock: Optional[Callable[[], int]] = None
    ):
        if not api_endpoint:
            raise ValueError("API endpoint cannot be empty.")
        if retry_interval < 0:
            raise ValueError("retry_interval cannot be negative.")

        self.api_endpoint = api_endpoint
        self.session = session
        self.retry_interval = retry_interval
        self.request_timeout = request_timeout
        self.max_wait = max_wait
        self.service_id = service_id
        self.action_id = action_id
        self.clock = clock or MillisClock()
        self.logger = get_logger(__name__)

    @classmethod
    def from_settings(
        cls,
        settings: NetFunnelClientBaseConfiguration,
        session: Optional[aiohttp.ClientSession] = None
    ) -> "NetFunnelClient":
        return cls(
            api_endpoint=settings.API_ENDPOINT,
            session=session,
            retry_interval=settings.RETRY_INTERVAL,
            request_timeout=settings.REQUEST_TIMEOUT,
            max_wait=settings.MAX_WAIT,
            service_id=settings.SERVICE_ID,
            action_id=settings.ACTION_ID
        )

    def _build_url(self, opcode: OpCode, key: Optional[str] = None) -> str:
        return build_request_url(
            self.api_endpoint,
            opcode,
            key=key,
            service_id=self.service_id,
            action_id=self.action_id,
            clock=self.clock
        )

    async def _get(
        self,
        session: aiohttp.ClientSession,
        url: str
    ) -> NetFunnelAPIResponse:
        timeout = aiohttp.ClientTimeout(total=self.request_timeout)
        # The query is already encoded; keep yarl from re-quoting it.
        async with session.get(URL(url, encoded=True), timeout=timeout) as response:
            body = await response.read()
            return NetFunnelAPIResponse(
                status_code=response.status,
                body=body,
                url=url
            )

    async def _make_request(self, url: str, operation: str) -> NetFunnelAPIResponse:
        """
        Issue one GET against the gate.

        :param url: Fully built request URL.
        :type url: str
        :param operation: Calling operation, used in error messages.
        :type operation: str
        :return: Status code and raw body.
        :rtype: NetFunnelAPIResponse
        :raises ConnectivityError: when the gate cannot be reached or read.
        """
        self.logger.info(f"Making GET request to: {url}")
        try:
            if self.session is not None:
                return await self._get(self.session, url)
            async with aiohttp.ClientSession() as session:
                return await self._get(session, url)
        except aiohttp.ClientError as e:
            raise ConnectivityError(operation, str(e) or type(e).__name__) from e
        except asyncio.TimeoutError as e:
            raise ConnectivityError(operation, f"request timed out after {self.request_timeout}s") from e

    async def _sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    async def check_waitlist(self, key: str) -> int:
        """
        Ask the gate whether `key` is admitted. 200 means admitted; the
        body is not inspected.
        """
        url = self._build_url(OpCode.CHECK_STATUS, key)
        response = await self._make_request(url, "check_waitlist")
        return response.status_code

    async def _wait_for_admission(self, key: str) -> int:
        attempt = 0
        while True:
            attempt += 1
            status_code = await self.check_waitlist(key)
            self.logger.debug(f"Status check #{attempt} for {key}: HTTP {status_code}")
            if status_code == STATUS_ADMITTED:
                return attempt
            await self._sleep(self.retry_interval)

    async def get_ticket(self, max_wait: Optional[float] = None) -> Ticket:
        """
        Request a ticket and wait until the gate admits it.

        :param max_wait: Bound on the polling phase in seconds. Falls back
            to the client's `max_wait`; None on both waits until admitted.
        :type max_wait: Optional[float]
        :return: The admitted ticket.
        :rtype: Ticket
        :raises ConnectivityError: the gate could not be reached.
        :raises UnexpectedStatusError: status other than 200/201.
        :raises DecodeError: the response body is not a valid ticket.
        :raises WaitlistTimeoutError: not admitted within `max_wait`.
        """
        url = self._build_url(OpCode.GET_TICKET)
        response = await self._make_request(url, "get_ticket")

        if response.status_code not in (STATUS_ADMITTED, STATUS_QUEUED):
            raise UnexpectedStatusError(response.status_code, "get_ticket")

        ticket = parse_ticket(response.body)
        if response.status_code == STATUS_ADMITTED:
            self.logger.info(f"Admitted immediately (key={ticket.key})")
            return ticket

        self.logger.info(
            f"Queued behind {ticket.nwait} callers (key={ticket.key}), "
            f"checking every {self.retry_interval}s"
        )
        limit = max_wait if max_wait is not None else self.max_wait
        if limit is None:
            attempts = await self._wait_for_admission(ticket.key)
        else:
            try:
                attempts = await asyncio.wait_for(
                    self._wait_for_admission(ticket.key),
                    timeout=limit
                )
            except asyncio.TimeoutError as e:
                raise WaitlistTimeoutError(ticket, limit) from e

        self.logger.info(f"Admitted after {attempts} status checks (key={ticket.key})")
        return ticket

    async def dispatch_ticket(self, ticket: Ticket) -> None:
        """Release `ticket` so the gate can reclaim its slot."""
        url = self._build_url(OpCode.DISPATCH_TICKET, ticket.key)
        response = await self._make_request(url, "dispatch_ticket")
        if response.status_code != STATUS_ADMITTED:
            raise UnexpectedStatusError(response.status_code, "dispatch_ticket")
        self.logger.info(f"Dispatched ticket (key={ticket.key})")

    async def check_status(self, key: str) -> int:
        return await self.check_waitlist(key)

    async def acquire_ticket(self, max_wait: Optional[float] = None) -> Ticket:
        return await self.get_ticket(max_wait=max_wait)

    async def release_ticket(self, ticket: Ticket) -> None:
        await self.dispatch_ticket(ticket)
