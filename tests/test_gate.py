import pytest

from integrations.netfunnel import (
    Gate,
    NetFunnelClient,
    Ticket,
    UnexpectedStatusError,
    WaitlistTimeoutError,
)

TICKET = Ticket(id="5101:200:key=k", ip="", key="k", nnext=0, nwait=0, port=0, tps=0, ttl=0)


class RecordingClient(NetFunnelClient):
    def __init__(self, dispatch_status=200, admitted=True):
        super().__init__(api_endpoint="http://gate.local/ts.wseq")
        self.events = []
        self.dispatch_status = dispatch_status
        self.admitted = admitted

    async def get_ticket(self, max_wait=None):
        self.events.append(("get_ticket", max_wait))
        if not self.admitted:
            raise WaitlistTimeoutError(TICKET, max_wait)
        return TICKET

    async def dispatch_ticket(self, ticket):
        self.events.append(("dispatch_ticket", ticket.key))
        if self.dispatch_status != 200:
            raise UnexpectedStatusError(self.dispatch_status, "dispatch_ticket")

    async def check_waitlist(self, key):
        self.events.append(("check_waitlist", key))
        return 201


@pytest.mark.asyncio
async def test_admission_releases_ticket_on_exit():
    client = RecordingClient()

    async with Gate(client).admission(max_wait=3) as ticket:
        assert ticket is TICKET
        client.events.append(("body", None))

    assert client.events == [
        ("get_ticket", 3),
        ("body", None),
        ("dispatch_ticket", "k"),
    ]


@pytest.mark.asyncio
async def test_admission_releases_ticket_when_body_raises():
    client = RecordingClient()

    with pytest.raises(KeyError):
        async with Gate(client).admission():
            raise KeyError("boom")

    assert client.events[-1] == ("dispatch_ticket", "k")


@pytest.mark.asyncio
async def test_admission_surfaces_dispatch_failure():
    client = RecordingClient(dispatch_status=500)

    with pytest.raises(UnexpectedStatusError) as exc:
        async with Gate(client).admission():
            pass

    assert exc.value.status_code == 500


@pytest.mark.asyncio
async def test_status_checks_ticket_key():
    client = RecordingClient()

    assert await Gate(client).status(TICKET) == 201
    assert client.events == [("check_waitlist", "k")]


@pytest.mark.asyncio
async def test_admission_releases_ticket_when_wait_times_out():
    client = RecordingClient(admitted=False)
    entered = False

    with pytest.raises(WaitlistTimeoutError):
        async with Gate(client).admission(max_wait=0.05):
            entered = True

    assert entered is False
    assert client.events == [
        ("get_ticket", 0.05),
        ("dispatch_ticket", "k"),
    ]


@pytest.mark.asyncio
async def test_block_error_survives_failed_dispatch():
    client = RecordingClient(dispatch_status=500)

    with pytest.raises(KeyError):
        async with Gate(client).admission():
            raise KeyError("boom")

    assert client.events[-1] == ("dispatch_ticket", "k")
