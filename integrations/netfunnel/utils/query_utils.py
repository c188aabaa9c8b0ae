from typing import Callable, Dict, Optional
from urllib.parse import urlencode
import time

from integrations.netfunnel.models import OpCode
from configs.constants import (
    PREFIX_TEMPLATE,
    DEFAULT_NFID,
    DEFAULT_SERVICE_ID,
    DEFAULT_ACTION_ID
)


def now_millis() -> int:
    return time.time_ns() // 1_000_000


class MillisClock:
    """
    Wall-clock milliseconds that never step back.

    A backwards clock adjustment repeats the last value until the wall
    clock catches up.
    """
    def __init__(self, source: Optional[Callable[[], int]] = None):
        self.source = source
        self.last = 0

    def __call__(self) -> int:
        now = self.source() if self.source else now_millis()
        self.last = max(self.last, now)
        return self.last


def build_params(
    opcode: OpCode,
    key: Optional[str] = None,
    service_id: str = DEFAULT_SERVICE_ID,
    action_id: str = DEFAULT_ACTION_ID
) -> Dict[str, str]:
    """
    Fixed query parameters for one gate operation.

    :param opcode: Operation to perform.
    :type opcode: OpCode
    :param key: Ticket key, required for status-check and dispatch.
    :type key: Optional[str]
    :return: Parameter mapping, not yet encoded.
    :rtype: Dict[str, str]
    """
    params = {
        "opcode": str(opcode.value),
        "nfid": DEFAULT_NFID,
        "prefix": PREFIX_TEMPLATE.format(opcode=opcode.value),
        "js": "yes"
    }

    if opcode == OpCode.GET_TICKET:
        params["sid"] = service_id
        params["aid"] = action_id
        return params

    params["key"] = key or ""

    if opcode == OpCode.CHECK_STATUS:
        # Accepted parameters of 5002 are not fully confirmed against a live gate.
        params["ttl"] = "0"
    else:
        params["sid"] = service_id
        params["aid"] = action_id
    return params


def build_url(
    endpoint: str,
    params: Dict[str, str],
    clock: Callable[[], int] = now_millis
) -> str:
    """
    Assemble `<endpoint>?<params>&<unix-ms>`.

    The trailing timestamp only defeats caching; the gate ignores it.
    """
    query = urlencode(sorted(params.items()))
    return f"{endpoint}?{query}&{clock()}"


def build_request_url(
    endpoint: str,
    opcode: OpCode,
    key: Optional[str] = None,
    service_id: str = DEFAULT_SERVICE_ID,
    action_id: str = DEFAULT_ACTION_ID,
    clock: Callable[[], int] = now_millis
) -> str:
    return build_url(
        endpoint,
        build_params(opcode, key, service_id, action_id),
        clock
    )
