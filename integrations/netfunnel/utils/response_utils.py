from typing import Dict, Union
from urllib.parse import parse_qs
import re

from integrations.netfunnel.models import Ticket
from integrations.netfunnel.exceptions import DecodeError
from configs.constants import RESULT_KEY

INT_FIELDS = ("nnext", "nwait", "port", "tps", "ttl")

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_QUOTES = ("'", '"')


def parse_script_vars(body: str) -> Dict[str, str]:
    """
    Read a body of `name = value;` assignments into a mapping.

    Segments without `=` (e.g. `NetFunnel.gControl._showResult()`) carry no
    assignment and are skipped. The last assignment of a name wins.
    """
    script_vars = {}
    for segment in body.split(";"):
        name, sep, value = segment.partition("=")
        if not sep:
            continue
        script_vars[name.strip()] = value.strip()
    return script_vars


def strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        return value[1:-1]
    return value


def parse_int_field(values: Dict[str, list], field: str) -> int:
    raw = values.get(field, [""])[0]
    if not _INT_PATTERN.fullmatch(raw):
        raise DecodeError(f"'{field}' is not an integer: {raw!r}", field=field)
    return int(raw)


def parse_ticket(body: Union[str, bytes]) -> Ticket:
    """
    Decode a ticket-request response body.

    Expected result token:
    `<int>:<int>:ip=<host>&key=<str>&nnext=<int>&nwait=<int>&port=<int>&tps=<int>&ttl=<int>`

    :param body: Raw response body.
    :type body: Union[str, bytes]
    :return: Decoded ticket.
    :rtype: Ticket
    :raises DecodeError: on any structural or field failure.
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"body is not valid UTF-8: {e}") from e

    result = parse_script_vars(body).get(RESULT_KEY, "")
    if not result:
        raise DecodeError(f"Cannot find '{RESULT_KEY}' key", field=RESULT_KEY)

    ticket_id = strip_quotes(result)
    parts = ticket_id.split(":", 2)
    if len(parts) < 3:
        raise DecodeError(f"malformed result token: {ticket_id!r}", field=RESULT_KEY)

    query = parts[2]
    bad_escape = _BAD_ESCAPE.search(query)
    if bad_escape:
        raise DecodeError(
            f"invalid percent escape at offset {bad_escape.start()} in result token: {query!r}",
            field=RESULT_KEY
        )
    # Empty fields are skipped; a field without `=` reads as blank.
    values = parse_qs(query, keep_blank_values=True)

    key = values.get("key", [""])[0]
    if not key:
        raise DecodeError("'key' is missing from result token", field="key")

    numbers = {field: parse_int_field(values, field) for field in INT_FIELDS}

    return Ticket(
        id=ticket_id,
        ip=values.get("ip", [""])[0],
        key=key,
        **numbers
    )
