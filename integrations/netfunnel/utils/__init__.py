from integrations.netfunnel.utils.query_utils import (
    build_request_url,
    build_params,
    MillisClock,
    build_url,
    now_millis
)
from integrations.netfunnel.utils.response_utils import (
    parse_script_vars,
    parse_ticket,
    strip_quotes
)

__all__ = [
    "build_request_url",
    "MillisClock",
    "parse_script_vars",
    "build_params",
    "parse_ticket",
    "strip_quotes",
    "now_millis",
    "build_url"
]
