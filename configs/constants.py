"""
Static, non-sensitive constants of the NetFunnel gate protocol.
"""
APP_VERSION = "v1"

# Assignment in the response body that carries the ticket token.
RESULT_KEY = "NetFunnel.gControl.result"
PREFIX_TEMPLATE = "NetFunnel.gRtype={opcode};"

DEFAULT_NFID = "0"
DEFAULT_SERVICE_ID = "service_1"
DEFAULT_ACTION_ID = "act_1"

# HTTP status codes the gate uses as protocol signals.
STATUS_ADMITTED = 200
STATUS_QUEUED = 201

RETRY_INTERVAL = 1.0
REQUEST_TIMEOUT = 10.0

DEFAULT_LOG_TIMEZONE = "UTC"
