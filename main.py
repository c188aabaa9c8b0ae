"""
Command-line entry point for the NetFunnel gate client.

    python main.py acquire --hold 5
    python main.py status <key>

The endpoint and intervals come from `NETFUNNEL_*` environment variables
(or `.env`); `--endpoint` overrides the configured endpoint.
"""
from dataclasses import asdict
import argparse
import asyncio
import json
import sys

from integrations.netfunnel import (
    NetFunnelClient,
    NetFunnelError,
    Gate,
    get_settings
)
from configs.log_utils import configure_loggers, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="NetFunnel waiting-room client")
    parser.add_argument("--endpoint", help="Gate endpoint (default: NETFUNNEL_API_ENDPOINT)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    acquire = subparsers.add_parser("acquire", help="Acquire a ticket, hold it, then release it.")
    acquire.add_argument("--hold", type=float, default=0.0, help="Seconds to hold the ticket before release.")
    acquire.add_argument("--max-wait", type=float, default=None, help="Give up queueing after this many seconds.")

    status = subparsers.add_parser("status", help="Print the status code of a queued key.")
    status.add_argument("key")
    return parser


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    configure_loggers(
        __name__,
        "integrations.netfunnel.NetFunnelClient",
        "integrations.netfunnel.Gate",
        level=settings.LOG_LEVEL,
        tz=settings.LOG_TIMEZONE
    )
    if args.endpoint:
        settings = settings.model_copy(update={"API_ENDPOINT": args.endpoint})

    client = NetFunnelClient.from_settings(settings)

    if args.command == "status":
        print(await client.check_status(args.key))
        return 0

    gate = Gate(client)
    async with gate.admission(max_wait=args.max_wait) as ticket:
        print(json.dumps(asdict(ticket), indent=2))
        if args.hold > 0:
            logger.info(f"Holding ticket for {args.hold}s")
            await asyncio.sleep(args.hold)
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(run(args))
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2
    except NetFunnelError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
