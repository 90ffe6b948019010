"""CLI entry point for nsrouter.

Resolves names through a router built from a YAML configuration file (or a
default router: ``localhost`` plus the system resolver) and prints, per
name, every address by priority level followed by one picked address.

Examples:
    ```bash
    python -m nsrouter localhost:8080
    python -m nsrouter example.org --host-only
    python -m nsrouter _http._tcp.example.org --config config/router.yaml
    python -m nsrouter web.service.consul:80 --log-level DEBUG
    ```
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from nsrouter.core.exceptions import NameServiceError
from nsrouter.core.logger import Logger, StructuredFormatter
from nsrouter.models import Address, IpList
from nsrouter.resolvers import Router, RouterBuilder
from nsrouter.utils import SystemResolver


logger = Logger("cli")


def default_router() -> Router:
    """Router used when no configuration file is given."""
    return RouterBuilder().add_ip("localhost", "127.0.0.1").add_default(SystemResolver()).build()


def format_address(address: Address) -> str:
    """Render priority levels as ``a,b | c`` (``|`` separates levels)."""
    return " | ".join(
        ",".join(
            f"{addr}*{weight}" if weight else str(addr) for weight, addr in level.items()
        )
        for level in address
    )


def format_ip_list(ips: IpList) -> str:
    return ",".join(str(ip) for ip in ips)


async def resolve_names(router: Router, names: list[str], *, host_only: bool) -> int:
    """Resolve every name, printing one line per name.

    Returns:
        Exit code: 0 if every name resolved, 1 otherwise.
    """
    exit_code = 0
    for name in names:
        try:
            if host_only:
                ips = await router.resolve_host(name)
                print(f"{name}\t{format_ip_list(ips)}\tpick={ips.pick_one()}")
            else:
                address = await router.resolve(name)
                print(f"{name}\t{format_address(address)}\tpick={address.pick_one()}")
        except NameServiceError as e:
            logger.error("resolve_failed", name=name, error=str(e))
            exit_code = 1
    return exit_code


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for the resolver CLI."""
    parser = argparse.ArgumentParser(
        prog="nsrouter",
        description="Resolve names through an nsrouter Router",
    )

    parser.add_argument(
        "names",
        nargs="+",
        metavar="NAME",
        help="Names to resolve, as host or host:port",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Router config path (default: localhost plus the system resolver)",
    )

    parser.add_argument(
        "--host-only",
        action="store_true",
        help="Resolve IP addresses only (ignore ports and SRV records)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level (default: WARNING)",
    )

    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    """Configure the root logger with structured formatting.

    Installs a ``StructuredFormatter`` on the root handler so that output
    from ``Logger`` and plain ``logging.getLogger()`` calls in the backends
    is unified as ``level name message key=value ...``.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level))


async def main(argv: list[str] | None = None) -> int:
    """Main entry point: parse args, build the router, and resolve names."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        router = Router.from_yaml(args.config) if args.config else default_router()
    except FileNotFoundError as e:
        logger.error("config_not_found", path=str(args.config), error=str(e))
        return 1
    except NameServiceError as e:
        logger.error("config_invalid", path=str(args.config), error=str(e))
        return 1

    logger.debug("router_ready", router=repr(router))
    return await resolve_names(router, args.names, host_only=args.host_only)


def cli() -> None:
    """Synchronous entry point for console_scripts."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
