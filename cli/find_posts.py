#!/usr/bin/env python3.13
import argparse
import os
import sys

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from postersearch.logging_setup import configure_logging
from postersearch.nntp_client import NNTPError
from postersearch.search import run
from postersearch.settings import SearchConfig, default_connection_settings, load_env


def build_parser(defaults: dict) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find and print NNTP articles by a poster.")
    parser.add_argument("--server", default=defaults["server"], help="NNTP server address")
    parser.add_argument("--port", type=int, default=defaults["port"], help="NNTP server port")
    parser.add_argument("--group", default="", help="Newsgroup or pattern to search (default: all groups)")
    parser.add_argument("--poster", default="", help="Poster to search for, e.g. 'Name <email>'")
    parser.add_argument("--days", type=int, default=0, help="Number of days to search back (0 for all)")
    parser.add_argument("--exact", action="store_true", help="Use exact matching for poster name")
    parser.add_argument("--username", default=defaults["username"], help="NNTP username")
    parser.add_argument("--password", default=defaults["password"], help="NNTP password")
    parser.add_argument(
        "--tls",
        action="store_true",
        default=defaults["use_ssl"],
        help="Use TLS connection (server certificate is not verified)",
    )
    parser.add_argument("--timeout", type=float, default=defaults["timeout"], help="Socket timeout in seconds")
    return parser


def config_from_args(args: argparse.Namespace) -> SearchConfig:
    return SearchConfig(
        poster=args.poster,
        server=args.server,
        port=args.port,
        group=args.group,
        days=args.days,
        exact=args.exact,
        username=args.username,
        password=args.password,
        use_ssl=args.tls,
        timeout=args.timeout,
    )


def main(argv: list[str] | None = None) -> int:
    load_env()
    configure_logging()

    parser = build_parser(default_connection_settings())
    args = parser.parse_args(argv)
    if not args.poster.strip():
        parser.print_usage(sys.stderr)
        print("--poster is required", file=sys.stderr)
        return 2

    config = config_from_args(args)
    try:
        result = run(config)
    except NNTPError as exc:
        print(f"Error: {exc}")
        return 1

    print(f"Found {result.count} articles by {config.poster}:")
    sys.stdout.flush()
    out = sys.stdout.buffer
    for article in result.articles:
        out.write(article)
        out.write(b".\n")
    out.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
