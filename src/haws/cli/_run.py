"""``haws run`` — start the server for an app import string."""

import argparse
import logging

from haws.cli._resolve import resolve_or_exit


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.app``, configure logging, and serve forever.

    CLI flags override the app config.
    """
    app = resolve_or_exit(args.app)

    level = (args.log_level or app.config.log_level).upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    app.serve(host=args.host, port=args.port)
