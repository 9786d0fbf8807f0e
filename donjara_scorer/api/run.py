"""Launch script for the Donjara scoring service."""

import argparse

import uvicorn

from ..config import ENV_PREFIX, configure_logging, load_settings
from .app import create_app


def main(argv=None):
    """Start the HTTP server."""
    parser = argparse.ArgumentParser(prog="donjara-serve", description="Run the Donjara scoring service")
    parser.add_argument("--config", type=str, action="append", default=[], help="YAML/JSON config files (merged)")
    parser.add_argument("--env-prefix", type=str, default=ENV_PREFIX, help="Env prefix for overrides")
    parser.add_argument("--log-level", type=str, default=None)
    args = parser.parse_args(argv)

    settings = load_settings(args.config, env_prefix=args.env_prefix)
    configure_logging(settings, args.log_level)
    service = settings["service"]

    uvicorn.run(
        create_app(settings),
        host=service["host"],
        port=int(service["port"]),
        log_level=(args.log_level or settings["logging"]["level"]).lower(),
    )


if __name__ == "__main__":
    main()
