"""Command line entry point.

Usage:
  code-reasoning                     # MCP server on stdio
  code-reasoning --debug             # same, with debug logging on stderr
  code-reasoning --http --port 3000  # HTTP API via uvicorn

Flags win over ``CODE_REASONING_*`` environment settings, which win over the
config file.
"""
import argparse
import sys
from typing import List, Optional

import yaml

from code_reasoning import __version__
from code_reasoning.config import get_settings, load_app_config
from code_reasoning.core import ReasoningEngine
from code_reasoning.utils import setup_logging, get_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="code-reasoning",
        description="Sequential thinking MCP server with branching and revision.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--http", action="store_true",
                        help="Serve the HTTP API instead of stdio")
    parser.add_argument("--host", default=None, help="HTTP bind address")
    parser.add_argument("--port", type=int, default=None, help="HTTP port")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument("--max-thoughts", type=int, default=None,
                        help="Abort chains past this thought_number")
    parser.add_argument("--max-thought-length", type=int, default=None,
                        help="Maximum characters in one thought")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging("debug" if args.debug else "info")
    logger = get_logger("code_reasoning")

    config_path = args.config
    try:
        settings = get_settings()
        config_path = config_path or settings.config_file
        config = load_app_config(config_path, settings)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as exc:
        logger.error("config_load_failed", path=config_path, error=str(exc))
        return 1

    debug = args.debug or settings.debug
    level = "debug" if debug else settings.log_level
    setup_logging(level, settings.log_format)

    overrides = {}
    if args.max_thoughts is not None:
        overrides["max_thoughts"] = args.max_thoughts
    if args.max_thought_length is not None:
        overrides["max_thought_length"] = args.max_thought_length
    if overrides:
        config = config.model_copy(
            update={"reasoning": config.reasoning.model_copy(update=overrides)}
        )

    logger.info(
        "starting",
        version=__version__,
        transport="http" if args.http else "stdio",
        config=config_path,
        debug=debug,
    )

    if args.http:
        import uvicorn
        from code_reasoning.main import create_app

        uvicorn.run(
            create_app(config),
            host=args.host or settings.host,
            port=args.port if args.port is not None else settings.port,
            log_level=level.lower(),
        )
        return 0

    from code_reasoning.server import run_stdio

    run_stdio(ReasoningEngine(config.reasoning), config.service)
    return 0


if __name__ == "__main__":
    sys.exit(main())
