"""
Command line interface for hillpulse.

Subcommands:

- serve: Run the webhook HTTP service under uvicorn
- validate: Check environment configuration and list active channels
- summarize: Run a single tweet through the pipeline without HTTP

Every command loads a .env file (if present) before reading configuration.
"""

import argparse
import json
import sys
from typing import Optional

from . import __version__
from .config import load_config, load_env_file, describe_capabilities
from .errors import ConfigError, HillPulseError
from .logging import setup_logging, get_logger
from .models import IngestRequest
from .utils import status_id_from_url


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="hillpulse",
        description="Tweet summary relay: summarize incoming tweets and push them to staff."
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"hillpulse {__version__}"
    )

    parser.add_argument(
        "--env-file",
        help="Path to .env file",
        default=None
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- serve subcommand ---
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the webhook HTTP service"
    )
    serve_parser.add_argument(
        "--host",
        default=None,
        help="Bind address (default: HOST or 0.0.0.0)"
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Listen port (default: PORT or 10000)"
    )

    # --- validate subcommand ---
    subparsers.add_parser(
        "validate",
        help="Validate configuration and show active channels"
    )

    # --- summarize subcommand ---
    summarize_parser = subparsers.add_parser(
        "summarize",
        help="Summarize one tweet from the command line"
    )
    summarize_parser.add_argument(
        "--text",
        default="",
        help="Tweet text (resolved from --url if omitted)"
    )
    summarize_parser.add_argument(
        "--author",
        default="",
        help="Author handle without @"
    )
    summarize_parser.add_argument(
        "--url",
        default="",
        help="Tweet URL"
    )
    summarize_parser.add_argument(
        "--notify",
        action="store_true",
        help="Also deliver the summary to configured channels"
    )

    args = parser.parse_args(argv)

    # Show help if no command given
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    return args


def cmd_serve(args: argparse.Namespace, config: dict) -> int:
    """
    Handle the 'serve' subcommand.

    Returns:
        Exit code
    """
    import uvicorn
    from .api.app import create_app

    host = args.host or config["server"]["host"]
    port = args.port or config["server"]["port"]

    app = create_app(config)
    print(f"Starting HillPulse on {host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level=config["logging"]["level"].lower())
    return 0


def cmd_validate(args: argparse.Namespace, config: dict) -> int:
    """
    Handle the 'validate' subcommand.

    Returns:
        Exit code (0 for success, 1 if summarization can't run)
    """
    print("✅ Configuration valid")
    print()
    for name, status in describe_capabilities(config).items():
        print(f"   {name:<11} {status}")

    if not config["llm"]["api_key"]:
        print("\n❌ GEMINI_API_KEY is required to summarize", file=sys.stderr)
        return 1
    return 0


def cmd_summarize(args: argparse.Namespace, config: dict) -> int:
    """
    Handle the 'summarize' subcommand.

    Runs the same pipeline as POST /ingest. Without --notify the notifier
    list is empty, so nothing is sent.

    Returns:
        Exit code
    """
    from .pipeline import build_pipeline

    pipeline = build_pipeline(config, notifiers=None if args.notify else [])
    request = IngestRequest(
        tweet_id=status_id_from_url(args.url) or args.url,
        url=args.url,
        author=args.author.lstrip("@"),
        text=args.text,
    )

    try:
        result = pipeline.process(request)
    except HillPulseError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    print(result.summary)
    if args.notify:
        print(json.dumps(result.to_response(), indent=2), file=sys.stderr)
    return 0


def main(argv: Optional[list[str]] = None):
    """Main CLI entry point."""
    try:
        args = parse_args(argv)
        load_env_file(args.env_file)

        try:
            config = load_config()
        except ConfigError as e:
            print(f"❌ Configuration error: {e}", file=sys.stderr)
            sys.exit(1)

        setup_logging(config=config)
        logger = get_logger("cli")
        logger.info("hillpulse %s: command %s", __version__, args.command)

        if args.command == "serve":
            exit_code = cmd_serve(args, config)
        elif args.command == "validate":
            exit_code = cmd_validate(args, config)
        elif args.command == "summarize":
            exit_code = cmd_summarize(args, config)
        else:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            exit_code = 1

        sys.exit(exit_code)

    except KeyboardInterrupt:
        print("\n\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
