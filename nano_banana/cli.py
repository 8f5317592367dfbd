"""Command-line entrypoint for nano-banana."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .imaging.assembler import RequestAssembler
from .providers import default_registry
from .providers.base import ImageModelProvider
from .server import serve
from .session.credentials import CredentialResolver
from .session.directories import resolve_output_directory
from .session.state import SessionState
from .settings import Settings
from .tools import messages
from .tools.dispatcher import ToolDispatcher
from .utils import load_dotenv


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    # stdout carries the MCP stream, so logs must stay on stderr.
    logging.basicConfig(stream=sys.stderr, level=level.upper(), format=LOG_FORMAT, force=True)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nano-banana", description="Gemini image generation MCP server")
    sub = parser.add_subparsers(dest="command")

    serve_cmd = sub.add_parser("serve", help="Serve the image tools over MCP stdio (default)")
    _add_common_arguments(serve_cmd)

    status_cmd = sub.add_parser("status", help="Show credential and output directory status")
    _add_common_arguments(status_cmd)
    return parser


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--dry-run", dest="dry_run", action="store_true", default=None, help="Use the offline provider")
    parser.add_argument("--output-dir", dest="output_dir", help="Directory for generated images")
    parser.add_argument("--log-level", dest="log_level", help="Logging level (default INFO)")
    parser.add_argument("--model", dest="model", help="Default image model")


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    return Settings(
        default_model=getattr(args, "model", None) or settings.default_model,
        output_dir=Path(args.output_dir).expanduser() if getattr(args, "output_dir", None) else settings.output_dir,
        log_level=(getattr(args, "log_level", None) or settings.log_level).upper(),
        dry_run=settings.dry_run if getattr(args, "dry_run", None) is None else bool(args.dry_run),
    )


def _select_provider(settings: Settings) -> ImageModelProvider:
    registry = default_registry()
    provider = registry.get("dryrun" if settings.dry_run else "gemini")
    if provider is None:
        raise RuntimeError(f"No provider available. Known providers: {', '.join(registry.list())}")
    return provider


def build_dispatcher(settings: Settings, state: SessionState | None = None) -> ToolDispatcher:
    return ToolDispatcher(
        state=state or SessionState.start(CredentialResolver()),
        provider=_select_provider(settings),
        output_dir=settings.output_dir,
        assembler=RequestAssembler(default_model=settings.default_model),
    )


def _handle_serve(settings: Settings) -> int:
    dispatcher = build_dispatcher(settings)
    asyncio.run(serve(dispatcher))
    return 0


def _handle_status(settings: Settings) -> int:
    state = SessionState.start(CredentialResolver())
    print(messages.configuration_status_message(state.credentials.credential))
    print(f"Output directory: {settings.output_dir or resolve_output_directory()}")
    print(f"Provider: {'dryrun' if settings.dry_run else 'gemini'}")
    return 0


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(argv)
    settings = _apply_overrides(Settings.from_env(), args)
    configure_logging(settings.log_level)
    if args.command in (None, "serve"):
        raise SystemExit(_handle_serve(settings))
    if args.command == "status":
        raise SystemExit(_handle_status(settings))
    parser.print_help()
    raise SystemExit(1)


if __name__ == "__main__":
    main()
