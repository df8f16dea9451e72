"""mcpdeck entry point.

Changes:
  - 2026-10-18: Added `decode` to inspect tool segments in saved messages.
  - 2026-10-17: Added `reload` and `tools`.
  - 2026-10-16: Initial commands: servers, add, toggle.
"""

import argparse
import asyncio
import logging
import sys
from importlib.metadata import version as get_version
from pathlib import Path

from mcpdeck.config import Settings, get_settings
from mcpdeck.logging_setup import setup_logging
from mcpdeck.mcp.catalog import get_tool_catalog
from mcpdeck.mcp.client import McpConfigClient
from mcpdeck.mcp.lifecycle import LifecycleController
from mcpdeck.mcp.notices import NoticeLevel, NoticeLog
from mcpdeck.mcp.paths import ScriptsDirResolver
from mcpdeck.transcript import ImageItem, decode_results, decode_segment, format_calls

logger = logging.getLogger(__name__)


def _build_controller(settings: Settings) -> tuple[LifecycleController, NoticeLog]:
    notices = NoticeLog()
    controller = LifecycleController(
        McpConfigClient(settings),
        catalog=get_tool_catalog(),
        notifier=notices,
        path_resolver=ScriptsDirResolver(settings.resolved_scripts_dir()),
        settings=settings,
    )
    return controller, notices


def _print_servers(controller: LifecycleController) -> None:
    for entry in controller.display_entries():
        state = "failed" if entry.disabled else ("on" if entry.enabled else "off")
        print(f"[{state:>6}] {entry.name}  {entry.description}".rstrip())
        for sub in entry.sub_tools:
            print(f"           - {sub.name}: {sub.description}".rstrip())


def _print_registry(controller: LifecycleController) -> None:
    for entry in controller.registry:
        state = "failed" if entry.disabled else ("on" if entry.enabled else "off")
        target = entry.url or " ".join([entry.command or "", *(entry.args or [])]).strip()
        print(f"[{state:>6}] {entry.name}  {target}".rstrip())


def _read_arg(value: str) -> str:
    """``@path`` reads the file, ``-`` reads stdin, anything else is literal."""
    if value == "-":
        return sys.stdin.read()
    if value.startswith("@"):
        return Path(value[1:]).read_text(encoding="utf-8")
    return value


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    controller, notices = _build_controller(settings)
    if not await controller.load():
        return 1

    if args.command == "servers":
        _print_registry(controller)
    elif args.command == "add":
        result = await controller.add(_read_arg(args.config))
        for name in result.rejected:
            print(f"Skipped '{name}': needs command + args, or url", file=sys.stderr)
    elif args.command == "toggle":
        if await controller.toggle(args.name) is None:
            print(f"Unknown server: {args.name}", file=sys.stderr)
            return 1
    elif args.command == "reload":
        await controller.reload()
    elif args.command == "tools":
        await controller.refresh_catalog()
        _print_servers(controller)

    failed = any(n.level == NoticeLevel.ERROR for n in notices.notices)
    return 1 if failed else 0


def _decode_file(path: Path) -> int:
    segment = decode_segment(path.read_text(encoding="utf-8"))
    if segment is None:
        print("Not a tool message", file=sys.stderr)
        return 1

    print("Calls:")
    print(format_calls(segment))
    for block in decode_results(segment):
        print(f"\n{block.label}:")
        for item in block.items:
            if isinstance(item, ImageItem):
                print(f"<image {item.mime_type}>")
            else:
                print(item.text)
    return 0


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="mcpdeck - manage MCP servers of a chat host and inspect tool transcripts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mcpdeck servers                              List configured servers
  mcpdeck add '"fetch": {"command": "uvx", "args": ["mcp-server-fetch"]}'
  mcpdeck add @servers.json                    Merge servers from a file
  mcpdeck toggle fetch                         Enable/disable a server
  mcpdeck reload                               Restart all running servers
  mcpdeck decode message.txt                   Show a message's tool calls/results
""",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"%(prog)s {get_version('mcpdeck')}",
    )
    parser.add_argument("--api", default=None, help="Host API base URL")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("servers", help="List configured servers")
    add = sub.add_parser("add", help="Merge server config (JSON, @file or - for stdin)")
    add.add_argument("config")
    toggle = sub.add_parser("toggle", help="Enable or disable a server")
    toggle.add_argument("name")
    sub.add_parser("reload", help="Resubmit config, restarting running servers")
    sub.add_parser("tools", help="Refresh the tool catalog and list each server's tools")
    decode = sub.add_parser("decode", help="Decode the tool segment of a saved message")
    decode.add_argument("path", type=Path)

    args = parser.parse_args()

    settings = get_settings()
    if args.api:
        settings = settings.model_copy(update={"api_base_url": args.api})
    setup_logging(level="DEBUG" if args.debug else settings.log_level)

    if args.command == "decode":
        sys.exit(_decode_file(args.path))

    try:
        sys.exit(asyncio.run(_run(args, settings)))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(130)


if __name__ == "__main__":
    main()
