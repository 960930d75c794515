"""Entry point for raspberry-debug-mcp server."""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from .project import SETTINGS_FILE, SETTINGS_FOLDER
from .server import create_server
from .session import RaspberrySession

DEFAULT_CONNECTIONS_PATH = Path.home() / ".raspberry-debug" / "connections.json"
PROJECT_EXTENSIONS = (".csproj", ".vbproj", ".fsproj")


def _solution_rank(directory: Path) -> int | None:
    """How strongly a directory looks like the solution root, lower is stronger."""
    if (directory / SETTINGS_FOLDER / SETTINGS_FILE).is_file():
        return 0
    if any(directory.glob("*.sln")):
        return 1
    if any(any(directory.glob(f"*{ext}")) for ext in PROJECT_EXTENSIONS):
        return 2
    return None


def find_solution_root(root: str | Path | None = None) -> str:
    """Find the directory whose .vs/raspberry-projects.json holds project settings.

    Walks up from CWD and picks, in order of preference, the nearest directory
    that already has a settings file, then one with a .sln, then one with a
    project file. Falls back to CWD.

    Args:
        root: If provided, the walk stops at this directory.
    """
    current = Path.cwd().resolve()
    boundary = Path(root).resolve() if root is not None else None

    best: tuple[int, Path] | None = None
    for directory in (current, *current.parents):
        rank = _solution_rank(directory)
        if rank is not None and (best is None or rank < best[0]):
            best = (rank, directory)
            if rank == 0:
                break
        if directory == boundary:
            break

    return str(best[1] if best else current)


def configure_logging() -> None:
    """Configure logging based on environment."""
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Raspberry Debug MCP Server - resolve remote .NET debug targets via MCP"
    )
    parser.add_argument(
        "--project",
        type=str,
        default=None,
        help="Solution root path. Project settings are read from "
        "<project>/.vs/raspberry-projects.json.",
    )
    parser.add_argument(
        "--project-from-cwd",
        action="store_true",
        default=False,
        help="Auto-detect the solution from the current working directory. "
        "Searches upward for .vs/raspberry-projects.json, .sln or project files. "
        "Cannot be used with --project.",
    )
    parser.add_argument(
        "--connections",
        type=str,
        default=os.environ.get("RASPBERRY_CONNECTIONS_PATH"),
        help="Connection store JSON file "
        f"(env RASPBERRY_CONNECTIONS_PATH, default {DEFAULT_CONNECTIONS_PATH}).",
    )
    parser.add_argument(
        "--catalog",
        type=str,
        default=os.environ.get("RASPBERRY_SDK_CATALOG_PATH"),
        help="SDK catalog JSON file (env RASPBERRY_SDK_CATALOG_PATH).",
    )
    return parser.parse_args(argv)


async def main() -> None:
    """Main entry point."""
    configure_logging()
    logger = logging.getLogger(__name__)

    args = parse_args()

    if args.project_from_cwd:
        if args.project is not None:
            logger.error("--project-from-cwd cannot be used with --project")
            sys.exit(1)
        solution_root = find_solution_root()
        logger.info(f"Auto-detected solution root: {solution_root}")
    else:
        solution_root = args.project or os.getcwd()

    session = RaspberrySession.open(
        connections_path=args.connections or DEFAULT_CONNECTIONS_PATH,
        catalog_path=args.catalog,
        solution_root=solution_root,
    )

    logger.info(f"Starting Raspberry Debug MCP Server (solution: {solution_root})...")

    mcp = create_server(session)

    try:
        await mcp.run_stdio_async()
    except Exception:
        logger.exception("Server error")
        raise
    finally:
        logger.info("Server stopped")


def run() -> None:
    """Run the server."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
