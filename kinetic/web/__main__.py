"""Entry point for the web server.

Usage:
    python -m kinetic.web [--port PORT] [--host HOST] [--projects-dir DIR]
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console


console = Console()


def main() -> int:
    """Run the web server."""
    from dotenv import load_dotenv

    load_dotenv()

    from .backend.dependencies import get_config

    config = get_config()

    parser = argparse.ArgumentParser(
        description="Kinetic Typography Web Interface",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.web.port,
        help="Port to run the server on",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=config.web.host,
        help="Host to bind to",
    )
    parser.add_argument(
        "--projects-dir",
        type=Path,
        default=config.web.projects_dir,
        help="Directory containing projects",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )

    args = parser.parse_args()

    # Import here to avoid loading uvicorn before parsing args
    import uvicorn

    # Update config with CLI args
    config.web.host = args.host
    config.web.port = args.port
    config.web.projects_dir = args.projects_dir

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    console.print("[bold]Starting Kinetic Typography Web Interface...[/bold]")
    console.print(f"  Host: {args.host}")
    console.print(f"  Port: {args.port}")
    console.print(f"  Projects: {args.projects_dir.absolute()}")
    console.print(f"  Providers: {config.providers.mode}")
    console.print(f"  URL: http://{args.host}:{args.port}")
    console.print()

    uvicorn.run(
        "kinetic.web.backend.app:create_app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        factory=True,
    )

    return 0


if __name__ == "__main__":
    sys.exit(main())
