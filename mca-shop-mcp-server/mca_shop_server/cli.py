"""Command-line interface for the MCA Shop server."""

import argparse
import asyncio
import sys


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="MCA Shop Server - Browse and manage the MCA merchandise shop"
    )
    parser.add_argument(
        "--mode",
        choices=["stdio", "http"],
        default="stdio",
        help="Server mode: stdio (for MCP clients) or http (REST API)",
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="HTTP server host (only for http mode, default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="HTTP server port (only for http mode, default: 8000)",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Backend base URL (default: $MCA_BACKEND_URL or https://mcab.onrender.com)",
    )

    args = parser.parse_args()

    if args.mode == "http":
        from .http_server import run_http_server

        print(f"Starting MCA Shop HTTP Server on {args.host}:{args.port}", file=sys.stderr)
        run_http_server(host=args.host, port=args.port, backend_url=args.base_url)
        return

    from .server import main as server_main

    try:
        asyncio.run(server_main(args.base_url))
    except KeyboardInterrupt:
        print("\nShutting down...", file=sys.stderr)
        sys.exit(0)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
