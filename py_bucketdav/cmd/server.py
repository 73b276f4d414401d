"""WebDAV server command-line tool."""

import argparse
import os
import sys
from pathlib import Path


def main() -> None:
    """Main entry point for the WebDAV server."""
    parser = argparse.ArgumentParser(
        description="WebDAV server over an object store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Serve a store kept in ./data
  AUTH_USERNAME=user AUTH_PASSWORD=pass py-bucketdav-server ./data

  # Serve a throwaway in-memory store on port 8080
  py-bucketdav-server --memory --port 8080 --username user --password pass

Credentials default to the AUTH_USERNAME and AUTH_PASSWORD environment
variables. Every request must carry matching HTTP Basic credentials.
        """,
    )
    parser.add_argument(
        "--addr",
        default="127.0.0.1",
        help="listening address (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8080,
        help="listening port (default: 8080)",
    )
    parser.add_argument(
        "--username",
        default=None,
        help="Basic auth user name (default: $AUTH_USERNAME)",
    )
    parser.add_argument(
        "--password",
        default=None,
        help="Basic auth password (default: $AUTH_PASSWORD)",
    )
    parser.add_argument(
        "--memory",
        action="store_true",
        help="keep objects in memory instead of a directory",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="enable debug logging (logs request/response bodies with formatted XML)",
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="directory holding the object store (default: current directory)",
    )

    args = parser.parse_args()

    from py_bucketdav.config import ServerConfig

    config = ServerConfig.from_env(os.environ)
    if args.username is not None:
        config.username = args.username
    if args.password is not None:
        config.password = args.password
    if not config.username or not config.password:
        print("Error: credentials are required (--username/--password or AUTH_*)", file=sys.stderr)
        sys.exit(1)

    if args.debug:
        from py_bucketdav.debug import setup_debug_logging

        setup_debug_logging()

    from py_bucketdav import LocalObjectStore, MemoryObjectStore
    from py_bucketdav.server import create_app

    if args.memory:
        store = MemoryObjectStore()
        location = "memory"
    else:
        directory = Path(args.directory).resolve()
        if directory.exists() and not directory.is_dir():
            print(f"Error: path is not a directory: {directory}", file=sys.stderr)
            sys.exit(1)
        store = LocalObjectStore(directory)
        location = str(directory)

    app = create_app(store, config, debug=args.debug)

    import uvicorn

    print(f"WebDAV server listening on {args.addr}:{args.port}")
    print(f"Serving object store: {location}")

    uvicorn.run(
        app,
        host=args.addr,
        port=args.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
