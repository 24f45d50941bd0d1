"""
Main entry point for the LWC Language Server.

This file is executed when running: python -m lwcls

The server communicates with editors via stdin/stdout using JSON-RPC,
so logging goes to stderr.
"""
import logging
import os
import sys

from lwcls.lsp.server import create_server


def main():
    """Start the language server on stdin/stdout."""
    logging.basicConfig(
        stream=sys.stderr,
        level=os.getenv("LWCLS_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    server = create_server()

    # Start the server - it will listen on stdin/stdout for LSP messages
    # from the editor client
    server.start_io()


if __name__ == "__main__":
    main()
