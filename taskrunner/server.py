"""Command entry point: serve the task API until interrupted."""

from __future__ import annotations

import argparse
import logging
import signal
import threading
from socketserver import ThreadingMixIn
from typing import Sequence
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from .api import TaskHandler, init_task_router
from .manager import TaskManager
from .registry import register_task_factories

DEFAULT_HOST = ""
DEFAULT_PORT = 8080

log = logging.getLogger(__name__)


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = False
    block_on_close = True


class _QuietRequestHandler(WSGIRequestHandler):
    def log_message(self, format: str, *args: object) -> None:
        pass


def init_manager() -> TaskManager:
    """Create a task manager with every task factory registered."""
    manager = TaskManager()
    register_task_factories(manager)
    return manager


def build_server(
    manager: TaskManager, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT
) -> WSGIServer:
    """Create an HTTP server bound to host and port serving the task routes."""
    app = init_task_router(TaskHandler(manager))
    return make_server(
        host,
        port,
        app,
        server_class=_ThreadingWSGIServer,
        handler_class=_QuietRequestHandler,
    )


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="taskrunner", description="Run the task API server.")
    parser.add_argument("--host", default=DEFAULT_HOST, help="address to bind")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Serve until SIGINT or SIGTERM, then shut down gracefully."""
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    manager = init_manager()
    try:
        try:
            server = build_server(manager, args.host, args.port)
        except OSError as error:
            log.error("HTTP server error: %s", error)
            return 1

        quit_event = threading.Event()

        def request_quit(signum: int, frame: object) -> None:
            quit_event.set()

        previous = {
            sig: signal.signal(sig, request_quit) for sig in (signal.SIGINT, signal.SIGTERM)
        }
        serving = threading.Thread(target=server.serve_forever, name="http-server", daemon=True)
        log.info("Server listening on %s:%d", args.host, args.port)
        serving.start()
        try:
            while not quit_event.wait(0.5):
                pass
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)

        log.info("Shutting down server...")
        server.shutdown()
        server.server_close()
        serving.join()
        log.info("Server exited gracefully")
        return 0
    finally:
        manager.close()


if __name__ == "__main__":
    raise SystemExit(main())