"""Snapshot store service over gRPC: the server side and the client."""

import argparse
import copy
import logging
import sys
import threading
from concurrent import futures
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import grpc

from .messages import MonitorInfo, SoftIrq

SERVICE_NAME = "monitor.proto.GrpcManager"
DEFAULT_SERVER_ADDRESS = "localhost:50051"
DEFAULT_LISTEN_ADDRESS = "0.0.0.0:50051"

_SET_METHOD = "SetMonitorInfo"
_GET_METHOD = "GetMonitorInfo"

log = logging.getLogger(__name__)


class RpcFailure(ConnectionError):
    """A remote call did not succeed."""

    def __init__(self, method: str, code: Any, details: Optional[str]) -> None:
        super().__init__(f"{method} failed ({code}): {details or 'no details'}")
        self.method = method
        self.code = code
        self.details = details


@dataclass(frozen=True)
class _Empty:
    """The empty message; any unknown bytes are kept as they arrived."""

    raw: bytes = b""


def _encode_empty(message: Optional[_Empty]) -> bytes:
    if message is None:
        return b""
    if not isinstance(message, _Empty):
        raise TypeError(f"expected an empty message, got {type(message).__name__}")
    return message.raw


def _decode_empty(payload: bytes) -> _Empty:
    return _Empty(bytes(payload))


class MonitorStore:
    """Holds the most recent snapshot; safe to use from several threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._info = MonitorInfo()

    def set_monitor_info(self, info: MonitorInfo) -> None:
        """Replace the stored snapshot with a copy of ``info``."""
        snapshot = copy.deepcopy(info)
        with self._lock:
            self._info = snapshot
        log.info("stored snapshot with %d soft irq entries", len(snapshot.soft_irq))

    def get_monitor_info(self) -> MonitorInfo:
        """Return a copy of the stored snapshot."""
        with self._lock:
            return copy.deepcopy(self._info)


def build_server(address: str, store: MonitorStore) -> tuple[grpc.Server, int]:
    """Create an unstarted server for ``store`` listening on ``address``.

    Returns the server and the port it is bound to. Raises OSError when the
    address cannot be bound.
    """

    def set_info(request: MonitorInfo, context: grpc.ServicerContext) -> _Empty:
        store.set_monitor_info(request)
        return _Empty()

    def get_info(request: _Empty, context: grpc.ServicerContext) -> MonitorInfo:
        return store.get_monitor_info()

    handler = grpc.method_handlers_generic_handler(
        SERVICE_NAME,
        {
            _SET_METHOD: grpc.unary_unary_rpc_method_handler(
                set_info,
                request_deserializer=MonitorInfo.decode,
                response_serializer=_encode_empty,
            ),
            _GET_METHOD: grpc.unary_unary_rpc_method_handler(
                get_info,
                request_deserializer=_decode_empty,
                response_serializer=MonitorInfo.encode,
            ),
        },
    )
    server = grpc.server(futures.ThreadPoolExecutor(max_workers=8))
    server.add_generic_rpc_handlers((handler,))
    try:
        port = server.add_insecure_port(address)
    except RuntimeError as exc:
        raise OSError(f"cannot listen on {address}") from exc
    if port == 0:
        raise OSError(f"cannot listen on {address}")
    return server, port


class RpcClient:
    """Client of the snapshot store service."""

    def __init__(self, server_address: str = DEFAULT_SERVER_ADDRESS, timeout: Optional[float] = None) -> None:
        self.server_address = server_address
        self.timeout = timeout
        self._channel = grpc.insecure_channel(server_address)
        self._set = self._channel.unary_unary(
            f"/{SERVICE_NAME}/{_SET_METHOD}",
            request_serializer=MonitorInfo.encode,
            response_deserializer=_decode_empty,
        )
        self._get = self._channel.unary_unary(
            f"/{SERVICE_NAME}/{_GET_METHOD}",
            request_serializer=_encode_empty,
            response_deserializer=MonitorInfo.decode,
        )

    def _call(self, stub: Any, method: str, request: Any) -> Any:
        try:
            return stub(request, timeout=self.timeout)
        except grpc.RpcError as exc:
            code = exc.code() if hasattr(exc, "code") else None
            details = exc.details() if hasattr(exc, "details") else str(exc)
            raise RpcFailure(method, code, details) from exc

    def set_monitor_info(self, info: MonitorInfo) -> None:
        """Send a snapshot to the server; raises RpcFailure on failure."""
        self._call(self._set, _SET_METHOD, info)

    def get_monitor_info(self) -> MonitorInfo:
        """Fetch the server's latest snapshot; raises RpcFailure on failure."""
        return self._call(self._get, _GET_METHOD, _Empty())

    def close(self) -> None:
        """Close the underlying channel."""
        self._channel.close()

    def __enter__(self) -> "RpcClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def server_main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the snapshot store server until interrupted."""
    parser = argparse.ArgumentParser(prog="sysmon-server", description="Serve the latest monitor snapshot.")
    parser.add_argument("--address", default=DEFAULT_LISTEN_ADDRESS, help="address to listen on")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    server, _ = build_server(args.address, MonitorStore())
    server.start()
    try:
        server.wait_for_termination()
    except KeyboardInterrupt:
        server.stop(None)
    return 0


def demo_client_main(argv: Optional[Sequence[str]] = None) -> int:
    """Send a small sample snapshot with two soft irq entries to a server."""
    parser = argparse.ArgumentParser(prog="sysmon-demo-client", description="Send a sample snapshot.")
    parser.add_argument("address", nargs="?", default=DEFAULT_SERVER_ADDRESS, help="server address")
    parser.add_argument("--timeout", type=float, default=5.0, help="call timeout in seconds")
    args = parser.parse_args(argv)
    info = MonitorInfo(soft_irq=[SoftIrq(cpu="cpu1"), SoftIrq(cpu="cpu2")])
    with RpcClient(args.address, timeout=args.timeout) as client:
        try:
            client.set_monitor_info(info)
        except RpcFailure as exc:
            print(f"failed to connect: {exc}", file=sys.stderr)
            return 1
    return 0