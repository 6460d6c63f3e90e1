"""Client for sending gauge lines to statsite using UDP datagrams."""

import logging
import socket
from typing import Any, Tuple

DEFAULT_HOST = "localhost"


class TransportError(Exception):
    """Base exception for statsite transport errors."""

    pass


class AddressResolutionError(TransportError):
    """Exception raised when the destination address cannot be resolved."""

    pass


def split_address(address: str) -> Tuple[str, str]:
    """Split ``host:port`` into its parts, accepting ``[v6]:port`` and ``:port``."""
    host, sep, port = address.rpartition(":")
    if not sep or not port:
        raise AddressResolutionError(f"Missing port in address: {address!r}")

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        raise AddressResolutionError(
            f"Too many colons in address, bracket IPv6 hosts: {address!r}"
        )
    return host or DEFAULT_HOST, port


def resolve_address(address: str) -> Tuple[int, Any]:
    """Resolve a ``host:port`` destination.

    Args:
        address: Destination in ``host:port`` form

    Returns:
        Tuple of the socket family and the socket address to connect to

    Raises:
        AddressResolutionError: If the address is malformed or unknown
    """
    host, port = split_address(address)
    try:
        infos = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)
    except (socket.gaierror, UnicodeError) as e:
        raise AddressResolutionError(f"Could not resolve address {address}: {e}")

    if not infos:
        raise AddressResolutionError(f"No addresses found for {address}")

    family, _, _, _, sockaddr = infos[0]
    return family, sockaddr


class StatsiteClient:
    """Client for sending gauges to statsite or statsd."""

    def __init__(self, address: str):
        """Initialize the statsite client.

        Args:
            address: Destination in ``host:port`` form
        """
        self.address = address
        self._sock = None
        self.logger = logging.getLogger(self.__class__.__name__)

    def connect(self) -> None:
        """Open the UDP socket used for the lifetime of the client.

        Raises:
            AddressResolutionError: If the address cannot be resolved
            TransportError: If the socket cannot be set up
        """
        family, sockaddr = resolve_address(self.address)

        sock = None
        try:
            sock = socket.socket(family, socket.SOCK_DGRAM)
            sock.connect(sockaddr)
        except OSError as e:
            if sock is not None:
                sock.close()
            raise TransportError(f"Could not dial address {self.address}: {e}")

        self._sock = sock
        self.logger.info(f"Sending metrics to statsite at {self.address}")

    def write(self, line: str) -> bool:
        """Send one metric line as a single datagram.

        Args:
            line: Fully formatted, newline terminated metric line

        Returns:
            bool: True if the datagram was sent, False otherwise
        """
        if self._sock is None:
            raise TransportError("Statsite client is not connected")

        try:
            self._sock.send(line.encode("utf-8"))
            return True
        except OSError as e:
            self.logger.error(f"Error while writing: {e}")
            return False

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __enter__(self) -> "StatsiteClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
