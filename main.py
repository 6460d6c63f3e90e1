"""Entry point for the rsyslog pstats forwarder."""

from typing import List, Optional
import argparse
import logging
import os
import sys

from pythonpstats.clients import StatsiteClient, TransportError
from pythonpstats.monitors import FileMonitor, Monitor, MonitorError, StdinMonitor
from pythonpstats.utils import DirectoryError

VERSION = "1.0.0"
PROGRAM_NAME = "python-rsyslog-pstats"

# Configuration Constants
DEFAULT_DATA_DIR = "data"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_POLL_INTERVAL = "5"


class ConfigurationError(Exception):
    """Custom exception for configuration-related errors."""

    pass


def print_version() -> None:
    print(f"{PROGRAM_NAME} {VERSION}", file=sys.stderr)


class ConfigManager:
    """Manages application configuration and monitor creation."""

    def __init__(self):
        self.data_dir = os.environ.get("DATA_DIR", DEFAULT_DATA_DIR)
        self.pygtail_dir = os.path.join(self.data_dir, "pygtail")
        self.log_file = os.environ.get("LOG_FILE")
        self.logger = logging.getLogger("PythonPstats")

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog=PROGRAM_NAME,
            description="Parses and forwards rsyslog process stats "
            "to a local statsite or statsd process",
        )
        parser.add_argument(
            "--port",
            default=os.environ.get("PSTATS_PORT", ""),
            help="Statsite udp address to connect to, as host:port",
        )
        parser.add_argument(
            "--version", action="store_true", help="Prints the version string"
        )
        parser.add_argument(
            "--file",
            default=os.environ.get("PSTATS_FILE"),
            help="Tail this impstats log file instead of reading stdin",
        )
        parser.add_argument(
            "--poll-interval",
            type=float,
            default=os.environ.get("PSTATS_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
            help="Seconds between polls when tailing a file",
        )
        return parser

    def parse_args(self, argv: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse command-line flags, exiting for --version or a missing port."""
        parser = self.build_parser()
        args = parser.parse_args(argv)

        if args.version:
            print_version()
            sys.exit(0)

        if not args.port:
            print("No port was provided\n", file=sys.stderr)
            parser.print_help(sys.stderr)
            sys.exit(1)

        if args.poll_interval <= 0:
            raise ConfigurationError(
                f"Poll interval must be positive, got {args.poll_interval}"
            )
        return args

    def setup_logging(self, log_level: str = DEFAULT_LOG_LEVEL) -> None:
        """Configure application logging on stderr and an optional log file."""
        numeric_level = getattr(logging, log_level.upper(), logging.INFO)
        handlers = [logging.StreamHandler(sys.stderr)]

        if self.log_file:
            try:
                handlers.append(logging.FileHandler(self.log_file))
            except Exception as e:
                self.logger.warning(f"Failed to setup file logging: {e}")

        logging.basicConfig(
            level=numeric_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=handlers,
        )

    def create_monitor(
        self, args: argparse.Namespace, client: StatsiteClient
    ) -> Monitor:
        """Create the line source selected by the configuration."""
        if args.file:
            self.logger.info(f"Tailing pstats file: {args.file}")
            return FileMonitor(
                client,
                args.file,
                poll_interval=args.poll_interval,
                offset_dir=self.pygtail_dir,
            )

        self.logger.info("Reading pstats from stdin")
        return StdinMonitor(client)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the application."""
    config_manager = ConfigManager()
    logger = logging.getLogger("PythonPstats")

    try:
        args = config_manager.parse_args(argv)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    config_manager.setup_logging(os.environ.get("LOG_LEVEL", DEFAULT_LOG_LEVEL))
    client = StatsiteClient(args.port)

    try:
        client.connect()
        monitor = config_manager.create_monitor(args, client)
        monitor.start()

    except KeyboardInterrupt:
        logger.info("Shutting down forwarder...")
    except TransportError as e:
        logger.error(f"Transport error: {e}")
        sys.exit(1)
    except MonitorError as e:
        logger.error(f"Input error: {e}")
        sys.exit(1)
    except DirectoryError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    finally:
        client.close()


if __name__ == "__main__":
    main()
