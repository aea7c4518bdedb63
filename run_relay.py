#!/usr/bin/env python3
"""
AudioShare Relay Server.

This script starts the WebSocket relay that carries audio from each
room's host to its guests.
"""

import asyncio
import sys

from audioshare_relay.config import config_manager
from audioshare_relay.infrastructure import ConfigurationError
from audioshare_relay.websockets.server import main as run_server


def main() -> int:
    """Load configuration and run the relay until interrupted."""
    try:
        config = config_manager.get_config()
    except ConfigurationError as e:
        print(f"Invalid configuration: {e}")
        return 1

    print(f"Starting AudioShare relay on {config.host}:{config.port}...")
    try:
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        print("\nAudioShare relay shutdown requested")
    except Exception as e:
        print(f"Fatal error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
