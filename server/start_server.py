#!/usr/bin/env python3
"""
Development server startup script for the N-Game Solver Server.
"""

from server.config import settings
from server.main import run

if __name__ == "__main__":
    print(f"Starting N-Game Solver Server...")
    print(f"Environment: {settings.environment}")
    print(f"Host: {settings.host}:{settings.port}")
    print(f"Debug mode: {settings.debug}")

    run()
