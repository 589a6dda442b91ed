"""
Bot Initialization Module.

This module contains all initialization logic split into focused modules:
- logging: Logger configuration
- services: Service construction (RPC client, notifications, rewards, trading)
- shutdown: Signal handling and graceful shutdown
"""

__all__ = []
