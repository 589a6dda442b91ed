"""
Services.

Blockchain access, notifications, rewards and the trading core.
"""
