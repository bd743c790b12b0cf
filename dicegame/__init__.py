"""Real-time coordinator for multiplayer dice game rooms."""

__version__ = "0.1.0"
