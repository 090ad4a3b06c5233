"""parlorgames — tic-tac-toe and connect-four engines with session stats."""

__version__ = "0.1.0"
