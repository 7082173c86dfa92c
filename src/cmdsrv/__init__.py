"""cmdsrv — JSON command server over TCP."""

__version__ = "0.1.0"
