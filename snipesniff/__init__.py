"""SnipeSniff: scheduled network discovery synchronized with Snipe-IT."""

__version__ = "1.0.0"
