"""setup-my-mac — declarative macOS bootstrapper."""

__version__ = "0.1.0"
