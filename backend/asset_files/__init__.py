"""asset-files: token-gated file management service."""

__version__ = "0.1.0"
