"""In-memory proof-of-stake node: chain types, validators, consensus engine and CLI."""

__version__ = "0.1.0"