"""
Pseudo Expander Command-Line Interface
======================================

This package provides the command-line tools for the expansion engine:

- **psexpand**: expand pseudo-instruction statements or listings

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["psexpand"]
