"""
impc Command-Line Interface
===========================

This package provides the ``impc`` command:

- batch compilation to NASM assembly, optionally assembled and linked
- an interactive token stepper (``impc --step``)

The command is a Click application with error reporting shared through
``impc.cli.errors``.
"""

__all__ = ["impc", "stepper", "errors"]
