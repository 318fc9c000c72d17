"""vpkg-validator core package.

This package provides the validation engine for vpkg package repositories:
catalog parsing, package and template rules, and report aggregation. It is
callable from the bundled CLI and from any CI wrapper.
"""

__all__ = [
    "core",
]
