"""
CLI command modules.
"""

from reviewproof_cli.commands import add, build, prove, roots, tamper

__all__ = ["add", "build", "prove", "roots", "tamper"]
