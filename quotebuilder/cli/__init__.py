"""
CLI Module - Command-line interface for Quote Builder.

Provides commands for:
- Computing job and category totals
- Validating quote documents
- Creating quote documents from settings defaults
"""

from .quote_commands import cli

__all__ = ['cli']
