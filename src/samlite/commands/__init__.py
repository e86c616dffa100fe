"""Command modules for the samlite CLI."""

from __future__ import annotations

from samlite.commands.validate import run_validate
from samlite.commands.view import run_view

__all__ = ['run_validate', 'run_view']
