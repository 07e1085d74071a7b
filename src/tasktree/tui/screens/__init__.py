"""Screens for the tasktree editor."""

from tasktree.tui.screens.confirm import ConfirmScreen

__all__ = ["ConfirmScreen"]
