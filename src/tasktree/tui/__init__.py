"""Textual editor host for tasktree."""
