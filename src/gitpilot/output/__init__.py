"""Reporters for the command-line interface."""
