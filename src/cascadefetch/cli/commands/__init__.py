"""CLI commands for cascadefetch.

Command modules register themselves with the main app when
cascadefetch.cli.app is imported.
"""
