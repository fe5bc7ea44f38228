"""
Typer command-line interface for cmd2zip.
"""
