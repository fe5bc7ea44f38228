"""
cmd2zip: run a set of commands as child processes and capture their output
as entries of a single zip archive, without temporary files.
"""

__version__ = "1.1.0"
