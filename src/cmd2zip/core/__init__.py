"""
Configuration, errors and logging shared by every cmd2zip component.
"""
