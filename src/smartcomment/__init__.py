# smartcomment/__init__.py
"""smartcomment: switch named groups of lines in config files and scripts on
and off by commenting them, without a preprocessor."""

__version__ = "0.3.0"
