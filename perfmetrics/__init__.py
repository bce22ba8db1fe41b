"""
Personal performance metrics publisher.

This package assembles user-defined metrics from a small YAML data file,
previews them, and publishes them to Amazon CloudWatch. See README.md for
usage.
"""

from .__version__ import __version__

__all__ = ["__version__"]
