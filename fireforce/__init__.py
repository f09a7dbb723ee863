# fireforce/__init__.py
"""
FireForce zone monitor.

Synchronises lab zone safety state from a remote source, with a synthetic
fallback when the source is unavailable.
"""

__version__ = "0.1.0"
