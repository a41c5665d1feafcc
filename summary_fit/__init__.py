"""Fit a probability distribution to excerpted summary statistics."""

__version__ = "0.1.0"
