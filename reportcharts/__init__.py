"""Resolve generic chart templates against computed test results."""

__version__ = "0.1.0"
