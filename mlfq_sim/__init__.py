"""Tick-driven multilevel feedback queue scheduler simulation."""

__version__ = "0.1.0"
