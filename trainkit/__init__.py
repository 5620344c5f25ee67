"""Cheatsheet tooling for training slides, with simulated UARTs and teaching examples."""

__version__ = "0.1.0"