"""Workout templates, live session tracking and the training REST API."""

__version__ = "0.1.0"
