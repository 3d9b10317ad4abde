"""Behavioral core of the job-board app: validation, uploads, rewards."""

__version__ = "0.2.0"
