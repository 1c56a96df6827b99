"""LiftLog: training and body-composition analytics."""

__version__ = "0.1.0"
