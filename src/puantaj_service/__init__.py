"""Puantaj service - personnel, timesheet and bookkeeping REST backend."""

__version__ = "0.1.0"
