"""Routing — per-path method tables and the app's route table.

Paths are matched exactly and case-insensitively; there are no path
parameters or wildcards.
"""
