"""Optimisation, scheduling and evaluation for SGDNet."""
