"""Tameshi command-line interface."""
