"""Tameshi core: settings and report models."""
