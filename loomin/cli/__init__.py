"""Loomin command line interface."""
