"""Packaged resources for beadbridge."""
