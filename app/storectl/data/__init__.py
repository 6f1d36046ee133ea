"""Bundled data files for storectl."""
