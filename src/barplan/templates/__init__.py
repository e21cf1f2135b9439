"""Packaged YAML resources for barplan."""
