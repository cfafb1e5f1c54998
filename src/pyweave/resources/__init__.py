"""Packaged resources for PyWeave (framework default configuration)."""
