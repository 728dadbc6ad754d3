"""GoFast editor shell: cross-file symbol navigation."""

__version__ = "0.3.0"
