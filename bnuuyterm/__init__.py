"""Terminal emulation core: screen grid, escape-sequence parsing, configuration and render preparation."""

__version__ = "0.1.0"