"""Food Finance API - small-business financial management backend."""

__version__ = "0.1.0"
