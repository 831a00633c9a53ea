"""Users, access guards and storage for a community message board backend."""

__version__ = "0.1.0"