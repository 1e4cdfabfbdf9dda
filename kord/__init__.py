"""Multi-label note classifier over spectral feature vectors."""

__version__ = "0.1.0"
