"""github-retrospect: monthly GitHub activity retrospectives."""

__version__ = "0.1.0"
