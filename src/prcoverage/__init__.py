"""prcoverage - annotate pull requests with coverage gaps on changed lines."""

__version__ = "0.1.0"
