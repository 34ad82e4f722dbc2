"""fsk: Fast Simple Knowledge, a minimalist Markdown note base for the terminal."""

__version__ = "0.1.0"
