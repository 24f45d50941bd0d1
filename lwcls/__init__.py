"""Language server for Lightning Web Components templates."""

__version__ = "0.1.0"
