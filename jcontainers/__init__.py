"""JSON serialization of nested containers with form-keyed and integer-keyed maps and shared references."""

__version__ = "0.1.0"