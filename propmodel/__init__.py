"""Property models: multi-way dataflow constraints kept consistent with DeltaBlue."""

__version__ = "0.1.0"
__all__ = ["graph", "deltablue", "printer", "helpers", "model"]