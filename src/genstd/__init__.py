"""genstd: link Gno standard library declarations to their Go implementations."""

__version__ = "0.1.0"
