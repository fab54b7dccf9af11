"""Token-stream Cayley tree profiling, tokenising enzymes, convergence tracking and helpers."""

__version__ = "0.1.0"

__all__ = ["axiom", "cayley", "converge", "enzyme", "extract", "jsenzyme", "ratelimit", "relays"]