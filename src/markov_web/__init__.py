"""Flask HTTP surface for the markov chain engine."""
from .web import app, main

__all__ = ["app", "main"]
