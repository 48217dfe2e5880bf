from .api import ChainStore, make_store

__all__ = ["ChainStore", "make_store"]
