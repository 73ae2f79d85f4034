"""docrag - retrieval-augmented generation over a folder of markdown documents."""

__version__ = "0.1.0"
