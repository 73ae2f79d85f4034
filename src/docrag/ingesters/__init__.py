"""Document sources for docrag."""

from docrag.ingesters.folder_ingester import FolderIngester

__all__ = ["FolderIngester"]
