# Infrastructure Adapters Package
from .file_store import FileProblemStore

__all__ = ["FileProblemStore"]
