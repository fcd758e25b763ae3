from .local_media_resolver import LocalMediaResolver

__all__ = ["LocalMediaResolver"]
