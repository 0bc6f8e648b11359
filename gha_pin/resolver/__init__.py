from .tag_resolver import TagResolver, LIST_PAGE_SIZE

__all__ = ["TagResolver", "LIST_PAGE_SIZE"]
