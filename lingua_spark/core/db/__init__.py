from .base import Base, async_session_maker, get_session, init_models

__all__ = ["Base", "async_session_maker", "get_session", "init_models"]
