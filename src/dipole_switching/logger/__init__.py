from .logger import Logger
from .strategies import LogStorageStrategy, LocalFileStrategy, InMemoryStrategy

__all__ = ["Logger", "LogStorageStrategy", "LocalFileStrategy", "InMemoryStrategy"]
