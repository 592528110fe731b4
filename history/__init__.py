"""历史记录模块"""
from .store import MemoryStore, JsonFileStore
from .history import History, HistoryEntry

__all__ = ['MemoryStore', 'JsonFileStore', 'History', 'HistoryEntry']
