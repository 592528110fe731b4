"""键值存储 - 历史记录的持久化后端（字符串键 -> 字符串值）"""
import json
import logging
import os

logger = logging.getLogger(__name__)


class MemoryStore:
    """进程内存储，测试和不需要持久化时使用"""

    def __init__(self, items=None):
        self._items = dict(items) if items else {}

    def get_item(self, key):
        return self._items.get(key)

    def set_item(self, key, value):
        self._items[key] = value

    def remove_item(self, key):
        self._items.pop(key, None)

    def keys(self):
        return list(self._items.keys())


class JsonFileStore(MemoryStore):
    """
    把所有键值保存在一个JSON文件里，每次修改后整体重写
    Args:
        path: JSON文件路径，不存在时从空开始
    """

    def __init__(self, path):
        super().__init__()
        self.path = path
        self._load()

    def _load(self):
        """读取JSON文件；文件损坏或不是JSON对象时记录警告并从空开始"""
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except ValueError as e:
            logger.warning(f"Corrupted history file {self.path}, starting empty: {e}")
            return
        if not isinstance(data, dict):
            logger.warning(f"{self.path} does not contain a JSON object, starting empty")
            return
        self._items = {str(k): str(v) for k, v in data.items()}
        logger.debug(f"Loaded {len(self._items)} keys from {self.path}")

    def _persist(self):
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._items, f, ensure_ascii=False, indent=2)

    def set_item(self, key, value):
        super().set_item(key, value)
        self._persist()

    def remove_item(self, key):
        super().remove_item(key)
        self._persist()
