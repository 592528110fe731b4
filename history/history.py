"""历史记录 - 有上限的 (公式快照, 答案) 列表，持久化到键值存储"""
import json
import logging

import pandas as pd

from config.config import HISTORY_CONFIG
from core.formula import tokens_to_text
from core.serialization import serialize_formula, deserialize_formula, clone_tokens
from history.store import MemoryStore

logger = logging.getLogger(__name__)


class HistoryEntry:
    """一条历史记录：公式快照（独立的深拷贝）和答案"""

    def __init__(self, formula, ans):
        self.formula = formula
        self.ans = ans

    def __repr__(self):
        return f"HistoryEntry(formula='{tokens_to_text(self.formula)}', ans={self.ans})"


class History:
    """
    存储布局：
        indices_key          -> JSON 整数ID列表（递增）
        value_key_prefix+ID  -> JSON [序列化公式, 答案]
    """

    def __init__(self, store=None, max_history_count=None, indices_key=None, value_key_prefix=None):
        self.store = store if store is not None else MemoryStore()
        self.max_history_count = max_history_count or HISTORY_CONFIG["max_history_count"]
        self.indices_key = indices_key or HISTORY_CONFIG["indices_key"]
        self.value_key_prefix = value_key_prefix or HISTORY_CONFIG["value_key_prefix"]

        self.history_indices = []
        self.entries = []
        self._load()

    def _value_key(self, index):
        return f"{self.value_key_prefix}{index}"

    def _load(self):
        """读取所有记录；损坏或无法解码的记录直接丢弃，不影响其他记录"""
        raw_indices = self.store.get_item(self.indices_key)
        try:
            history_indices = json.loads(raw_indices) if raw_indices else []
        except ValueError:
            logger.warning(f"Corrupted history index under '{self.indices_key}', starting empty")
            history_indices = []
        if not isinstance(history_indices, list):
            logger.warning(f"History index under '{self.indices_key}' is not a list, starting empty")
            history_indices = []

        for index in history_indices:
            if not isinstance(index, int) or isinstance(index, bool):
                logger.warning(f"Dropped history entry with invalid id {index!r}")
                continue
            entry = self._load_entry(index)
            if entry is not None:
                self.history_indices.append(index)
                self.entries.append(entry)

        logger.debug(f"Loaded {len(self.entries)} history entries "
                     f"({len(history_indices) - len(self.entries)} dropped)")

    def _load_entry(self, index):
        raw = self.store.get_item(self._value_key(index))
        if raw is None:
            logger.warning(f"Dropped history entry {index}: record is missing")
            return None
        try:
            record = json.loads(raw)
            if not isinstance(record, list) or len(record) != 2:
                raise ValueError(f"record must be [formula, ans], got {record!r}")
            formula_json, ans = record
            formula = deserialize_formula(formula_json)
            ans = float(ans)
        except (ValueError, TypeError, RecursionError) as e:
            logger.warning(f"Dropped history entry {index}: {e}")
            return None
        return HistoryEntry(formula, ans)

    def _save_indices(self):
        self.store.set_item(self.indices_key, json.dumps(self.history_indices))

    @property
    def last_ans(self):
        """最近一次的答案，没有历史时为0"""
        if self.entries:
            return self.entries[-1].ans
        return 0.0

    def save_ans(self, formula, ans):
        """
        新增一条记录，超过上限时淘汰最旧的
        Args:
            formula: token序列，会被深拷贝
            ans: 答案
        Returns:
            新记录的ID
        """
        next_history_id = 0
        if self.history_indices:
            next_history_id = self.history_indices[-1] + 1

        while len(self.history_indices) >= self.max_history_count:
            delete_id = self.history_indices.pop(0)
            self.entries.pop(0)
            self.store.remove_item(self._value_key(delete_id))
            logger.debug(f"Evicted oldest history entry {delete_id}")

        snapshot = clone_tokens(formula)
        self.history_indices.append(next_history_id)
        self.entries.append(HistoryEntry(snapshot, float(ans)))

        self.store.set_item(self._value_key(next_history_id), json.dumps([serialize_formula(snapshot), float(ans)]))
        self._save_indices()
        logger.info(f"Saved history entry {next_history_id}: {tokens_to_text(snapshot)} {ans}")
        return next_history_id

    def delete(self, local_index):
        """按列表位置删除一条记录"""
        index = self.history_indices.pop(local_index)
        self.entries.pop(local_index)
        self.store.remove_item(self._value_key(index))
        self._save_indices()
        logger.info(f"Deleted history entry {index}")

    def clear(self):
        for index in self.history_indices:
            self.store.remove_item(self._value_key(index))
        self.history_indices = []
        self.entries = []
        self._save_indices()

    def to_frame(self):
        """以DataFrame形式列出历史记录（id, formula, ans）"""
        return pd.DataFrame({
            'id': pd.Series(self.history_indices, dtype='int64'),
            'formula': pd.Series([tokens_to_text(e.formula) for e in self.entries], dtype='object'),
            'ans': pd.Series([e.ans for e in self.entries], dtype='float64'),
        })

    def __len__(self):
        return len(self.entries)

    def __getitem__(self, local_index):
        return self.entries[local_index]
