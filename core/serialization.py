"""Token序列化 - [tag, payload] 形式，便于写入历史记录"""
import logging

from config.config import FORMULA_CONFIG
from core.token_system import (
    NumberToken, BinaryToken, UnaryToken, GroupToken,
    SymbolToken, OpenToken, EqToken
)

logger = logging.getLogger(__name__)

# tag -> token类
TOKEN_CLASSES = {
    cls.tag: cls
    for cls in (NumberToken, BinaryToken, UnaryToken, GroupToken, SymbolToken, OpenToken, EqToken)
}


def serialize_token(token):
    return [token.tag, token.serialize()]


def deserialize_token(item):
    """
    按tag还原token
    Raises:
        ValueError: tag未知或payload格式不对
    """
    try:
        tag, payload = item
    except (TypeError, ValueError):
        raise ValueError(f"cannot deserialize token from {item!r}")

    cls = TOKEN_CLASSES.get(tag) if isinstance(tag, str) else None
    if cls is None:
        raise ValueError(f"cannot deserialize token from {item!r}")

    token = cls()
    try:
        token.deserialize(payload)
    except TypeError as e:
        raise ValueError(f"cannot deserialize token from {item!r}: {e}")
    return token


def serialize_formula(tokens):
    return [serialize_token(t) for t in tokens]


def nesting_depth(tokens):
    """
    括号嵌套层数的上界：顶层未闭合的 '(' 个数加上最深的GroupToken层数
    （逐层展开，不递归）
    """
    open_count = sum(1 for t in tokens if isinstance(t, OpenToken))
    max_depth = 0
    pending = [(t, 1) for t in tokens if isinstance(t, GroupToken)]
    while pending:
        group, depth = pending.pop()
        max_depth = max(max_depth, depth)
        pending.extend((t, depth + 1) for t in group.tokens if isinstance(t, GroupToken))
    return open_count + max_depth


def deserialize_formula(items):
    """
    还原token序列
    Raises:
        ValueError: 格式不对，或括号嵌套超过 max_nesting_depth
    """
    if not isinstance(items, list):
        raise ValueError(f"Serialized formula must be a list, got {type(items).__name__}")
    try:
        tokens = [deserialize_token(item) for item in items]
    except RecursionError:
        raise ValueError("Serialized formula is nested too deeply")
    depth = nesting_depth(tokens)
    if depth > FORMULA_CONFIG["max_nesting_depth"]:
        raise ValueError(f"Serialized formula is nested {depth} levels deep, "
                         f"limit is {FORMULA_CONFIG['max_nesting_depth']}")
    return tokens


def clone_tokens(tokens):
    """深拷贝token序列，保证历史快照与当前公式互不影响"""
    return [t.clone() for t in tokens]
