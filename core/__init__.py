"""核心模块 - Token系统、RPN评估器、公式编辑和序列化"""
from .token_system import (
    AppendResult, Precedence, BinOp, UnOp, SymOp, DIGITS, Token,
    NumberToken, BinaryToken, UnaryToken, GroupToken, SymbolToken, OpenToken, EqToken
)
from .operators import Operators
from .rpn_evaluator import RPNEvaluator
from .serialization import (
    TOKEN_CLASSES, serialize_token, deserialize_token,
    serialize_formula, deserialize_formula, nesting_depth, clone_tokens
)
from .formula import Formula, tokens_to_text

__all__ = [
    'AppendResult', 'Precedence', 'BinOp', 'UnOp', 'SymOp', 'DIGITS', 'Token',
    'NumberToken', 'BinaryToken', 'UnaryToken', 'GroupToken', 'SymbolToken', 'OpenToken', 'EqToken',
    'Operators', 'RPNEvaluator',
    'TOKEN_CLASSES', 'serialize_token', 'deserialize_token',
    'serialize_formula', 'deserialize_formula', 'nesting_depth', 'clone_tokens',
    'Formula', 'tokens_to_text'
]
