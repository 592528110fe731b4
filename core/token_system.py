"""core/token_system.py"""
import re
from enum import Enum, IntEnum

from config.config import FORMULA_CONFIG
from core.operators import Operators


class AppendResult(Enum):
    """Token对一次追加输入的答复，由Formula据此修改序列"""
    REPLACED = "replaced"  # 当前token已原地修改
    FAILED = "failed"  # 拒绝本次输入
    CREATE_AFTER = "createAfter"  # 当前token不变，在其后追加新token
    INSERT_ANS_AND_CREATE = "insertAnsAndCreate"  # 先插入Ans，再追加新token
    DELETE_AND_CREATE = "deleteAndCreate"  # 用新token替换当前token
    CREATE_BEFORE = "createBefore"  # 在当前token之前插入新token
    BACKSPACE = "backspace"  # 删除当前token


class Precedence(IntEnum):
    """优先级（升序），同时决定后缀转换和partial()窗口"""
    EQ = 0
    OPEN = 1
    ADD = 2  # +, −
    MUL = 3  # ×, ÷
    POW = 4  # ^, E
    UNARY = 5
    SYMBOL = 6  # 数字、括号组、Ans


class BinOp(Enum):
    ADD = '+'
    SUB = '−'
    MUL = '×'
    DIV = '÷'
    POW = '^'
    EE = 'E'


class UnOp(Enum):
    RECIPROCAL = '1/𝘹'
    SQRT = '√'
    NEG = '±'


class SymOp(Enum):
    ANS = 'Ans'


DECIMAL_POINT = FORMULA_CONFIG["decimal_point"]
DIGITS = tuple('0123456789') + (DECIMAL_POINT,)

BINARY_PRECEDENCE = {
    BinOp.ADD: Precedence.ADD,
    BinOp.SUB: Precedence.ADD,
    BinOp.MUL: Precedence.MUL,
    BinOp.DIV: Precedence.MUL,
    BinOp.POW: Precedence.POW,
    BinOp.EE: Precedence.POW,
}

# 重复输入会互相抵消的一元操作符（√ 不抵消）
SELF_CANCELLING_UNARY = (UnOp.NEG, UnOp.RECIPROCAL)

_NUMBER_PATTERN = re.compile(r'\d+(' + re.escape(DECIMAL_POINT) + r'\d*)?')


def _span(result, css_class, content):
    result.extend([f'<span class="{css_class}">', content, '</span>'])


class Token:
    """公式中的一个token。子类实现六种追加操作以及求值、渲染和序列化"""

    tag = None  # 序列化标签

    def append_digit(self, digit):
        raise NotImplementedError

    def append_binary(self, op):
        raise NotImplementedError

    def append_unary(self, op):
        raise NotImplementedError

    def append_symbol(self):
        raise NotImplementedError

    def append_open(self):
        raise NotImplementedError

    def append_close(self):
        raise NotImplementedError

    def render_into(self, result):
        """把渲染片段（开标签、内容、闭标签）追加到result列表"""
        raise NotImplementedError

    def precedence(self):
        raise NotImplementedError

    def evaluate(self, env, *args):
        raise NotImplementedError

    def serialize(self):
        return None

    def deserialize(self, value):
        pass

    def clone(self):
        return type(self)()

    def __eq__(self, other):
        return type(self) is type(other) and self.serialize() == other.serialize()

    __hash__ = None

    def __repr__(self):
        return f"{type(self).__name__}({self.serialize()!r})"


class NumberToken(Token):
    """数字token：符号位 + 数字串（最多一个小数点）"""

    tag = 'n'

    def __init__(self, init='0'):
        if init not in DIGITS:
            raise ValueError(f"Invalid digit: {init!r}")
        self.negative = False
        self.number = '0' + DECIMAL_POINT if init == DECIMAL_POINT else init

    def append_digit(self, digit):
        if digit not in DIGITS:
            raise ValueError(f"Invalid digit: {digit!r}")
        if digit == DECIMAL_POINT:
            if DECIMAL_POINT in self.number:
                return AppendResult.FAILED
        elif self.number == '0':
            self.number = ''
        self.number += digit
        return AppendResult.REPLACED

    def append_binary(self, op):
        return AppendResult.CREATE_AFTER

    def append_unary(self, op):
        if op == UnOp.NEG:
            self.negative = not self.negative
            return AppendResult.REPLACED
        return AppendResult.CREATE_AFTER

    def append_symbol(self):
        return AppendResult.DELETE_AND_CREATE

    def append_open(self):
        return AppendResult.CREATE_BEFORE

    def append_close(self):
        return AppendResult.CREATE_AFTER

    def backspace(self):
        """删掉最后一个字符；返回True表示整个token应被移除"""
        if len(self.number) > 1:
            self.number = self.number[:-1]
            return False
        return True

    def render_into(self, result):
        _span(result, 'number', ('-' if self.negative else '') + self.number)

    def precedence(self):
        return Precedence.SYMBOL

    def evaluate(self, env, *args):
        n = float(self.number.replace(DECIMAL_POINT, '.'))
        return -n if self.negative else n

    def serialize(self):
        return [self.negative, self.number]

    def deserialize(self, value):
        negative, number = value
        if not isinstance(negative, bool) or not isinstance(number, str) or not _NUMBER_PATTERN.fullmatch(number):
            raise ValueError(f"Malformed number payload: {value!r}")
        self.negative = negative
        self.number = number

    def clone(self):
        token = NumberToken()
        token.negative = self.negative
        token.number = self.number
        return token


class BinaryToken(Token):
    """二元操作符 (+, −, ×, ÷, ^, E)"""

    tag = 'b'

    def __init__(self, op=BinOp.ADD):
        self.op = op

    def append_digit(self, digit):
        return AppendResult.CREATE_AFTER

    def append_binary(self, op):
        # 连续输入操作符时以最后一个为准
        self.op = op
        return AppendResult.REPLACED

    def append_unary(self, op):
        return AppendResult.FAILED

    def append_symbol(self):
        return AppendResult.CREATE_AFTER

    def append_open(self):
        return AppendResult.CREATE_AFTER

    def append_close(self):
        return AppendResult.FAILED

    def render_into(self, result):
        _span(result, 'operator', self.op.value)

    def precedence(self):
        return BINARY_PRECEDENCE[self.op]

    def evaluate(self, env, *args):
        left, right = args
        return getattr(Operators, self.op.name.lower())(left, right)

    def serialize(self):
        return self.op.value

    def deserialize(self, value):
        self.op = BinOp(value)

    def clone(self):
        return BinaryToken(self.op)


class UnaryToken(Token):
    """一元操作符 (1/x, √, ±)"""

    tag = 'u'

    def __init__(self, op=UnOp.NEG):
        self.op = op

    def append_digit(self, digit):
        return AppendResult.FAILED

    def append_binary(self, op):
        return AppendResult.CREATE_AFTER

    def append_unary(self, op):
        if op == self.op and op in SELF_CANCELLING_UNARY:
            return AppendResult.BACKSPACE
        return AppendResult.CREATE_AFTER

    def append_symbol(self):
        return AppendResult.FAILED

    def append_open(self):
        return AppendResult.FAILED

    def append_close(self):
        return AppendResult.CREATE_AFTER

    def render_into(self, result):
        _span(result, 'operator', self.op.value)

    def precedence(self):
        return Precedence.UNARY

    def evaluate(self, env, *args):
        x = args[0]
        return getattr(Operators, self.op.name.lower())(x)

    def serialize(self):
        return self.op.value

    def deserialize(self, value):
        self.op = UnOp(value)

    def clone(self):
        return UnaryToken(self.op)


class GroupToken(Token):
    """闭合括号后得到的子序列"""

    tag = 'g'

    def __init__(self, tokens=None):
        self.tokens = list(tokens) if tokens is not None else []

    def append_digit(self, digit):
        return AppendResult.FAILED

    def append_binary(self, op):
        return AppendResult.CREATE_AFTER

    def append_unary(self, op):
        return AppendResult.CREATE_AFTER

    def append_symbol(self):
        return AppendResult.FAILED

    def append_open(self):
        return AppendResult.FAILED

    def append_close(self):
        return AppendResult.CREATE_AFTER

    def render_into(self, result):
        _span(result, 'parenthesis', '(')
        for token in self.tokens:
            token.render_into(result)
        _span(result, 'parenthesis', ')')

    def precedence(self):
        return Precedence.SYMBOL

    def evaluate(self, env, *args):
        from core.rpn_evaluator import RPNEvaluator
        return RPNEvaluator.evaluate(self.tokens, env)

    def serialize(self):
        from core.serialization import serialize_token
        return [serialize_token(t) for t in self.tokens]

    def deserialize(self, value):
        from core.serialization import deserialize_token
        if not isinstance(value, list):
            raise ValueError(f"Malformed group payload: {value!r}")
        self.tokens = [deserialize_token(item) for item in value]

    def clone(self):
        return GroupToken([t.clone() for t in self.tokens])


class SymbolToken(Token):
    """符号token，目前只有Ans（上一次的答案）"""

    tag = 's'

    def __init__(self, op=SymOp.ANS):
        self.op = op

    def append_digit(self, digit):
        return AppendResult.DELETE_AND_CREATE

    def append_binary(self, op):
        return AppendResult.CREATE_AFTER

    def append_unary(self, op):
        return AppendResult.CREATE_AFTER

    def append_symbol(self):
        return AppendResult.DELETE_AND_CREATE

    def append_open(self):
        return AppendResult.CREATE_BEFORE

    def append_close(self):
        return AppendResult.CREATE_AFTER

    def render_into(self, result):
        _span(result, 'symbol', self.op.value)

    def precedence(self):
        return Precedence.SYMBOL

    def evaluate(self, env, *args):
        if self.op == SymOp.ANS:
            # env 为 None 或历史为空时 Ans = 0
            if env is None:
                return 0.0
            return float(env.last_ans)
        raise RuntimeError(f"Unknown symbol: {self.op}")

    def serialize(self):
        return self.op.value

    def deserialize(self, value):
        self.op = SymOp(value)

    def clone(self):
        return SymbolToken(self.op)


class OpenToken(Token):
    """尚未闭合的左括号"""

    tag = 'o'

    def append_digit(self, digit):
        return AppendResult.CREATE_AFTER

    def append_binary(self, op):
        return AppendResult.FAILED

    def append_unary(self, op):
        return AppendResult.FAILED

    def append_symbol(self):
        return AppendResult.CREATE_AFTER

    def append_open(self):
        return AppendResult.CREATE_AFTER

    def append_close(self):
        # 不允许空括号
        return AppendResult.FAILED

    def render_into(self, result):
        _span(result, 'parenthesis', '(')

    def precedence(self):
        return Precedence.OPEN

    def evaluate(self, env, *args):
        raise RuntimeError("should never evaluate OpenToken")


class EqToken(Token):
    """等号，出现时总在序列末尾"""

    tag = 'e'

    def append_digit(self, digit):
        return AppendResult.CREATE_AFTER

    def append_binary(self, op):
        return AppendResult.INSERT_ANS_AND_CREATE

    def append_unary(self, op):
        return AppendResult.INSERT_ANS_AND_CREATE

    def append_symbol(self):
        return AppendResult.CREATE_AFTER

    def append_open(self):
        return AppendResult.CREATE_AFTER

    def append_close(self):
        return AppendResult.FAILED

    def render_into(self, result):
        _span(result, 'eq', '=')

    def precedence(self):
        return Precedence.EQ

    def evaluate(self, env, *args):
        raise RuntimeError("should never evaluate EqToken")
