"""计算器会话 - 按键分发、刷新显示、历史记录操作"""
import logging
from collections import namedtuple

from core.formula import Formula
from core.token_system import BinOp, UnOp, SymOp
from history.history import History
from utils.formatting import format_number, plain_number

logger = logging.getLogger(__name__)

DisplayState = namedtuple('DisplayState', ['formula_html', 'value', 'text'])

DIGIT_KEYS = {str(d): str(d) for d in range(10)}
DIGIT_KEYS['dot'] = '.'

BINARY_KEYS = {
    'add': BinOp.ADD,
    'sub': BinOp.SUB,
    'mul': BinOp.MUL,
    'div': BinOp.DIV,
    'pow': BinOp.POW,
    'ee': BinOp.EE,
}

UNARY_KEYS = {
    'neg': UnOp.NEG,
    'reciprocal': UnOp.RECIPROCAL,
    'sqrt': UnOp.SQRT,
}

OTHER_KEYS = ('ans', 'open', 'close', 'backspace', 'eq', 'ac')

ALL_KEYS = tuple(DIGIT_KEYS) + tuple(BINARY_KEYS) + tuple(UNARY_KEYS) + OTHER_KEYS


class CalculatorSession:
    """持有当前公式和历史记录，一次处理一个按键"""

    def __init__(self, history=None):
        self.formula = Formula()
        self.history = history if history is not None else History()
        self.partial_ans = 0.0

    def press(self, key):
        """
        处理一个按键并刷新
        Args:
            key: 按键名，见 ALL_KEYS
        Returns:
            DisplayState
        Raises:
            KeyError: 未知按键
        """
        completed = False
        if key in DIGIT_KEYS:
            changed = self.formula.append_digit(DIGIT_KEYS[key])
        elif key in BINARY_KEYS:
            changed = self.formula.append_binary(BINARY_KEYS[key])
        elif key in UNARY_KEYS:
            changed = self.formula.append_unary(UNARY_KEYS[key])
        elif key == 'ans':
            changed = self.formula.append_symbol(SymOp.ANS)
        elif key == 'open':
            changed = self.formula.append_open()
        elif key == 'close':
            changed = self.formula.append_close()
        elif key == 'backspace':
            changed = self.formula.backspace()
        elif key == 'eq':
            changed = completed = self.formula.append_eq()
        elif key == 'ac':
            self.formula.clear()
            changed = True
        else:
            raise KeyError(f"Unknown key: {key}")

        if not changed:
            logger.debug(f"Key '{key}' rejected")
        return self.refresh(save=completed)

    def press_all(self, keys):
        state = self.refresh()
        for key in keys:
            state = self.press(key)
        return state

    def refresh(self, save=False):
        """渲染公式并计算实时结果；save为True时把完成的公式写入历史"""
        formula_html = self.formula.render()
        # 先求值再保存，Ans 指向的是上一条历史
        ans = self.formula.partial_value(self.history)
        self.partial_ans = ans
        if save and self.formula.is_complete():
            self.history.save_ans(self.formula.tokens, ans)
        return DisplayState(formula_html, ans, format_number(ans))

    def copy_value(self):
        return plain_number(self.partial_ans)

    def use_history(self, local_index):
        """把某条历史的公式恢复为当前公式"""
        self.formula.load(self.history[local_index].formula)
        return self.refresh()

    def copy_history_value(self, local_index):
        return plain_number(self.history[local_index].ans)

    def delete_history(self, local_index):
        self.history.delete(local_index)
