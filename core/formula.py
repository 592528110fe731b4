"""公式编辑状态机 - 把每次按键交给最后一个token，再按返回的AppendResult修改序列"""
import logging

from config.config import FORMULA_CONFIG
from core.token_system import (
    AppendResult, Precedence, NumberToken, BinaryToken, UnaryToken,
    GroupToken, SymbolToken, OpenToken, EqToken, SymOp
)
from core.rpn_evaluator import RPNEvaluator
from core.serialization import clone_tokens, nesting_depth

logger = logging.getLogger(__name__)


class Formula:
    """持有一个有序token序列，只能通过下面的编辑操作修改"""

    def __init__(self, tokens=None):
        self.tokens = clone_tokens(tokens) if tokens else []

    def _handle_append_result(self, append_result, new_token):
        """按AppendResult修改序列；返回序列是否发生了变化"""
        if append_result == AppendResult.FAILED:
            logger.debug(f"Rejected {new_token!r} after {self.tokens[-1:]!r}")
            return False
        if append_result == AppendResult.CREATE_AFTER:
            self.tokens.append(new_token)
        elif append_result == AppendResult.INSERT_ANS_AND_CREATE:
            self.tokens.extend([SymbolToken(SymOp.ANS), new_token])
        elif append_result == AppendResult.DELETE_AND_CREATE:
            self.tokens[-1] = new_token
        elif append_result == AppendResult.CREATE_BEFORE:
            self.tokens.insert(len(self.tokens) - 1, new_token)
        elif append_result == AppendResult.BACKSPACE:
            self.tokens.pop()
        return True

    def _append_to_last_token(self, default_result, action):
        """
        询问最后一个token如何处理本次输入
        Args:
            default_result: 序列为空时使用的结果
            action: 接受最后一个token、返回AppendResult的函数
        """
        if not self.tokens:
            return default_result
        token = self.tokens[-1]
        result = action(token)
        # 已完成的公式在下一次成功编辑时先清空
        if isinstance(token, EqToken) and result != AppendResult.FAILED:
            self.tokens = []
        return result

    def append_digit(self, digit):
        result = self._append_to_last_token(AppendResult.CREATE_AFTER, lambda t: t.append_digit(digit))
        return self._handle_append_result(result, NumberToken(digit))

    def append_binary(self, op):
        result = self._append_to_last_token(AppendResult.INSERT_ANS_AND_CREATE, lambda t: t.append_binary(op))
        return self._handle_append_result(result, BinaryToken(op))

    def append_unary(self, op):
        result = self._append_to_last_token(AppendResult.INSERT_ANS_AND_CREATE, lambda t: t.append_unary(op))
        return self._handle_append_result(result, UnaryToken(op))

    def append_symbol(self, op=SymOp.ANS):
        result = self._append_to_last_token(AppendResult.CREATE_AFTER, lambda t: t.append_symbol())
        return self._handle_append_result(result, SymbolToken(op))

    def append_open(self):
        """括号嵌套达到 max_nesting_depth 时拒绝"""
        if not self.is_complete() and nesting_depth(self.tokens) >= FORMULA_CONFIG["max_nesting_depth"]:
            logger.debug(f"Rejected '(' at nesting limit {FORMULA_CONFIG['max_nesting_depth']}")
            return False
        result = self._append_to_last_token(AppendResult.CREATE_AFTER, lambda t: t.append_open())
        return self._handle_append_result(result, OpenToken())

    def append_close(self):
        """把最近的 '(' 之后的内容收成一个GroupToken；没有可闭合的括号时返回False"""
        result = self._append_to_last_token(AppendResult.FAILED, lambda t: t.append_close())
        if result == AppendResult.FAILED:
            return False
        if result != AppendResult.CREATE_AFTER:
            logger.error(f"Unexpected result {result} for appending ')'")
            raise RuntimeError(f"unknown action for appending ')': {result}")

        for i in range(len(self.tokens) - 1, -1, -1):
            if isinstance(self.tokens[i], OpenToken):
                group = GroupToken(self.tokens[i + 1:])
                self.tokens[i:] = [group]
                return True
        logger.debug("No '(' to close")
        return False

    def backspace(self):
        """删除最后一个字符；GroupToken会被重新展开成 '(' 加原内容"""
        if not self.tokens:
            return False
        token = self.tokens.pop()
        if isinstance(token, NumberToken):
            if not token.backspace():
                self.tokens.append(token)
        elif isinstance(token, GroupToken):
            self.tokens.append(OpenToken())
            self.tokens.extend(token.tokens)
        return True

    def append_eq(self):
        """闭合所有括号并追加等号；最后一个token不能结束公式时返回False"""
        if self._append_to_last_token(AppendResult.FAILED, lambda t: t.append_close()) != AppendResult.CREATE_AFTER:
            logger.debug("Formula cannot be completed in its current state")
            return False
        while self.append_close():
            pass
        self.tokens.append(EqToken())
        return True

    def is_complete(self):
        return len(self.tokens) > 0 and isinstance(self.tokens[-1], EqToken)

    def clear(self):
        self.tokens = []

    def load(self, tokens):
        """用一份深拷贝替换当前内容（从历史记录恢复公式）"""
        self.tokens = clone_tokens(tokens)

    def partial(self):
        """
        获取当前应显示结果的尾部片段
        - 值类 => 只取最后一个token
        - 二元操作符 => 排除它，再向前读到优先级低于它的token为止
        - 一元操作符 => 继续向前
        - '(' => 跳过，看它前面的内容
        - 等号 => 去掉等号后的整个序列
        """
        end = len(self.tokens)
        start = end - 1
        while start >= 0:
            prec = self.tokens[start].precedence()
            if prec == Precedence.SYMBOL:
                break
            if prec == Precedence.EQ:
                end -= 1
                start = 0
                break
            if prec == Precedence.UNARY:
                start -= 1
            elif prec == Precedence.OPEN:
                start -= 1
                end -= 1
            else:
                end -= 1
                while start > 0 and self.tokens[start - 1].precedence() >= prec:
                    start -= 1
                break

        if start < 0:
            start = 0
        if start >= end:
            return [NumberToken(FORMULA_CONFIG["zero_seed"])]
        return self.tokens[start:end]

    def partial_value(self, env=None):
        return RPNEvaluator.evaluate(self.partial(), env)

    def render_into(self, result):
        for token in self.tokens:
            token.render_into(result)

    def render(self):
        result = []
        self.render_into(result)
        return ''.join(result)

    def text(self):
        return tokens_to_text(self.tokens)

    def __len__(self):
        return len(self.tokens)

    def __repr__(self):
        return f"Formula({self.tokens!r})"


def tokens_to_text(tokens):
    """纯文本形式，例如 '2+3='（每个token渲染为三段，取中间的内容段）"""
    result = []
    for token in tokens:
        token.render_into(result)
    return ''.join(result[1::3])
