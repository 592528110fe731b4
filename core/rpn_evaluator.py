"""RPN表达式求值器 - 先按优先级转成后缀序列，再逐个归约"""
import logging

from core.token_system import Precedence

logger = logging.getLogger(__name__)


class RPNEvaluator:
    """把中缀token序列转成后缀顺序并求值"""

    @staticmethod
    def to_rpn(tokens):
        """
        按优先级重排为后缀顺序。
        值类token和一元操作符直接输出；其余操作符入栈前先弹出优先级不低于自己的操作符。
        同级操作符从左到右结合，2^3^2 = (2^3)^2。
        """
        result = []
        ops = []
        for token in tokens:
            precedence = token.precedence()
            if precedence in (Precedence.SYMBOL, Precedence.UNARY):
                result.append(token)
                continue
            while ops and ops[-1].precedence() >= precedence:
                result.append(ops.pop())
            ops.append(token)
        result.extend(reversed(ops))
        return result

    @staticmethod
    def reduce(rpn_tokens, env=None):
        """
        归约后缀序列
        Args:
            rpn_tokens: to_rpn() 的输出
            env: 提供 last_ans 的环境（通常是History），None 时 Ans = 0
        Returns:
            float
        """
        numbers = []
        for token in rpn_tokens:
            precedence = token.precedence()
            if precedence == Precedence.SYMBOL:
                numbers.append(token.evaluate(env))
            elif precedence == Precedence.UNARY:
                if not numbers:
                    logger.error(f"Insufficient operands for {token!r}")
                    raise RuntimeError(f"Insufficient operands for {token!r}")
                numbers[-1] = token.evaluate(env, numbers[-1])
            else:
                if len(numbers) < 2:
                    logger.error(f"Insufficient operands for {token!r}")
                    raise RuntimeError(f"Insufficient operands for {token!r}")
                right = numbers.pop()
                left = numbers.pop()
                numbers.append(token.evaluate(env, left, right))

        if len(numbers) != 1:
            logger.error(f"Stack has {len(numbers)} elements after evaluation, expected 1")
            logger.error(f"RPN expression: {rpn_tokens!r}")
            raise RuntimeError(f"Stack has {len(numbers)} elements after evaluation, expected 1")
        return numbers[0]

    @staticmethod
    def evaluate(tokens, env=None):
        """对中缀token序列求值（不能含未闭合的左括号或等号）"""
        return RPNEvaluator.reduce(RPNEvaluator.to_rpn(tokens), env)
