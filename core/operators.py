"""core/operators.py"""
import numpy as np
import logging

logger = logging.getLogger(__name__)


def _as_float(value):
    """把numpy标量转回Python float，保留inf/nan"""
    return float(value)


class Operators:
    """所有操作符的静态方法集合，统一按IEEE双精度语义计算（除零得到inf，不抛异常）"""

    # ================== 二元操作符 ==================
    @staticmethod
    def add(x, y):
        with np.errstate(all='ignore'):
            return _as_float(np.add(np.float64(x), np.float64(y)))

    @staticmethod
    def sub(x, y):
        with np.errstate(all='ignore'):
            return _as_float(np.subtract(np.float64(x), np.float64(y)))

    @staticmethod
    def mul(x, y):
        with np.errstate(all='ignore'):
            return _as_float(np.multiply(np.float64(x), np.float64(y)))

    @staticmethod
    def div(x, y):
        """x ÷ y；y为0时结果为±inf或nan"""
        with np.errstate(all='ignore'):
            return _as_float(np.divide(np.float64(x), np.float64(y)))

    @staticmethod
    def pow(x, y):
        with np.errstate(all='ignore'):
            return _as_float(np.power(np.float64(x), np.float64(y)))

    @staticmethod
    def ee(x, y):
        """科学计数法输入：x × 10^y"""
        with np.errstate(all='ignore'):
            return _as_float(np.multiply(np.float64(x), np.power(np.float64(10.0), np.float64(y))))

    # ================== 一元操作符 ==================
    @staticmethod
    def reciprocal(x):
        with np.errstate(all='ignore'):
            return _as_float(np.divide(np.float64(1.0), np.float64(x)))

    @staticmethod
    def sqrt(x):
        # 负数开方得到nan
        with np.errstate(all='ignore'):
            return _as_float(np.sqrt(np.float64(x)))

    @staticmethod
    def neg(x):
        return _as_float(np.negative(np.float64(x)))
