"""会话模块 - 按键到公式编辑的分发"""
from .calculator import CalculatorSession, DisplayState, ALL_KEYS

__all__ = ['CalculatorSession', 'DisplayState', 'ALL_KEYS']
