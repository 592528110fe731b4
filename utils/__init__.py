"""工具模块"""
from .formatting import format_number, plain_number

__all__ = ['format_number', 'plain_number']
