"""utils/formatting.py"""
import numpy as np

from config.config import FORMAT_CONFIG


def _group_digits(int_part, separator):
    return f"{int(int_part):,}".replace(',', separator)


def format_number(n, config=None):
    """
    把数字格式化成显示用的文本
    - 0 以及绝对值在 [min_positional, max_positional) 内：带千位分隔符，最多20位小数
    - 其他：科学计数法，例如 1.5e+21
    """
    cfg = config or FORMAT_CONFIG
    n = float(n)
    if np.isnan(n):
        return 'NaN'
    if np.isinf(n):
        return 'Infinity' if n > 0 else '-Infinity'
    if n == 0:
        return '0'

    magnitude = abs(n)
    if cfg["min_positional"] <= magnitude < cfg["max_positional"]:
        text = np.format_float_positional(
            magnitude, precision=cfg["max_fraction_digits"], unique=True, fractional=True, trim='-'
        )
        int_part, _, frac_part = text.partition('.')
        result = _group_digits(int_part, cfg["group_separator"])
        if frac_part:
            result += '.' + frac_part
        return ('-' if n < 0 else '') + result

    return np.format_float_scientific(n, unique=True, trim='-', exp_digits=1)


def plain_number(n):
    """复制到剪贴板用的纯文本：无分隔符，整数不带 '.0'"""
    n = float(n)
    if np.isnan(n):
        return 'NaN'
    if np.isinf(n):
        return 'Infinity' if n > 0 else '-Infinity'
    if n.is_integer() and abs(n) < 1e21:
        return str(int(n))
    return repr(n)
