"""配置文件"""

# 公式编辑参数
FORMULA_CONFIG = {
    "decimal_point": ".",
    "zero_seed": "0",  # partial()窗口为空时显示的数字
    "max_nesting_depth": 64,  # 括号最多嵌套层数，超出时拒绝 "("
}

# 历史记录参数
HISTORY_CONFIG = {
    "max_history_count": 64,  # 最多保留64条，超出时淘汰最旧的
    "indices_key": "hI",  # 索引列表的键
    "value_key_prefix": "hV",  # 单条记录的键前缀，后接ID
}

# 数字格式化参数
FORMAT_CONFIG = {
    "min_positional": 1e-6,  # 小于此值改用科学计数法（0除外）
    "max_positional": 1e16,  # 大于等于此值改用科学计数法
    "max_fraction_digits": 20,
    "group_separator": ",",
}

# 日志
LOGGING_CONFIG = {
    "level": "INFO",
    "format": '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
}


# 验证配置
def validate_config():
    """验证配置的合理性"""
    assert HISTORY_CONFIG["max_history_count"] > 0, "历史记录上限必须为正数"
    assert HISTORY_CONFIG["indices_key"] != HISTORY_CONFIG["value_key_prefix"], "索引键不能与记录键前缀相同"
    assert 0 < FORMAT_CONFIG["min_positional"] < FORMAT_CONFIG["max_positional"], "格式化区间无效"
    assert 0 <= FORMAT_CONFIG["max_fraction_digits"] <= 20, "小数位数须在0到20之间"
    assert len(FORMULA_CONFIG["decimal_point"]) == 1, "小数点必须是单个字符"
    assert 0 < FORMULA_CONFIG["max_nesting_depth"] <= 200, "括号嵌套层数须在1到200之间"
    return True
