"""主程序入口 - 按顺序输入按键，打印每一步的公式和结果"""
import argparse
import logging

from config.config import LOGGING_CONFIG, validate_config
from history import History, JsonFileStore, MemoryStore
from session import CalculatorSession, ALL_KEYS
from utils.formatting import format_number

logger = logging.getLogger(__name__)


def build_session(history_path=None):
    """创建会话；给出history_path时历史记录保存在该JSON文件"""
    store = JsonFileStore(history_path) if history_path else MemoryStore()
    history = History(store)
    logger.info(f"Loaded {len(history)} history entries")
    return CalculatorSession(history)


def run_keys(session, keys):
    """逐个按键，返回每一步的 (按键, 公式文本, 结果文本)"""
    steps = []
    for key in keys:
        session.press(key)
        steps.append((key, session.formula.text(), format_number(session.partial_ans)))
    return steps


def main(args):
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format=LOGGING_CONFIG["format"]
    )
    validate_config()

    session = build_session(args.history_path)
    session.refresh()

    keys = args.keys.split()
    unknown = [k for k in keys if k not in ALL_KEYS]
    if unknown:
        raise ValueError(f"Unknown keys: {', '.join(unknown)}. Valid keys: {' '.join(ALL_KEYS)}")

    for key, formula_text, value_text in run_keys(session, keys):
        print(f"{key:>10}  {formula_text:<30} {value_text}")

    if args.show_history:
        frame = session.history.to_frame()
        if frame.empty:
            print("(no history)")
        else:
            print(frame.to_string(index=False))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Token-based calculator")

    parser.add_argument(
        "--keys",
        type=str,
        default="",
        help="Space separated key names, e.g. '2 add 3 eq'"
    )
    parser.add_argument(
        "--history_path",
        type=str,
        default=None,
        help="JSON file used to persist history (default: in-memory)"
    )
    parser.add_argument(
        "--show_history",
        action="store_true",
        help="Print the history table after processing the keys"
    )
    parser.add_argument(
        "--log_level",
        type=str,
        default=LOGGING_CONFIG["level"],
        help="Logging level (default: INFO)"
    )
    args = parser.parse_args()
    main(args)
