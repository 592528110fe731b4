"""Shared fixtures for the calculator tests."""

import pytest

from core.formula import Formula
from core.token_system import NumberToken, BinaryToken, UnaryToken, GroupToken, SymbolToken, BinOp, UnOp
from history.history import History
from history.store import MemoryStore
from session.calculator import CalculatorSession


class FakeEnv:
    """Minimal environment exposing last_ans, like History does."""

    def __init__(self, last_ans):
        self.last_ans = last_ans


def num(digits, negative=False):
    token = NumberToken(digits[0])
    for d in digits[1:]:
        token.append_digit(d)
    token.negative = negative
    return token


def op(symbol):
    return BinaryToken(BinOp(symbol))


def un(symbol):
    return UnaryToken(UnOp(symbol))


def group(*tokens):
    return GroupToken(list(tokens))


def ans():
    return SymbolToken()


@pytest.fixture
def formula():
    return Formula()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def history(store):
    return History(store)


@pytest.fixture
def session(history):
    return CalculatorSession(history)
