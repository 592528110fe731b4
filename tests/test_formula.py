"""Tests for the formula editing automaton and the live-preview window."""

import pytest

from config.config import FORMULA_CONFIG
from core.formula import Formula
from core.token_system import BinOp, UnOp, SymOp, OpenToken, EqToken
from conftest import FakeEnv, num, op, un, group, ans


def type_in(formula, *keys):
    """Apply a compact key sequence: digits, '+', '×', 'neg', 'sqrt', 'ans', '(', ')', '='."""
    binaries = {b.value: b for b in BinOp}
    unaries = {'neg': UnOp.NEG, 'sqrt': UnOp.SQRT, 'inv': UnOp.RECIPROCAL}
    results = []
    for key in keys:
        if key in binaries:
            results.append(formula.append_binary(binaries[key]))
        elif key in unaries:
            results.append(formula.append_unary(unaries[key]))
        elif key == 'ans':
            results.append(formula.append_symbol(SymOp.ANS))
        elif key == '(':
            results.append(formula.append_open())
        elif key == ')':
            results.append(formula.append_close())
        elif key == '=':
            results.append(formula.append_eq())
        elif key == 'bs':
            results.append(formula.backspace())
        else:
            for digit in key:
                results.append(formula.append_digit(digit))
    return results


# --- Basic editing ---

def test_digits_extend_one_number(formula):
    type_in(formula, '12.5')
    assert formula.tokens == [num('12.5')]


def test_binary_on_empty_inserts_answer(formula):
    assert formula.append_binary(BinOp.ADD) is True
    assert formula.tokens == [ans(), op('+')]


def test_unary_on_empty_inserts_answer(formula):
    type_in(formula, 'sqrt')
    assert formula.tokens == [ans(), un('√')]


def test_consecutive_operators_last_wins(formula):
    type_in(formula, '2', '+', '×')
    assert formula.tokens == [num('2'), op('×')]


def test_unary_after_binary_rejected(formula):
    type_in(formula, '2', '+')
    assert formula.append_unary(UnOp.SQRT) is False
    assert formula.tokens == [num('2'), op('+')]


def test_negate_toggles_number_sign(formula):
    type_in(formula, '5', 'neg')
    assert formula.tokens == [num('5', negative=True)]


def test_double_negate_on_group_cancels(formula):
    type_in(formula, '(', '2', ')', 'neg')
    assert formula.tokens == [group(num('2')), un('±')]
    type_in(formula, 'neg')
    assert formula.tokens == [group(num('2'))]


def test_double_reciprocal_cancels(formula):
    type_in(formula, '4', 'inv', 'inv')
    assert formula.tokens == [num('4')]


def test_double_sqrt_does_not_cancel(formula):
    type_in(formula, '16', 'sqrt', 'sqrt')
    assert formula.tokens == [num('16'), un('√'), un('√')]
    assert formula.partial_value() == pytest.approx(2)


def test_digit_replaces_symbol(formula):
    type_in(formula, 'ans', '5')
    assert formula.tokens == [num('5')]


def test_symbol_replaces_number(formula):
    type_in(formula, '5', 'ans')
    assert formula.tokens == [ans()]


def test_open_after_symbol_inserts_before(formula):
    type_in(formula, 'ans', '(')
    assert formula.tokens == [OpenToken(), ans()]


def test_open_after_number_inserts_before(formula):
    type_in(formula, '2', '(')
    assert formula.tokens == [OpenToken(), num('2')]


def test_digit_after_group_rejected(formula):
    type_in(formula, '(', '2', ')')
    assert formula.append_digit('3') is False
    assert formula.tokens == [group(num('2'))]


def test_operator_after_open_rejected(formula):
    type_in(formula, '(')
    assert formula.append_binary(BinOp.MUL) is False
    assert formula.tokens == [OpenToken()]


# --- Parentheses ---

def test_close_groups_contents(formula):
    type_in(formula, '(', '2', '+', '3', ')')
    assert formula.tokens == [group(num('2'), op('+'), num('3'))]
    assert formula.partial_value() == pytest.approx(5)


def test_close_without_open_fails_unchanged(formula):
    type_in(formula, '2', '+', '3')
    assert formula.append_close() is False
    assert formula.tokens == [num('2'), op('+'), num('3')]


def test_close_on_empty_fails(formula):
    assert formula.append_close() is False
    assert formula.tokens == []


def test_empty_parentheses_rejected(formula):
    type_in(formula, '(')
    assert formula.append_close() is False
    assert formula.tokens == [OpenToken()]


def test_close_uses_nearest_open(formula):
    type_in(formula, '(', '1', '+', '(', '2', ')')
    assert formula.tokens == [OpenToken(), num('1'), op('+'), group(num('2'))]


def test_open_rejected_at_nesting_limit(formula):
    limit = FORMULA_CONFIG["max_nesting_depth"]
    results = type_in(formula, *['('] * (limit + 1))
    assert results == [True] * limit + [False]
    assert len(formula) == limit

    assert type_in(formula, '1', '=') == [True, True]
    assert formula.partial_value() == 1


def test_closed_groups_count_toward_nesting_limit(formula):
    limit = FORMULA_CONFIG["max_nesting_depth"]
    type_in(formula, *['('] * limit, '1', *[')'] * limit, '+')
    assert formula.append_open() is False
    assert formula.append_digit('2') is True
    assert formula.partial_value() == pytest.approx(2)


def test_open_after_completion_ignores_nesting_limit(formula):
    limit = FORMULA_CONFIG["max_nesting_depth"]
    type_in(formula, *['('] * limit, '1', '=')
    assert formula.append_open() is True
    assert formula.tokens == [OpenToken()]


# --- Backspace ---

def test_backspace_shortens_multi_digit_number(formula):
    type_in(formula, '123')
    formula.backspace()
    assert formula.tokens == [num('12')]


def test_backspace_removes_single_digit_number(formula):
    type_in(formula, '2', '+', '7')
    formula.backspace()
    assert formula.tokens == [num('2'), op('+')]


def test_backspace_removes_operator(formula):
    type_in(formula, '2', '+')
    formula.backspace()
    assert formula.tokens == [num('2')]


def test_backspace_on_empty(formula):
    assert formula.backspace() is False


def test_backspace_reopens_group(formula):
    type_in(formula, '4', '×', '(', '2', '+', '3', ')')
    closed = list(formula.tokens)
    formula.backspace()
    assert formula.tokens == [num('4'), op('×'), OpenToken(), num('2'), op('+'), num('3')]
    assert formula.append_close() is True
    assert formula.tokens == closed


# --- Equals and completion ---

def test_eq_completes_formula(formula):
    type_in(formula, '2', '+', '3', '=')
    assert formula.is_complete()
    assert formula.tokens == [num('2'), op('+'), num('3'), EqToken()]
    assert formula.partial_value() == pytest.approx(5)


def test_eq_closes_open_groups(formula):
    type_in(formula, '2', '×', '(', '3', '+', '(', '1')
    assert formula.append_eq() is True
    assert formula.tokens == [
        num('2'), op('×'), group(num('3'), op('+'), group(num('1'))), EqToken()
    ]
    assert formula.partial_value() == pytest.approx(8)


def test_eq_on_empty_rejected(formula):
    assert formula.append_eq() is False
    assert formula.tokens == []


def test_eq_after_operator_rejected(formula):
    type_in(formula, '2', '+')
    assert formula.append_eq() is False
    assert not formula.is_complete()


def test_eq_twice_rejected(formula):
    type_in(formula, '2', '=')
    assert formula.append_eq() is False
    assert formula.tokens == [num('2'), EqToken()]


def test_failed_append_keeps_complete_formula(formula):
    type_in(formula, '2', '+', '3', '=')
    assert formula.append_close() is False
    assert formula.is_complete()
    assert len(formula) == 4


@pytest.mark.parametrize("keys", [
    ('7',),
    ('.',),
    ('+',),
    ('×',),
    ('sqrt',),
    ('neg',),
    ('ans',),
    ('(',),
])
def test_edit_after_completion_starts_fresh(formula, keys):
    type_in(formula, '2', '+', '3', '=')
    type_in(formula, *keys)

    fresh = Formula()
    type_in(fresh, *keys)
    assert formula.tokens == fresh.tokens


def test_operator_after_completion_uses_answer(formula):
    type_in(formula, '2', '+', '3', '=', '×')
    assert formula.tokens == [ans(), op('×')]


# --- Live preview window ---

@pytest.mark.parametrize("keys, expected", [
    ((), [num('0')]),
    (('5',), [num('5')]),
    (('1', '+', '2', '×'), [num('2')]),
    (('2', '×', '3', '+'), [num('2'), op('×'), num('3')]),
    (('1', '+', '2', '×', '3'), [num('3')]),
    (('2', '+', '('), [num('2')]),
    (('(',), [num('0')]),
    (('5', 'sqrt'), [num('5'), un('√')]),
    (('2', '+', '9', 'sqrt'), [num('9'), un('√')]),
    (('(', '2', '×', '3', '+'), [num('2'), op('×'), num('3')]),
    (('2', '^', '3', '×'), [num('2'), op('^'), num('3')]),
])
def test_partial_window(formula, keys, expected):
    type_in(formula, *keys)
    assert formula.partial() == expected


def test_partial_of_complete_formula_is_whole(formula):
    type_in(formula, '1', '+', '2', '×', '3', '=')
    assert formula.partial() == [num('1'), op('+'), num('2'), op('×'), num('3')]
    assert formula.partial_value() == pytest.approx(7)


def test_partial_value_with_answer(formula):
    type_in(formula, '+')
    assert formula.partial() == [ans()]
    assert formula.partial_value(FakeEnv(9)) == 9
    assert formula.partial_value() == 0


# --- Rendering and loading ---

def test_render(formula):
    type_in(formula, '2', '+', '(', '3')
    assert formula.render() == (
        '<span class="number">2</span>'
        '<span class="operator">+</span>'
        '<span class="parenthesis">(</span>'
        '<span class="number">3</span>'
    )


def test_text(formula):
    type_in(formula, '2', '+', '3', '=')
    assert formula.text() == '2+3='


def test_load_makes_independent_copy(formula):
    source = [group(num('1'), op('+'), num('2'))]
    formula.load(source)
    formula.tokens[0].tokens[0].append_digit('5')
    assert source == [group(num('1'), op('+'), num('2'))]


def test_clear(formula):
    type_in(formula, '2', '+')
    formula.clear()
    assert formula.tokens == []
    assert formula.partial() == [num('0')]
