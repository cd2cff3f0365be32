"""Unit tests for the dice expression parser."""

import pytest

from dicer.errors import DiceError, ErrorKind, ParseError
from dicer.parser import (
    Level,
    find_first_free_opt,
    parse,
    parse_expr,
    parse_modifier,
    parse_obj,
    parse_operator,
    parse_roll,
)
from dicer.tree import (
    Constant,
    Expression,
    Group,
    Modifier,
    ModifierKind,
    Operator,
    Roll,
    walk,
)


def _kind(text: str) -> ErrorKind:
    with pytest.raises(DiceError) as info:
        parse(text)
    return info.value.kind


class TestFindFirstFreeOpt:
    def test_finds_first_additive_operator(self) -> None:
        assert find_first_free_opt("1+2-3", 5, "()+-") == 1

    def test_skips_operators_inside_parens(self) -> None:
        assert find_first_free_opt("(1+2)-3", 7, "()+-") == 5

    def test_not_found(self) -> None:
        assert find_first_free_opt("(1+2)", 5, "()+-") is None

    def test_multiplicative_set_ignores_additive(self) -> None:
        assert find_first_free_opt("2+3*4", 5, "()*/") == 3

    def test_respects_length(self) -> None:
        assert find_first_free_opt("12+3", 2, "()+-") is None

    def test_close_without_open(self) -> None:
        with pytest.raises(ParseError) as info:
            find_first_free_opt("1)+(2", 5, "()+-")
        assert info.value.kind is ErrorKind.mismatched_parentheses

    def test_unclosed_paren(self) -> None:
        with pytest.raises(ParseError) as info:
            find_first_free_opt("(1*2", 4, "()*/")
        assert info.value.kind is ErrorKind.mismatched_parentheses


class TestParseOperator:
    @pytest.mark.parametrize(
        "ch,op",
        [("+", Operator.plus), ("-", Operator.minus), ("*", Operator.times), ("/", Operator.divide)],
    )
    def test_known(self, ch: str, op: Operator) -> None:
        assert parse_operator(ch) is op

    def test_paren_is_not_an_operator(self) -> None:
        with pytest.raises(ParseError) as info:
            parse_operator("(")
        assert info.value.kind is ErrorKind.unknown_operator


class TestParseModifier:
    @pytest.mark.parametrize(
        "text,kind",
        [
            ("c2", ModifierKind.choose_highest),
            ("w2", ModifierKind.choose_lowest),
            ("b2", ModifierKind.reroll_below),
            ("v2", ModifierKind.explode_above),
        ],
    )
    def test_kinds(self, text: str, kind: ModifierKind) -> None:
        assert parse_modifier(text, len(text)) == Modifier(kind=kind, value=2)

    def test_multi_digit(self) -> None:
        assert parse_modifier("c12", 3).value == 12

    def test_unknown_letter(self) -> None:
        with pytest.raises(ParseError) as info:
            parse_modifier("k3", 2)
        assert info.value.kind is ErrorKind.unknown_modifier

    def test_missing_constant(self) -> None:
        with pytest.raises(ParseError) as info:
            parse_modifier("c", 1)
        assert info.value.kind is ErrorKind.missing_modifier_constant

    def test_non_digit_constant(self) -> None:
        with pytest.raises(ParseError) as info:
            parse_modifier("c2x", 3)
        assert info.value.kind is ErrorKind.invalid_constant


class TestParseRoll:
    def test_simple(self) -> None:
        assert parse_roll("3d6", 3) == Roll(count=3, sides=6)

    def test_with_modifier(self) -> None:
        assert parse_roll("4d6c3", 5) == Roll(4, 6, Modifier(ModifierKind.choose_highest, 3))

    def test_length_bounds_the_span(self) -> None:
        assert parse_roll("2d10 junk", 4) == Roll(count=2, sides=10)

    def test_no_delimiter(self) -> None:
        with pytest.raises(ParseError) as info:
            parse_roll("36x", 3)
        assert info.value.kind is ErrorKind.missing_delimiter

    def test_delimiter_past_length(self) -> None:
        with pytest.raises(ParseError) as info:
            parse_roll("3xd6", 2)
        assert info.value.kind is ErrorKind.missing_delimiter

    def test_missing_count(self) -> None:
        with pytest.raises(ParseError) as info:
            parse_roll("d6", 2)
        assert info.value.kind is ErrorKind.empty_constant

    def test_missing_sides_before_modifier(self) -> None:
        with pytest.raises(ParseError) as info:
            parse_roll("4dc3", 4)
        assert info.value.kind is ErrorKind.empty_constant

    def test_modifier_checked_before_constants(self) -> None:
        with pytest.raises(ParseError) as info:
            parse_roll("d6c", 3)
        assert info.value.kind is ErrorKind.missing_modifier_constant

    def test_zero_sides(self) -> None:
        with pytest.raises(ParseError) as info:
            parse_roll("2d0", 3)
        assert info.value.kind is ErrorKind.invalid_constant

    def test_zero_count(self) -> None:
        with pytest.raises(ParseError) as info:
            parse_roll("0d6", 3)
        assert info.value.kind is ErrorKind.invalid_constant


class TestParseObj:
    def test_constant(self) -> None:
        assert parse_obj("42", 2) == Constant(42)

    def test_group(self) -> None:
        obj = parse_obj("(1+2)", 5)
        assert isinstance(obj, Group)
        assert str(obj) == "(1+2)"

    def test_group_without_close(self) -> None:
        with pytest.raises(ParseError) as info:
            parse_obj("(1+2)3", 6)
        assert info.value.kind is ErrorKind.mismatched_parentheses

    def test_empty_group(self) -> None:
        with pytest.raises(ParseError) as info:
            parse_obj("()", 2)
        assert info.value.kind is ErrorKind.empty_operand

    def test_roll(self) -> None:
        assert parse_obj("1d20", 4) == Roll(count=1, sides=20)


class TestParseExpr:
    def test_singlet_constant(self) -> None:
        expr = parse_expr("7", 1, Level.multiplicative)
        assert expr == Expression(obj=Constant(7))
        assert expr.is_singlet

    def test_additive_left_is_multiplicative_expression(self) -> None:
        expr = parse_expr("2*3+4", 5, Level.additive)
        assert expr.op is Operator.plus
        assert expr.obj is None
        assert expr.left.op is Operator.times
        assert expr.left.obj == Constant(2)

    def test_multiplicative_left_is_operand(self) -> None:
        expr = parse_expr("2*3*4", 5, Level.multiplicative)
        assert expr.left is None
        assert expr.obj == Constant(2)
        assert expr.right.obj == Constant(3)

    def test_same_precedence_groups_right(self) -> None:
        expr = parse("1-2-3")
        assert expr.op is Operator.minus
        assert expr.right.op is Operator.minus
        assert str(expr.right) == "2-3"

    def test_precedence(self) -> None:
        expr = parse("2+3*4")
        assert expr.op is Operator.plus
        assert expr.right.left.op is Operator.times

    def test_zero_length(self) -> None:
        with pytest.raises(ParseError) as info:
            parse_expr("1+2", 0, Level.additive)
        assert info.value.kind is ErrorKind.empty_operand


class TestParse:
    @pytest.mark.parametrize(
        "text",
        ["3d6+2", "(1d20c1)*2", "4d6b2", "1d6v6", "4d6w1", "(2+3)*4", "1-2-3", "10/(2*1d4)"],
    )
    def test_renders_back(self, text: str) -> None:
        assert str(parse(text)) == text

    def test_rendered_tree_parses_equal(self) -> None:
        tree = parse("((1d6+2)*3)-4d8c2/2")
        assert parse(str(tree)) == tree

    def test_length_limits_expression(self) -> None:
        assert parse("3d6 1d4", 3) == parse("3d6")

    def test_node_count(self) -> None:
        # +, left term, Roll, right expr, its term, Constant
        assert len(list(walk(parse("3d6+2")))) == 6

    def test_modifier_node_counted(self) -> None:
        nodes = list(walk(parse("4d6c3")))
        assert Modifier(ModifierKind.choose_highest, 3) in nodes

    def test_unbalanced_open(self) -> None:
        assert _kind("(1+2") is ErrorKind.mismatched_parentheses

    def test_unbalanced_close(self) -> None:
        assert _kind("1+2)") is ErrorKind.mismatched_parentheses

    def test_adjacent_groups(self) -> None:
        assert _kind("(1)(2)") is ErrorKind.mismatched_parentheses

    def test_missing_count(self) -> None:
        assert _kind("d6") is ErrorKind.empty_constant

    def test_missing_sides(self) -> None:
        assert _kind("3d") is ErrorKind.empty_constant

    def test_garbled_sides(self) -> None:
        assert _kind("3dX") is ErrorKind.invalid_constant

    def test_no_delimiter(self) -> None:
        assert _kind("3x6") is ErrorKind.missing_delimiter

    def test_unknown_modifier_is_not_a_modifier(self) -> None:
        # 'k' is not a modifier letter, so it is part of the sides text.
        assert _kind("4d6k3") is ErrorKind.invalid_constant

    def test_dangling_operator(self) -> None:
        assert _kind("1+") is ErrorKind.empty_operand

    def test_leading_operator(self) -> None:
        assert _kind("-3") is ErrorKind.empty_operand

    def test_empty(self) -> None:
        assert _kind("") is ErrorKind.empty_operand

    def test_error_message(self) -> None:
        with pytest.raises(DiceError, match="Mismatched parentheses."):
            parse("(1")

    def test_too_deep_is_allocation_failure(self) -> None:
        text = "(" * 5000 + "1" + ")" * 5000
        assert _kind(text) is ErrorKind.allocation_failure
