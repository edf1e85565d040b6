import pytest

from clauseflags.exceptions import ParseError
from clauseflags.parser import ClauseParser, CommandBuilder, boolean_polarity


def noop(result):
    return None


def build_datatool(**kwargs):
    builder = CommandBuilder("datatool", handler=noop, **kwargs)
    builder.add_flag("-input", "-i", scope="global")
    builder.add_flag("-verbose", "-v", boolean=True, scope="global")
    builder.add_flag("-filter", args=["FIELD", "OPERATOR", "VALUE"], accumulate=True)
    builder.add_flag("-limit", type="int")
    builder.add_flag("-sort")
    return builder.build()


@pytest.fixture
def parser():
    return ClauseParser(build_datatool())


@pytest.mark.parametrize("separators", [0, 1, 2, 5])
def test_k_separators_yield_k_plus_one_clauses(parser, separators):
    args = ["-limit", "0"]
    for index in range(1, separators + 1):
        args += ["+" if index % 2 else "-", "-limit", str(index)]

    result = parser.parse(args)

    assert len(result.clauses) == separators + 1
    assert [clause.get("-limit") for clause in result.clauses] == list(
        range(separators + 1)
    )


def test_clause_separators_recorded(parser):
    result = parser.parse(["-sort", "a", "+", "-sort", "b", "-", "-sort", "c"])

    assert [clause.separator for clause in result.clauses] == ["", "+", "-"]
    assert [clause.get("-sort") for clause in result.clauses] == ["a", "b", "c"]


def test_empty_input_has_one_clause(parser):
    result = parser.parse([])

    assert len(result.clauses) == 1
    assert result.clauses[0].values == {}
    assert result.residual == []


def test_accumulate_records_in_supply_order(parser):
    result = parser.parse(
        ["-filter", "a", "eq", "1", "-filter", "b", "ne", "2", "-filter", "c", "gt", "3"]
    )

    filters = result.clauses[0].get("-filter")
    assert filters == [
        {"FIELD": "a", "OPERATOR": "eq", "VALUE": "1"},
        {"FIELD": "b", "OPERATOR": "ne", "VALUE": "2"},
        {"FIELD": "c", "OPERATOR": "gt", "VALUE": "3"},
    ]
    assert all(list(record) == ["FIELD", "OPERATOR", "VALUE"] for record in filters)


def test_filters_split_across_clauses(parser):
    result = parser.parse(["-filter", "a", "eq", "1", "+", "-filter", "b", "eq", "2"])

    assert len(result.clauses) == 2
    assert result.clauses[0].get("-filter") == [
        {"FIELD": "a", "OPERATOR": "eq", "VALUE": "1"}
    ]
    assert result.clauses[1].get("-filter") == [
        {"FIELD": "b", "OPERATOR": "eq", "VALUE": "2"}
    ]
    assert result.local_values("-filter") == [
        [{"FIELD": "a", "OPERATOR": "eq", "VALUE": "1"}],
        [{"FIELD": "b", "OPERATOR": "eq", "VALUE": "2"}],
    ]


def test_global_flag_in_later_clause_is_global(parser):
    result = parser.parse(["-limit", "1", "+", "-input", "data.csv"])

    assert result.get("-input") == "data.csv"
    assert "-input" not in result.clauses[1]
    assert result.clauses[1].values == {}


def test_alias_stores_under_canonical_name(parser):
    result = parser.parse(["-i", "data.csv", "-v"])

    assert result.get("-input") == "data.csv"
    assert result.get("-verbose") is True


def test_repeated_scalar_flag_keeps_last(parser):
    result = parser.parse(["-sort", "name", "-sort", "age"])

    assert result.clauses[0].get("-sort") == "age"


def test_inverted_flag_with_identity_polarity(parser):
    result = parser.parse(["+verbose", "+sort", "name"])

    assert result.get("-verbose") is True
    assert result.clauses[0].get("-sort") == "name"


def test_inverted_boolean_with_boolean_polarity():
    parser = ClauseParser(build_datatool(polarity_handler=boolean_polarity))

    assert parser.parse(["+verbose"]).get("-verbose") is False
    assert parser.parse(["-verbose"]).get("-verbose") is True


def test_polarity_handler_receives_flag_spec():
    seen = []

    def negate_limit(spec, inverted, value):
        seen.append((spec.name, spec.scope.value, inverted))
        if inverted and spec.name == "-limit":
            return -value.payload
        return value

    parser = ClauseParser(build_datatool(polarity_handler=negate_limit))
    result = parser.parse(["+limit", "3", "-verbose"])

    assert result.clauses[0].get("-limit") == -3
    assert result.get("-verbose") is True
    assert ("-limit", "local", True) in seen
    assert ("-verbose", "global", False) in seen


def test_residual_after_end_of_flags(parser):
    result = parser.parse(["-limit", "2", "--", "-limit", "+", "x"])

    assert result.residual == ["-limit", "+", "x"]
    assert len(result.clauses) == 1
    assert result.clauses[0].get("-limit") == 2


def test_bare_tokens_are_leftovers(parser):
    result = parser.parse(["alpha", "-limit", "3", "beta", "+", "gamma"])

    assert result.clauses[0].leftovers == ["alpha", "beta"]
    assert result.clauses[1].leftovers == ["gamma"]


def test_negative_number_is_bare_token(parser):
    result = parser.parse(["-5", "-limit", "-7"])

    assert result.clauses[0].leftovers == ["-5"]
    assert result.clauses[0].get("-limit") == -7


def test_custom_separators():
    parser = ClauseParser(build_datatool(separators=["and", "or"]))

    result = parser.parse(["-sort", "a", "or", "-sort", "b", "+"])

    assert [clause.separator for clause in result.clauses] == ["", "or"]
    assert result.clauses[1].leftovers == ["+"]


def test_unknown_flag_raises(parser):
    with pytest.raises(ParseError) as exc_info:
        parser.parse(["-nope"])

    assert exc_info.value.flag == "-nope"
    assert str(exc_info.value) == "flag -nope: unknown flag"


def test_missing_flag_arguments_raise(parser):
    with pytest.raises(ParseError, match="requires 3 argument"):
        parser.parse(["-filter", "a", "eq"])


def test_conversion_failure_names_flag(parser):
    with pytest.raises(ParseError) as exc_info:
        parser.parse(["-limit", "ten"])

    assert exc_info.value.flag == "-limit"
    assert "invalid argument" in exc_info.value.message


def test_raw_args_kept(parser):
    args = ["-limit", "1", "+", "-limit", "2"]

    result = parser.parse(args)

    assert result.raw_args == args
    assert result.command_path == ("datatool",)
