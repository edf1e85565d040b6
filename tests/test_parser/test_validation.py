from datetime import timedelta

import pytest

from clauseflags.exceptions import ValidationError
from clauseflags.parser import ClauseParser, CommandBuilder


def noop(result):
    return None


@pytest.fixture
def required_local_parser():
    root = (
        CommandBuilder("tool", handler=noop)
        .add_flag("-field", required=True)
        .add_flag("-limit", type="int")
        .build()
    )
    return ClauseParser(root)


def test_required_local_flag_satisfied_in_first_clause_only(required_local_parser):
    result = required_local_parser.parse(["-field", "name", "+", "-limit", "2"])

    assert result.clauses[0].get("-field") == "name"
    assert "-field" not in result.clauses[1]


def test_required_local_flag_satisfied_in_last_clause_only(required_local_parser):
    result = required_local_parser.parse(["-limit", "1", "+", "-limit", "2", "+", "-field", "x"])

    assert len(result.clauses) == 3
    assert result.clauses[2].get("-field") == "x"


def test_required_local_flag_missing_from_every_clause(required_local_parser):
    with pytest.raises(ValidationError) as exc_info:
        required_local_parser.parse(["-limit", "1", "+", "-limit", "2"])

    assert exc_info.value.flag == "-field"
    assert exc_info.value.message == "required flag not provided in any clause"


def test_required_global_flag_missing():
    root = (
        CommandBuilder("tool", handler=noop)
        .add_flag("-input", scope="global", required=True)
        .build()
    )

    with pytest.raises(ValidationError, match="required flag not provided"):
        ClauseParser(root).parse([])


def test_validate_false_skips_required_checks(required_local_parser):
    result = required_local_parser.parse(["-limit", "1"], validate=False)

    assert result.clauses[0].get("-limit") == 1


def test_defaults_fill_unset_slots():
    root = (
        CommandBuilder("tool", handler=noop)
        .add_flag("-format", scope="global", default="json")
        .add_flag("-limit", type="int", default=10)
        .add_flag("-tag", accumulate=True, default="all")
        .build()
    )

    result = ClauseParser(root).parse(["-limit", "3", "+"])

    assert result.get("-format") == "json"
    assert [clause.get("-limit") for clause in result.clauses] == [3, 10]
    assert result.clauses[0].get("-tag") == ["all"]


def test_validator_rejection_reports_clause():
    def positive(value):
        if value <= 0:
            raise ValueError("must be positive")

    root = (
        CommandBuilder("tool", handler=noop)
        .add_flag("-limit", type="int", validator=positive)
        .build()
    )

    with pytest.raises(ValidationError) as exc_info:
        ClauseParser(root).parse(["-limit", "5", "+", "-limit", "0"])

    assert exc_info.value.flag == "-limit"
    assert exc_info.value.clause_index == 1
    assert str(exc_info.value) == "validation failed for -limit (clause 1): must be positive"


def test_validator_sees_plain_values():
    seen = []
    root = (
        CommandBuilder("tool", handler=noop)
        .add_flag("-timeout", type="duration", scope="global", validator=seen.append)
        .build()
    )

    ClauseParser(root).parse(["-timeout", "1m30s"])

    assert seen == [timedelta(minutes=1, seconds=30)]
