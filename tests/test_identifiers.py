import pytest

from dbinspector.errors.codes import ErrorCode
from dbinspector.errors.exceptions import InvalidIdentifierError
from dbinspector.identifiers import quote_identifier, validate_identifier


@pytest.mark.parametrize(
    "name, quoted",
    [
        ("users", '"users"'),
        ("select", '"select"'),
        ("my table", '"my table"'),
        ('a"b', '"a""b"'),
        ("naïve", '"naïve"'),
    ],
)
def test_quote_identifier(name, quoted):
    assert quote_identifier(name) == quoted


@pytest.mark.parametrize("bad", ["", "a\x00b", None, 5])
def test_invalid_identifiers_are_rejected(bad):
    with pytest.raises(InvalidIdentifierError) as excinfo:
        validate_identifier(bad, kind="table name")
    assert excinfo.value.code == ErrorCode.INVALID_IDENTIFIER
    assert "table name" in excinfo.value.message


def test_invalid_identifier_is_a_value_error():
    with pytest.raises(ValueError):
        quote_identifier("")
