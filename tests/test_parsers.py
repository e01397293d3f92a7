import pytest
from caixa.adapters.parsers import parse_data, parse_item_spec, parse_valor

@pytest.mark.parametrize(
    "txt,expected",
    [
        ("10", 10.0),
        ("12,50", 12.5),
        ("12.5", 12.5),
        ("$ 1.234,56", 1234.56),
        ("1,234.56", 1234.56),
        ("R$ 1.000", 1000.0),
        (7, 7.0),
        ("abc", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_valor(txt, expected):
    assert parse_valor(txt) == expected


@pytest.mark.parametrize(
    "txt,expected",
    [
        ("2026-01-31", "2026-01-31"),
        ("2026-1-5", "2026-01-05"),
        ("2026-01-31T23:59:00Z", "2026-01-31"),
        ("31/01/2026", "2026-01-31"),
        ("5/1/26", "2026-01-05"),
        ("31/02/2026", None),
        ("ontem", None),
        (None, None),
    ],
)
def test_parse_data(txt, expected):
    assert parse_data(txt) == expected


@pytest.mark.parametrize(
    "txt,expected",
    [
        ("p1", ("p1", 1)),
        ("p2:3", ("p2", 3)),
        (" p3 : 2 ", ("p3", 2)),
        (":3", (None, 3)),
    ],
)
def test_parse_item_spec(txt, expected):
    assert parse_item_spec(txt) == expected


@pytest.mark.parametrize("txt", ["p1:0", "p1:-2", "p1:x"])
def test_parse_item_spec_invalid(txt):
    with pytest.raises(ValueError):
        parse_item_spec(txt)
