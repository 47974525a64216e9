"""
Pytest configuration and shared fixtures for jsonloc tests.

Provides immutable test data fixtures and helpers for checking that value
trees and location trees stay congruent.
"""

from dataclasses import dataclass
from typing import Any

import pytest

import jsonloc
from jsonloc import ErrorKind


@dataclass(frozen=True)
class LocTestCase:
    """
    Immutable container for parser test case data.

    Holds test input and either the expected failure kind and offset or the
    expected decoded value.
    """

    description: str
    input_data: str
    error_kind: ErrorKind | None = None
    error_pos: int = 0
    expected_output: Any = None


def assert_congruent(value: Any, location: Any) -> None:
    """Asserts the location tree mirrors the value tree position by position."""
    if isinstance(value, dict):
        assert isinstance(location, dict)
        assert list(location) == list(value)
        for key in value:
            assert_congruent(value[key], location[key])
    elif isinstance(value, list):
        assert isinstance(location, list)
        assert len(location) == len(value)
        for item, item_location in zip(value, location, strict=True):
            assert_congruent(item, item_location)
    else:
        assert isinstance(location, int)
        assert not isinstance(location, bool)
        assert location >= 1


def _nest(value: Any, depth: int) -> Any:
    for _ in range(depth):
        value = [value]
    return value


@pytest.fixture
def json_fail_cases() -> list[LocTestCase]:
    """
    Provides JSON_checker documents that fail under the location parser.

    Each case names the error kind and the offset of the offending token.
    """
    return [
        LocTestCase(
            "fail2.json", '["Unclosed array"', ErrorKind.UNTERMINATED_ARRAY, 17
        ),
        LocTestCase(
            "fail3.json",
            '{unquoted_key: "keys must be quoted"}',
            ErrorKind.EXPECTED_STRING_KEY,
            1,
        ),
        LocTestCase(
            "fail5.json",
            '["double extra comma",,]',
            ErrorKind.UNEXPECTED_TOKEN,
            22,
        ),
        LocTestCase(
            "fail6.json",
            '[   , "<-- missing value"]',
            ErrorKind.UNEXPECTED_TOKEN,
            4,
        ),
        LocTestCase(
            "fail7.json",
            '["Comma after the close"],',
            ErrorKind.TRAILING_CONTENT,
            25,
        ),
        LocTestCase(
            "fail8.json", '["Extra close"]]', ErrorKind.TRAILING_CONTENT, 15
        ),
        LocTestCase(
            "fail10.json",
            '{"Extra value after close": true} "misplaced quoted value"',
            ErrorKind.TRAILING_CONTENT,
            34,
        ),
        LocTestCase(
            "fail11.json",
            '{"Illegal expression": 1 + 2}',
            ErrorKind.EXPECTED_COMMA_OR_BRACE,
            25,
        ),
        LocTestCase(
            "fail12.json",
            '{"Illegal invocation": alert()}',
            ErrorKind.UNEXPECTED_TOKEN,
            23,
        ),
        LocTestCase(
            "fail14.json",
            '{"Numbers cannot be hex": 0x14}',
            ErrorKind.EXPECTED_COMMA_OR_BRACE,
            27,
        ),
        LocTestCase(
            "fail15.json",
            '["Illegal backslash escape: \\x15"]',
            ErrorKind.INVALID_ESCAPE,
            28,
        ),
        LocTestCase("fail16.json", "[\\naked]", ErrorKind.UNEXPECTED_TOKEN, 1),
        LocTestCase(
            "fail17.json",
            '["Illegal backslash escape: \\017"]',
            ErrorKind.INVALID_ESCAPE,
            28,
        ),
        LocTestCase(
            "fail19.json",
            '{"Missing colon" null}',
            ErrorKind.EXPECTED_COLON,
            17,
        ),
        LocTestCase(
            "fail20.json",
            '{"Double colon":: null}',
            ErrorKind.UNEXPECTED_TOKEN,
            16,
        ),
        LocTestCase(
            "fail21.json",
            '{"Comma instead of colon", null}',
            ErrorKind.EXPECTED_COLON,
            25,
        ),
        LocTestCase(
            "fail22.json",
            '["Colon instead of comma": false]',
            ErrorKind.EXPECTED_COMMA_OR_BRACKET,
            25,
        ),
        LocTestCase(
            "fail23.json",
            '["Bad value", truth]',
            ErrorKind.INVALID_BOOLEAN,
            14,
        ),
        LocTestCase(
            "fail24.json", "['single quote']", ErrorKind.UNEXPECTED_TOKEN, 1
        ),
        LocTestCase(
            "fail28.json",
            '["line\\\nbreak"]',
            ErrorKind.INVALID_ESCAPE,
            6,
        ),
        LocTestCase("fail29.json", "[0e]", ErrorKind.INVALID_NUMBER, 3),
        LocTestCase("fail30.json", "[0e+]", ErrorKind.INVALID_NUMBER, 4),
        LocTestCase("fail31.json", "[0e+-1]", ErrorKind.INVALID_NUMBER, 4),
        LocTestCase(
            "fail32.json",
            '{"Comma instead if closing brace": true,',
            ErrorKind.UNTERMINATED_OBJECT,
            40,
        ),
        LocTestCase(
            "fail33.json",
            '["mismatch"}',
            ErrorKind.EXPECTED_COMMA_OR_BRACKET,
            11,
        ),
    ]


@pytest.fixture
def loose_grammar_cases() -> list[LocTestCase]:
    """
    Provides JSON_checker "fail" documents the location parser accepts.

    The grammar tolerates trailing commas, leading zeros, raw control
    characters inside strings and scalar documents.
    """
    return [
        LocTestCase(
            "fail1.json - scalar document",
            '"A JSON payload should be an object or array, not a string."',
            expected_output=(
                "A JSON payload should be an object or array, not a string."
            ),
        ),
        LocTestCase(
            "fail4.json - trailing comma in array",
            '["extra comma",]',
            expected_output=["extra comma"],
        ),
        LocTestCase(
            "fail9.json - trailing comma in object",
            '{"Extra comma": true,}',
            expected_output={"Extra comma": True},
        ),
        LocTestCase(
            "fail13.json - leading zeros",
            '{"Numbers cannot have leading zeroes": 013}',
            expected_output={"Numbers cannot have leading zeroes": 13.0},
        ),
        LocTestCase(
            "fail18.json - deep nesting",
            "[" * 20 + '"Too deep"' + "]" * 20,
            expected_output=_nest("Too deep", 20),
        ),
        LocTestCase(
            "fail25.json - raw tabs in string",
            '["\ttab\tcharacter\tin\tstring\t"]',
            expected_output=["\ttab\tcharacter\tin\tstring\t"],
        ),
        LocTestCase(
            "fail27.json - raw newline in string",
            '["line\nbreak"]',
            expected_output=["line\nbreak"],
        ),
    ]


@pytest.fixture
def json_pass_cases() -> list[LocTestCase]:
    """
    Provides JSON strings that must parse successfully per JSON specification.
    """
    return [
        LocTestCase(
            description="pass1.json - complex nested structure",
            input_data="""[
    "JSON Test Pattern pass1",
    {"object with 1 member":["array with 1 element"]},
    {},
    [],
    -42,
    true,
    false,
    null,
    {
        "integer": 1234567890,
        "real": -9876.543210,
        "e": 0.123456789e-12,
        "E": 1.234567890E+34,
        "":  23456789012E66,
        "zero": 0,
        "one": 1,
        "space": " ",
        "quote": "\\"",
        "backslash": "\\\\",
        "controls": "\\b\\f\\n\\r\\t",
        "slash": "/ & \\/",
        "alpha": "abcdefghijklmnopqrstuvwyz",
        "ALPHA": "ABCDEFGHIJKLMNOPQRSTUVWYZ",
        "digit": "0123456789",
        "0123456789": "digit",
        "special": "`1~!@#$%^&*()_+-={':[,]}|;.</>?",
        "hex": "\\u0123\\u4567\\u89AB\\uCDEF\\uabcd\\uef4A",
        "true": true,
        "false": false,
        "null": null,
        "array":[  ],
        "object":{  },
        "address": "50 St. James Street",
        "url": "https://www.JSON.org/",
        "comment": "// /* <!-- --",
        "# -- --> */": " ",
        " s p a c e d " :[1,2 , 3

,

4 , 5        ,          6           ,7        ],"compact":[1,2,3,4,5,6,7],
        "jsontext": "{\\"object with 1 member\\":[\\"array with 1 element\\"]}"
    }
]""",
        ),
        LocTestCase(
            description="pass2.json - deep nesting",
            input_data='[[[[[[[[[[[[[[[[[[["Not too deep"]]]]]]]]]]]]]]]]]]]',
        ),
        LocTestCase(
            description="pass3.json - simple object",
            input_data=(
                '{"JSON Test Pattern pass3": {"The outermost value": '
                '"must be an object or array.", "In this test": '
                '"It is an object."}}'
            ),
        ),
    ]


@pytest.fixture
def basic_json_values() -> list[LocTestCase]:
    """
    Provides basic JSON value test cases for fundamental parsing.

    Covers all JSON primitive types and basic container structures.
    """
    return [
        LocTestCase("null value", "null", expected_output=None),
        LocTestCase("true boolean", "true", expected_output=True),
        LocTestCase("false boolean", "false", expected_output=False),
        LocTestCase("integer", "42", expected_output=42.0),
        LocTestCase("negative integer", "-17", expected_output=-17.0),
        LocTestCase("float", "3.14", expected_output=3.14),
        LocTestCase("empty string", '""', expected_output=""),
        LocTestCase("simple string", '"hello"', expected_output="hello"),
        LocTestCase("empty array", "[]", expected_output=[]),
        LocTestCase("empty object", "{}", expected_output={}),
        LocTestCase(
            "simple array", "[1, 2, 3]", expected_output=[1.0, 2.0, 3.0]
        ),
        LocTestCase(
            "simple object",
            '{"key": "value"}',
            expected_output={"key": "value"},
        ),
    ]


@pytest.fixture
def nested_document() -> str:
    """The nested document used to check line attribution."""
    return """{
  "a": {
    "b": {
      "c": {}
    },
    "b1": [
        "01",
        "02"
    ]
  }
}"""


@pytest.fixture
def parse_nested(nested_document: str) -> jsonloc.ParseResult:
    return jsonloc.parse(nested_document)
