# tests/test_protocol.py

from __future__ import annotations

import json

import pytest

from todo_assistant.core.protocol import (
    ActionDirective,
    ObservationDirective,
    OutputDirective,
    PlanDirective,
    encode_observation,
    parse_directives,
    parse_line,
)
from todo_assistant.errors import ParseError


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ('{"type":"plan","plan":"look up todos"}', PlanDirective(plan="look up todos")),
        (
            '{"type":"action","function":"createTodo","input":"buy groceries"}',
            ActionDirective(function="createTodo", input="buy groceries"),
        ),
        ('{"type":"observation","observation":[{"id":1}]}', ObservationDirective(observation=[{"id": 1}])),
        ('{"type":"output","output":"Added your task!"}', OutputDirective(output="Added your task!")),
        ('  { "type": "output", "output": "spaced" }  ', OutputDirective(output="spaced")),
    ],
)
def test_valid_lines_decode_into_tagged_directives(line: str, expected: object) -> None:
    assert parse_line(line) == expected


def test_action_input_defaults_and_non_string_input_is_json_encoded() -> None:
    assert parse_line('{"type":"action","function":"getAllTodos"}') == ActionDirective("getAllTodos", "")
    assert parse_line('{"type":"action","function":"deleteTodo","input":3}') == ActionDirective("deleteTodo", "3")


def test_blank_lines_and_start_marker_are_skipped() -> None:
    text = '\nSTART\n   \n{"type":"output","output":"hi"}\n'
    assert list(parse_directives(text)) == [OutputDirective("hi")]


def test_malformed_lines_do_not_stop_the_rest_of_the_blob() -> None:
    text = "\n".join(
        [
            '{"type":"plan","plan":"p"}',
            "Sure! Here is what I will do:",
            '{"type":"action","function":"createTodo","input":"x"',
            '{"plan":"no type here"}',
            "[1, 2, 3]",
            '{"type":"output","output":"done"}',
        ]
    )
    items = list(parse_directives(text))

    directives = [i for i in items if not isinstance(i, ParseError)]
    errors = [i for i in items if isinstance(i, ParseError)]

    assert directives == [PlanDirective("p"), OutputDirective("done")]
    assert [e.lineno for e in errors] == [2, 3, 4, 5]
    assert errors[2].reason == "missing type"


def test_unknown_type_is_skipped_without_error() -> None:
    text = '{"type":"user","user":"what are my todos?"}\n{"type":"output","output":"ok"}'
    assert list(parse_directives(text)) == [OutputDirective("ok")]


def test_action_without_function_is_a_parse_error() -> None:
    item = parse_line('{"type":"action","input":"x"}', lineno=7)
    assert isinstance(item, ParseError)
    assert item.lineno == 7
    assert "function" in str(item)


def test_parse_directives_is_lazy() -> None:
    gen = parse_directives('{"type":"output","output":"a"}\nnot json')
    assert next(gen) == OutputDirective("a")
    assert isinstance(next(gen), ParseError)
    with pytest.raises(StopIteration):
        next(gen)


def test_encode_observation_is_one_json_line() -> None:
    line = encode_observation(7)
    assert "\n" not in line
    assert json.loads(line) == {"type": "observation", "observation": 7}

    rows = [{"id": 1, "todo": "Buy milk"}]
    assert json.loads(encode_observation(rows))["observation"] == rows
    assert json.loads(encode_observation(None))["observation"] is None
