"""Shared test fixtures for styleguard tests."""

import pytest

from styleguard.config import CheckerConfig


def _c_function(
    name="process_readings",
    body_lines=None,
    params="int first, int second",
    leading_comment="/* Combine two sensor readings. */",
):
    """Build a C function; ``body_lines`` are placed verbatim between the braces."""
    lines = []
    if leading_comment:
        lines.append(leading_comment)
    lines.append(f"int {name}({params}) {{")
    lines.extend(body_lines or [])
    lines.append("}")
    return "\n".join(lines) + "\n"


def _filler(count, statement="    total = total + 1;"):
    """``count`` identical statement lines."""
    return [statement] * count


@pytest.fixture
def config():
    """Default configuration."""
    return CheckerConfig()


@pytest.fixture
def scenario_a_source():
    """No assertions, 100-line body, compound if, while (true) without exemption."""
    body = [
        "    int total = 0;",
        "    if (first && second) {",
        "        total = 1;",
        "    }",
        "    while (true) {",
        "        total = total + 1;",
        "    }",
    ]
    body += _filler(100 - len(body))
    return _c_function(body_lines=body)


@pytest.fixture
def scenario_b_source():
    """Two assertions, 10-line body, simple conditions, literally bounded for loop."""
    body = [
        "    assert(values != NULL);",
        "    assert(size >= 0);",
        "    int sum = 0;",
        "    for (int index = 0; index < 10; index++) {",
        "        sum += values[index];",
        "    }",
        "    if (sum > size) {",
        "        sum = size;",
        "    }",
        "    return sum;",
    ]
    return _c_function(name="sum_values", params="const int *values, int size", body_lines=body)


@pytest.fixture
def scenario_c_source():
    """An unbounded loop carrying the event-loop exemption marker."""
    body = [
        "    assert(queue != NULL);",
        "    assert(limit > 0);",
        "    // intentional event loop: runs until power-off",
        "    while (1) {",
        "        dispatch(queue);",
        "    }",
    ]
    return _c_function(name="run_dispatcher", params="struct queue *queue, int limit", body_lines=body)


@pytest.fixture
def source_tree(tmp_path, scenario_a_source, scenario_b_source):
    """Two C files in a temporary directory."""
    (tmp_path / "alpha.c").write_text(scenario_a_source)
    (tmp_path / "beta.c").write_text(scenario_b_source)
    return tmp_path


@pytest.fixture
def make_c_function():
    """Factory for C function sources."""
    return _c_function


@pytest.fixture
def filler():
    """Factory for repeated body statements."""
    return _filler
