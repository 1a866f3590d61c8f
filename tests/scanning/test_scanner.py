"""Tests for scanning/scanner.py - masking, function boundaries and facts."""

import pytest

from styleguard.config import CheckerConfig
from styleguard.exceptions import ErrorCode
from styleguard.scanning import scan


def _only_function(unit):
    assert len(unit.functions) == 1
    return unit.functions[0]


class TestDeterminism:
    def test_same_input_same_unit(self, scenario_a_source):
        assert scan(scenario_a_source, "a.c") == scan(scenario_a_source, "a.c")

    def test_bytes_and_str_agree(self, scenario_b_source):
        assert scan(scenario_b_source.encode(), "b.c") == scan(scenario_b_source, "b.c")

    def test_crlf_normalized(self, scenario_b_source):
        crlf = scenario_b_source.replace("\n", "\r\n")
        assert scan(crlf, "b.c") == scan(scenario_b_source, "b.c")


class TestMasking:
    def test_keywords_in_comments_ignored(self):
        src = "int f(void) {\n    // while (1) { assert(x); }\n    return 0;\n}\n"
        fn = _only_function(scan(src, "x.c"))
        assert fn.loops == ()
        assert fn.assertions == ()

    def test_braces_in_strings_ignored(self):
        src = 'int f(void) {\n    puts("}}} {");\n    return 0;\n}\nint g(void) {\n    return 1;\n}\n'
        unit = scan(src, "x.c")
        assert [fn.name for fn in unit.functions] == ["f", "g"]
        assert not unit.partial

    def test_comment_lines_recorded(self):
        src = "/* one\n   two */\nint f(void) {\n    return 0; // trailing\n}\n"
        unit = scan(src, "x.c")
        assert {1, 2, 4} <= unit.comment_lines

    def test_preprocessor_lines_masked(self):
        src = "#define LOOP while (1) {\nint f(void) {\n    return 0;\n}\n"
        unit = scan(src, "x.c")
        assert [fn.name for fn in unit.functions] == ["f"]
        assert unit.functions[0].loops == ()

    def test_escaped_quote_does_not_end_string(self):
        src = 'int f(void) {\n    puts("a \\" { b");\n    return 0;\n}\n'
        unit = scan(src, "x.c")
        assert not unit.partial
        assert unit.functions[0].end_line == 4


class TestFunctionBoundaries:
    def test_brace_function_lines(self):
        src = "int add(int a, int b) {\n    int sum = a + b;\n\n    return sum;\n}\n"
        fn = _only_function(scan(src, "x.c"))
        assert fn.name == "add"
        assert (fn.start_line, fn.end_line) == (1, 5)
        assert fn.body_line_count == 2

    def test_header_on_several_lines(self):
        src = "static int\nlong_name(int a,\n          int b)\n{\n    return a;\n}\n"
        fn = _only_function(scan(src, "x.c"))
        assert fn.name == "long_name"
        assert fn.start_line == 2

    def test_control_blocks_are_not_functions(self):
        src = "struct point {\n    int x;\n};\nint f(void) {\n    if (x) {\n        y();\n    }\n}\n"
        unit = scan(src, "x.c")
        assert [fn.name for fn in unit.functions] == ["f"]

    def test_nested_functions_belong_to_outer(self):
        src = (
            "function outer() {\n"
            "    function inner() {\n"
            "        while (true) {}\n"
            "    }\n"
            "}\n"
        )
        fn = _only_function(scan(src, "x.js"))
        assert fn.name == "outer"
        assert len(fn.loops) == 1

    def test_java_methods_inside_class(self):
        src = (
            "@Entity\n"
            "public class Account {\n"
            "    public int balance(int amount) throws IOException {\n"
            "        return amount;\n"
            "    }\n"
            "}\n"
        )
        fn = _only_function(scan(src, "Account.java"))
        assert fn.name == "balance"

    def test_go_function_after_package_clause(self):
        src = 'package main\n\nimport "fmt"\n\nfunc main() {\n\tfmt.Println("x")\n}\n'
        fn = _only_function(scan(src, "main.go"))
        assert fn.name == "main"
        assert fn.start_line == 5

    def test_arrow_function_assignment(self):
        src = "const handleClick = (event) => {\n    return event;\n};\n"
        fn = _only_function(scan(src, "x.js"))
        assert fn.name == "handleClick"

    def test_python_functions(self):
        src = (
            "class Reader:\n"
            "    def read(self, size):\n"
            "        return size\n"
            "\n"
            "\n"
            "def main():\n"
            "    def helper():\n"
            "        pass\n"
            "    return helper()\n"
        )
        unit = scan(src, "reader.py")
        assert [(fn.name, fn.start_line, fn.end_line) for fn in unit.functions] == [
            ("read", 2, 3),
            ("main", 6, 9),
        ]

    def test_python_string_closing_at_column_zero(self):
        src = (
            "def build_query(table):\n"
            '    sql = """\n'
            "SELECT *\n"
            "FROM readings\n"
            '"""\n'
            "    assert table\n"
            "    assert sql\n"
            "    while True:\n"
            "        pass\n"
        )
        fn = _only_function(scan(src, "query.py"))
        assert (fn.start_line, fn.end_line) == (1, 9)
        assert fn.body_line_count == 8
        assert len(fn.assertions) == 2
        assert [loop.bounded for loop in fn.loops] == [False]

    def test_python_multiline_signature(self):
        src = "def combine(first,\n            second):\n    return first\n"
        fn = _only_function(scan(src, "x.py"))
        assert fn.body_line_count == 1
        assert [i.name for i in fn.identifiers if i.kind == "parameter"] == ["first", "second"]


class TestDiagnostics:
    def test_unterminated_block(self):
        unit = scan("int f(void) {\n    return 0;\n", "x.c")
        assert unit.partial
        assert [d.code for d in unit.diagnostics] == [ErrorCode.SG100]
        fn = _only_function(unit)
        assert fn.truncated
        assert fn.end_line == 2

    def test_unmatched_closing_brace(self):
        unit = scan("int f(void) {\n}\n}\n", "x.c")
        assert [d.code for d in unit.diagnostics] == [ErrorCode.SG101]
        assert unit.diagnostics[0].line == 3

    def test_unterminated_comment(self):
        unit = scan("int f(void) {\n}\n/* never closed\n", "x.c")
        assert ErrorCode.SG103 in [d.code for d in unit.diagnostics]

    def test_unterminated_string(self):
        unit = scan('int f(void) {\n    puts("oops);\n}\n', "x.c")
        assert ErrorCode.SG104 in [d.code for d in unit.diagnostics]
        # the string ends at the newline, structure survives
        assert unit.functions[0].end_line == 3

    def test_nesting_limit(self):
        config = CheckerConfig(max_nesting_depth=4)
        src = "int f(void) {\n" + "{\n" * 10 + "}\n" * 10 + "}\n"
        unit = scan(src, "x.c", config=config)
        codes = [d.code for d in unit.diagnostics]
        assert codes == [ErrorCode.SG102]
        assert unit.functions[0].end_line == 22

    def test_deep_nesting_does_not_raise(self):
        src = "{" * 100000 + "}" * 100000
        unit = scan(src, "x.c")
        assert unit.partial

    def test_undecodable_bytes(self):
        unit = scan(b"int f(void) {\n    return 0; \xff\xfe\n}\n", "x.c")
        assert [d.code for d in unit.diagnostics] == [ErrorCode.SG105]
        assert len(unit.functions) == 1

    @pytest.mark.parametrize("text", ["", "\n", "}", "{", "((((", '"', "/*", "def", "\x00\x01"])
    def test_garbage_input_is_total(self, text):
        unit = scan(text, "x.c")
        assert unit.path == "x.c"


class TestAssertions:
    def test_counts_assert_markers(self):
        src = (
            "int f(int value) {\n"
            "    assert(value > 0);\n"
            "    ASSERT_TRUE(value);\n"
            "    static_assert(sizeof(int) == 4, \"x\");\n"
            "    my_assert(value);\n"
            "    reassert(value);\n"
            "    return value;\n"
            "}\n"
        )
        fn = _only_function(scan(src, "x.c"))
        assert fn.assertion_count == 4
        assert [site.line for site in fn.assertions] == [2, 3, 4, 5]

    def test_python_assert_statement(self):
        src = "def check(value):\n    assert value\n    assert(value)\n    self.assertEqual(value, 1)\n"
        fn = _only_function(scan(src, "x.py"))
        assert fn.assertion_count == 3

    def test_custom_markers(self):
        config = CheckerConfig(assertion_markers=("require",))
        src = "int f(int value) {\n    require(value);\n    assert(value);\n}\n"
        fn = _only_function(scan(src, "x.c", config=config))
        assert [site.marker for site in fn.assertions] == ["require"]


class TestLoops:
    @pytest.mark.parametrize(
        "loop, bounded",
        [
            ("for (int i = 0; i < 10; i++) {}", True),
            ("for (int i = n; i >= 0; i--) {}", True),
            ("for (;;) {}", False),
            ("for (int i = 0; ; i++) {}", False),
            ("while (count <= limit) {}", True),
            ("while (1) {}", False),
            ("while (true) {}", False),
            ("while (node != NULL) {}", False),
            ("for (auto item : items) {}", True),
            ("do { step(); } while (retries < 3);", True),
            ("do { step(); } while (1);", False),
        ],
    )
    def test_c_family(self, loop, bounded):
        src = f"void f(void) {{\n    {loop}\n}}\n"
        fn = _only_function(scan(src, "x.cpp"))
        assert len(fn.loops) == 1
        assert fn.loops[0].bounded is bounded

    def test_do_while_reported_on_do_line(self):
        src = "void f(void) {\n    do {\n        step();\n    } while (1);\n}\n"
        fn = _only_function(scan(src, "x.c"))
        assert [(loop.line, loop.keyword) for loop in fn.loops] == [(2, "do")]

    @pytest.mark.parametrize(
        "loop, bounded",
        [
            ("for i in range(10):", True),
            ("for item in items:", True),
            ("for tick in itertools.count():", False),
            ("while True:", False),
            ("while attempts < 3:", True),
        ],
    )
    def test_python(self, loop, bounded):
        src = f"def f():\n    {loop}\n        pass\n"
        fn = _only_function(scan(src, "x.py"))
        assert fn.loops[0].bounded is bounded

    def test_go_and_rust(self):
        go = scan("func f() {\n\tfor {\n\t}\n\tfor i := 0; i < 3; i++ {\n\t}\n}\n", "x.go")
        assert [loop.bounded for loop in go.functions[0].loops] == [False, True]
        rust = scan("fn f() {\n    loop {\n    }\n    for i in 0..10 {\n    }\n}\n", "x.rs")
        assert [loop.bounded for loop in rust.functions[0].loops] == [False, True]


class TestConditions:
    def test_compound_detection(self):
        src = (
            "int f(int a, int b) {\n"
            "    if (a && b) { return 1; }\n"
            "    else if (a || b) { return 2; }\n"
            "    if (a > b) { return 3; }\n"
            "    return 0;\n"
            "}\n"
        )
        fn = _only_function(scan(src, "x.c"))
        assert [(c.keyword, c.compound) for c in fn.conditions] == [
            ("if", True),
            ("else if", True),
            ("if", False),
        ]

    def test_python_keywords(self):
        src = "def f(a, b):\n    if a and b:\n        pass\n    elif a or b:\n        pass\n"
        fn = _only_function(scan(src, "x.py"))
        assert [(c.keyword, c.compound) for c in fn.conditions] == [("if", True), ("elif", True)]


class TestOtherFacts:
    def test_recursion(self):
        src = "int fact(int n) {\n    if (n < 2) { return 1; }\n    return n * fact(n - 1);\n}\n"
        fn = _only_function(scan(src, "x.c"))
        assert fn.self_calls == (3,)

    def test_method_recursion(self):
        src = "def walk(self, node):\n    return self.walk(node)\n"
        fn = _only_function(scan(src, "x.py"))
        assert fn.self_calls == (2,)

    def test_member_call_with_same_name_is_not_recursion(self):
        src = "int size(struct list *list) {\n    return list.size();\n}\n"
        fn = _only_function(scan(src, "x.c"))
        assert fn.self_calls == ()

    def test_jumps_and_allocations(self):
        src = (
            "void f(void) {\n"
            "    char *p = malloc(10);\n"
            "    if (setjmp(env)) { goto out; }\n"
            "    pool.free(p);\n"
            "out:\n"
            "    free(p);\n"
            "}\n"
        )
        fn = _only_function(scan(src, "x.c"))
        assert fn.allocations == ((2, "malloc"), (6, "free"))
        assert sorted(fn.jumps) == [(3, "goto"), (3, "setjmp")]

    def test_identifiers(self):
        src = "int parse_header(const char *buf, int len) {\n    int tmpVal = 0;\n    return tmpVal;\n}\n"
        fn = _only_function(scan(src, "x.c"))
        assert [(i.name, i.kind) for i in fn.identifiers] == [
            ("parse_header", "function"),
            ("buf", "parameter"),
            ("len", "parameter"),
            ("tmpVal", "variable"),
        ]

    def test_leading_comment(self):
        documented = "// Adds numbers.\nint add(void) {\n    return 0;\n}\n"
        separated = "// Adds numbers.\n\nint add(void) {\n    return 0;\n}\n"
        assert scan(documented, "x.c").functions[0].has_leading_comment
        assert not scan(separated, "x.c").functions[0].has_leading_comment

    def test_docstring_counts_as_comment(self):
        src = 'def add():\n    """Add numbers."""\n    return 0\n'
        assert scan(src, "x.py").functions[0].has_leading_comment

    def test_file_level_measurements(self):
        unit = scan("int x;\n\tint y;\n", "x.c", config=CheckerConfig(tab_width=8))
        assert unit.line_lengths == (6, 14)
        assert unit.indentation == (0, 8)
