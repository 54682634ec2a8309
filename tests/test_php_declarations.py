"""Tests for the PHP declaration scanner."""

from __future__ import annotations

import textwrap

import pytest

from laravel_doctor.errors import DeclarationParseError
from laravel_doctor.parsing.php_declarations import (
    DeclarationVisitor,
    parse_methods,
    tokenize,
    walk_declarations,
)


def php(source: str) -> str:
    return textwrap.dedent(source).lstrip("\n")


CONTROLLER = php(
    """
    <?php

    namespace App\\Http\\Controllers;

    use Illuminate\\Http\\Request;

    class PostController extends Controller
    {
        public function __construct(private readonly PostService $posts)
        {
        }

        /**
         * List posts.
         */
        public function index(Request $request): JsonResponse
        {
            $filter = function ($post) {
                return $post->published;
            };
            return response()->json(['data' => "{$request->q}"]);
        }

        public function show($id, ?int $page = null)
        {
        }

        protected function helper(): void
        {
        }

        function legacy(&$ref, string ...$rest): static {}
    }
    """
)


class TestParseMethods:
    def test_finds_class_methods_only(self) -> None:
        names = [m.name for m in parse_methods(CONTROLLER)]
        assert names == ["__construct", "index", "show", "helper", "legacy"]

    def test_method_details(self) -> None:
        methods = {m.name: m for m in parse_methods(CONTROLLER)}

        index = methods["index"]
        assert index.class_name == "PostController"
        assert index.is_public
        assert index.doc_comment is not None and "List posts" in index.doc_comment
        assert [(p.name, p.type) for p in index.parameters] == [("$request", "Request")]
        assert index.return_type == "JsonResponse"
        assert index.line == 16

        show = methods["show"]
        assert show.doc_comment is None
        assert show.return_type is None
        assert show.untyped_parameters == ("$id",)
        assert show.parameters[1].type == "?int"

    def test_visibility_and_constructor(self) -> None:
        methods = {m.name: m for m in parse_methods(CONTROLLER)}
        assert methods["__construct"].is_constructor_like
        assert methods["__construct"].parameters[0].type == "PostService"
        assert methods["helper"].visibility == "protected"
        assert not methods["helper"].is_public
        assert methods["legacy"].visibility == "public"

    def test_variadic_and_reference_parameters(self) -> None:
        legacy = {m.name: m for m in parse_methods(CONTROLLER)}["legacy"]
        assert [(p.name, p.type) for p in legacy.parameters] == [
            ("$ref", None),
            ("$rest", "string"),
        ]
        assert legacy.return_type == "static"

    def test_class_constant_reference_is_not_a_class(self) -> None:
        source = php(
            """
            <?php
            $name = Foo::class;
            function top_level($x) {}
            class Real
            {
                public function run() {}
            }
            """
        )
        methods = parse_methods(source)
        assert [(m.class_name, m.name) for m in methods] == [("Real", "run")]

    def test_anonymous_class(self) -> None:
        source = "<?php\n$x = new class {\n    public function handle() {}\n};\n"
        (method,) = parse_methods(source)
        assert method.class_name == "class@anonymous"

    def test_strings_and_comments_ignored(self) -> None:
        source = php(
            """
            <?php
            // class Fake { public function nope() {} }
            /* function alsoNope() {} */
            $s = 'class Str { function x() {} }';
            $h = <<<EOT
            class Heredoc { function y() {} }
            EOT;
            class Real
            {
                # public function hashComment() {}
                public function ok(): void {}
            }
            """
        )
        assert [m.name for m in parse_methods(source)] == ["ok"]

    def test_backtick_shell_string(self) -> None:
        source = "<?php class A { public function f(): string { return `ls 'x`; } }"
        assert [m.name for m in parse_methods(source)] == ["f"]

    def test_attributes_on_parameters(self) -> None:
        source = "<?php class A { public function f(#[SensitiveParameter] string $secret): void {} }"
        (method,) = parse_methods(source)
        assert method.parameters[0].type == "string"

    def test_inline_html_skipped(self) -> None:
        source = "<html>{ class }</html>\n<?php class A { public function f() {} } ?>\n<p>}</p>"
        assert [m.name for m in parse_methods(source)] == ["f"]


class TestMalformedSource:
    @pytest.mark.parametrize(
        "source",
        [
            "<?php class A { public function f() {}",
            "<?php class A { public function f() {} } }",
            "<?php class A { public function f( {} }",
            "<?php /* never closed",
            "<?php $s = 'never closed;",
            "<?php $out = `never closed;",
            "<?php $h = <<<EOT\nno end\n",
            "<?php class A { public function () {} }",
        ],
    )
    def test_raises_parse_error(self, source: str) -> None:
        with pytest.raises(DeclarationParseError):
            parse_methods(source)

    def test_parse_error_carries_line(self) -> None:
        with pytest.raises(DeclarationParseError) as excinfo:
            list(tokenize("<?php\n\n$s = 'open"))
        assert excinfo.value.line == 3
        assert str(excinfo.value).startswith("line 3:")


def test_custom_visitor() -> None:
    class Counter(DeclarationVisitor):
        def __init__(self) -> None:
            self.count = 0

        def visit_method(self, node) -> None:
            self.count += 1

    visitor = Counter()
    walk_declarations(CONTROLLER, visitor)
    assert visitor.count == 5
