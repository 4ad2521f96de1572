import os
import tempfile
import unittest

from swiftkotlin.config import TranslatorConfig, UnsupportedPolicy
from swiftkotlin.errors import ResourceError, SwiftParseError, UnsupportedConstructError
from swiftkotlin.translator import Translator, translate_file, translate_text


class TestTranslateText(unittest.TestCase):
    def test_empty_class(self):
        self.assertEqual(translate_text("class Foo {}").strip(), "class Foo {}")
        self.assertEqual(translate_text("struct Foo {}"), "data class Foo {}\n")

    def test_if_else(self):
        self.assertEqual(translate_text("if a { 1 } else { 2 }"), "if (a) {\n  1\n} else {\n  2\n}\n")

    def test_collection_literals(self):
        code = "let a = [1, 2, 3]\nlet d = [:]"
        self.assertEqual(translate_text(code), "val a = listOf(1, 2, 3)\nval d = mapOf()\n")

    def test_single_statement_closure_is_inline(self):
        self.assertEqual(translate_text("foo { bar() }"), "foo { bar() }\n")

    def test_extension(self):
        code = """
        extension Int {
            func double() -> Int { return self * 2 }
            var half: Int { return self / 2 }
        }
        """
        self.assertEqual(translate_text(code), "fun Int.double() : Int {\n  return self * 2\n}\n")

    def test_function_body(self):
        code = """
        func greet(name: String) -> String {
            let greeting = "Hello"
            return greeting
        }
        """
        expected = '\nfun greet(name: String) : String {\n  val greeting = "Hello"\n  return greeting\n}\n'
        self.assertEqual(translate_text(code), expected)

    def test_config_is_applied(self):
        config = TranslatorConfig(indent_width=4, dictionary_literal_style='bracket')
        translator = Translator(config)
        self.assertEqual(translator.translate_text('let d = ["a": 1]'), 'val d = ["a": 1]\n')
        self.assertEqual(translator.translate_text("struct P { let x = 0 }"), "data class P {\n    val x = 0\n}\n")

    def test_policies(self):
        self.assertEqual(translate_text("x!"), "x!\n")
        rewrite = TranslatorConfig(unsupported_constructs=UnsupportedPolicy.REWRITE)
        self.assertEqual(translate_text("x!", rewrite), "x!!\n")
        reject = TranslatorConfig(unsupported_constructs=UnsupportedPolicy.REJECT)
        with self.assertRaises(UnsupportedConstructError):
            translate_text("let y = try f()", reject)

    def test_enum_with_one_case_per_line(self):
        code = "enum E {\n  case a\n  case b(Int)\n}"
        self.assertEqual(translate_text(code), "enum E {\n  case a\n  case b(Int)\n}\n")

    def test_cast_followed_by_operator(self):
        self.assertEqual(translate_text("let e = x as? Int ?? 0"), "val e = x as? Int ?? 0\n")
        self.assertEqual(translate_text("let e = x is Int ? 1 : 2"), "val e = x is Int ? 1 : 2\n")

    def test_async_function_is_rejected(self):
        with self.assertRaises(SwiftParseError):
            translate_text("func f() async {}")

    def test_parse_error_renders_nothing(self):
        with self.assertRaises(SwiftParseError):
            translate_text("func {")


class TestTranslateFile(unittest.TestCase):
    def test_translate_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'point.swift')
            with open(path, 'w', encoding='utf-8') as f:
                f.write("struct Point {\n    var x = 0\n}\n")
            self.assertEqual(translate_file(path), "data class Point {\n  var x = 0\n}\n")

    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'missing.swift')
            with self.assertRaises(ResourceError) as ctx:
                Translator().translate_file(path)
            self.assertEqual(ctx.exception.path, path)

    def test_undecodable_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'binary.swift')
            with open(path, 'wb') as f:
                f.write(b'\xff\xfe\xfa')
            with self.assertRaises(ResourceError):
                translate_file(path)


if __name__ == '__main__':
    unittest.main()
