import unittest

from swiftkotlin.config import TranslatorConfig, UnsupportedPolicy
from swiftkotlin.declarations import KotlinFormatter
from swiftkotlin.errors import UnsupportedConstructError
from swiftkotlin.nodes import (
    Argument, ArrayLiteralExpression, AssignmentOperatorExpression, BinaryOperatorExpression,
    ClosureExpression, DictionaryLiteralExpression, ExplicitMemberExpression, ForcedValueExpression,
    FunctionCallExpression, IdentifierExpression, ImplicitMemberExpression, KeyPathExpression,
    LiteralExpression, OptionalChainingExpression, ParenthesizedExpression, PrefixOperatorExpression,
    ReturnStatement, SelectorExpression, SelfExpression, SubscriptExpression, SuperclassExpression,
    TernaryConditionalOperatorExpression, TryOperatorExpression, TupleElement, TupleExpression,
    TypeCastingOperatorExpression,
)


def ident(name):
    return IdentifierExpression(name)


def lit(text):
    return LiteralExpression(text)


def call(name, *arguments):
    return FunctionCallExpression(ident(name), [Argument(a) for a in arguments])


class TestExpressions(unittest.TestCase):
    def setUp(self):
        self.formatter = KotlinFormatter()

    def render(self, expr, **config):
        formatter = KotlinFormatter(TranslatorConfig(**config)) if config else self.formatter
        return formatter.format_expression(expr)

    def test_literals_and_identifiers(self):
        self.assertEqual(self.render(lit('"hi"')), '"hi"')
        self.assertEqual(self.render(lit('nil')), 'nil')
        self.assertEqual(self.render(IdentifierExpression('Array', '<Int>')), 'Array<Int>')
        self.assertEqual(self.render(ImplicitMemberExpression('red')), '.red')

    def test_operators(self):
        self.assertEqual(self.render(BinaryOperatorExpression(ident('a'), '+', lit('1'))), 'a + 1')
        self.assertEqual(self.render(AssignmentOperatorExpression(ident('x'), lit('2'))), 'x = 2')
        self.assertEqual(self.render(PrefixOperatorExpression('-', ident('x'))), '-x')
        ternary = TernaryConditionalOperatorExpression(ident('c'), lit('1'), lit('2'))
        self.assertEqual(self.render(ternary), 'c ? 1 : 2')

    def test_call_with_labels(self):
        expr = FunctionCallExpression(ident('f'), [Argument(lit('1'), label='x'), Argument(ident('y'))])
        self.assertEqual(self.render(expr), 'f(x = 1, y)')
        self.assertEqual(self.render(FunctionCallExpression(ident('f'), [])), 'f()')

    def test_call_with_trailing_closure(self):
        expr = FunctionCallExpression(ident('run'), None, ClosureExpression(None, [call('work')]))
        self.assertEqual(self.render(expr), 'run { work() }')
        expr = FunctionCallExpression(ident('map'), [Argument(ident('xs'))], ClosureExpression(None, [ident('$0')]))
        self.assertEqual(self.render(expr), 'map(xs) { $0 }')

    def test_array_literal(self):
        expr = ArrayLiteralExpression([lit('1'), lit('2'), lit('3')])
        self.assertEqual(self.render(expr), 'listOf(1, 2, 3)')
        self.assertEqual(self.render(ArrayLiteralExpression([])), 'listOf()')

    def test_dictionary_literal(self):
        self.assertEqual(self.render(DictionaryLiteralExpression([])), 'mapOf()')
        expr = DictionaryLiteralExpression([(lit('"a"'), lit('1')), (lit('"b"'), lit('2'))])
        self.assertEqual(self.render(expr), 'mapOf("a" to 1, "b" to 2)')

    def test_dictionary_literal_bracket_style(self):
        expr = DictionaryLiteralExpression([(lit('"a"'), lit('1'))])
        self.assertEqual(self.render(expr, dictionary_literal_style='bracket'), '["a": 1]')
        self.assertEqual(self.render(DictionaryLiteralExpression([]), dictionary_literal_style='bracket'), 'mapOf()')

    def test_closure_forms(self):
        self.assertEqual(self.render(ClosureExpression()), '{}')
        self.assertEqual(self.render(ClosureExpression(None, [call('f')])), '{ f() }')
        self.assertEqual(self.render(ClosureExpression('x', [])), '{ x -> }')
        self.assertEqual(self.render(ClosureExpression('x', [ident('x')])), '{ x ->\n  x\n}')
        self.assertEqual(self.render(ClosureExpression(None, [call('a'), call('b')])), '{\n  a()\n  b()\n}')

    def test_closure_body_is_statements(self):
        closure = ClosureExpression('(a, b)', [ReturnStatement(BinaryOperatorExpression(ident('a'), '<', ident('b')))])
        self.assertEqual(self.render(closure), '{ (a, b) ->\n  return a < b\n}')

    def test_member_and_subscript(self):
        self.assertEqual(self.render(ExplicitMemberExpression(ident('a'), 'count')), 'a.count')
        self.assertEqual(self.render(ExplicitMemberExpression(ident('a'), 'f', None, ['x', 'y'])), 'a.f(x:y:)')
        self.assertEqual(self.render(SubscriptExpression(ident('a'), [lit('0')])), 'a[0]')

    def test_self_and_super(self):
        self.assertEqual(self.render(SelfExpression()), 'self')
        self.assertEqual(self.render(SelfExpression(member='x')), 'self.x')
        self.assertEqual(self.render(SelfExpression(subscript=[lit('0')])), 'this[0]')
        self.assertEqual(self.render(SuperclassExpression(initializer=True)), 'super.init')

    def test_tuple_and_parentheses(self):
        expr = TupleExpression([TupleElement(lit('1'), 'a'), TupleElement(lit('2'))])
        self.assertEqual(self.render(expr), '(a: 1, 2)')
        self.assertEqual(self.render(ParenthesizedExpression(ident('x'))), '(x)')

    def test_type_casting(self):
        self.assertEqual(self.render(TypeCastingOperatorExpression('as?', ident('x'), 'Int')), 'x as? Int')
        self.assertEqual(self.render(TypeCastingOperatorExpression('is', ident('x'), 'Int')), 'x is Int')

    def test_unknown_node_passes_through(self):
        class Opaque:
            text = '#colorLiteral(red: 1)'

        self.assertEqual(self.render(Opaque()), '#colorLiteral(red: 1)')
        self.assertEqual(self.render(42), '42')


class TestUnsupportedPolicy(unittest.TestCase):
    def render(self, expr, policy):
        return KotlinFormatter(TranslatorConfig(unsupported_constructs=policy)).format_expression(expr)

    def test_forced_unwrap(self):
        expr = ForcedValueExpression(ident('x'))
        self.assertEqual(self.render(expr, UnsupportedPolicy.PASS_THROUGH), 'x!')
        self.assertEqual(self.render(expr, UnsupportedPolicy.REWRITE), 'x!!')
        with self.assertRaises(UnsupportedConstructError):
            self.render(expr, UnsupportedPolicy.REJECT)

    def test_optional_chaining(self):
        expr = ExplicitMemberExpression(OptionalChainingExpression(ident('a')), 'b')
        self.assertEqual(self.render(expr, UnsupportedPolicy.PASS_THROUGH), 'a?.b')
        self.assertEqual(self.render(expr, UnsupportedPolicy.REWRITE), 'a?.b')
        with self.assertRaises(UnsupportedConstructError):
            self.render(expr, UnsupportedPolicy.REJECT)

    def test_try(self):
        plain = TryOperatorExpression('try', call('f'))
        optional = TryOperatorExpression('try?', call('f'))
        self.assertEqual(self.render(plain, UnsupportedPolicy.PASS_THROUGH), 'try f()')
        self.assertEqual(self.render(optional, UnsupportedPolicy.PASS_THROUGH), 'try? f()')
        self.assertEqual(self.render(plain, UnsupportedPolicy.REWRITE), 'f()')
        self.assertEqual(self.render(optional, UnsupportedPolicy.REWRITE), 'runCatching { f() }.getOrNull()')
        with self.assertRaises(UnsupportedConstructError) as ctx:
            self.render(plain, UnsupportedPolicy.REJECT)
        self.assertEqual(ctx.exception.construct, 'try operator')

    def test_forced_cast(self):
        expr = TypeCastingOperatorExpression('as!', ident('x'), 'Int')
        self.assertEqual(self.render(expr, UnsupportedPolicy.PASS_THROUGH), 'x as! Int')
        self.assertEqual(self.render(expr, UnsupportedPolicy.REWRITE), 'x as Int')

    def test_key_path_and_selector(self):
        key_path = KeyPathExpression(ExplicitMemberExpression(ident('Person'), 'name'))
        selector = SelectorExpression(ident('tapped'), 'getter')
        self.assertEqual(self.render(key_path, UnsupportedPolicy.PASS_THROUGH), '#keyPath(Person.name)')
        self.assertEqual(self.render(selector, UnsupportedPolicy.PASS_THROUGH), '#selector(getter: tapped)')
        with self.assertLogs('swiftkotlin.expressions', level='WARNING'):
            self.assertEqual(self.render(key_path, UnsupportedPolicy.REWRITE), '#keyPath(Person.name)')
        with self.assertRaises(UnsupportedConstructError):
            self.render(selector, UnsupportedPolicy.REJECT)


if __name__ == '__main__':
    unittest.main()
