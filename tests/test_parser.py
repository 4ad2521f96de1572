import sys
import unittest

from swiftkotlin.errors import SwiftParseError
from swiftkotlin.nodes import (
    Argument, ArrayLiteralExpression, AssignmentOperatorExpression, BinaryOperatorExpression,
    CaseItem, ClassDeclaration, ClosureExpression, CodeBlock, CodeBlockBody, ConstantDeclaration,
    DictionaryLiteralExpression, EnumCaseMember, EnumDeclaration, ExplicitMemberExpression, ExtensionDeclaration,
    ForcedValueExpression, ForInStatement, FunctionCallExpression, FunctionDeclaration,
    FunctionResult, FunctionSignature, GuardStatement, IdentifierExpression, IfStatement,
    LiteralExpression, OptionalChainingExpression, PatternCondition, PatternInitializer,
    RawStatement, ReturnStatement, SelfExpression, SwitchCase, SwitchStatement,
    TernaryConditionalOperatorExpression, TopLevelDeclaration, TryOperatorExpression,
    TypeCastingOperatorExpression, VariableDeclaration, InitializerListBody,
)
from swiftkotlin.swift_parser import SwiftParser, parse_program


def ident(name):
    return IdentifierExpression(name)


def lit(text):
    return LiteralExpression(text)


class TestParser(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.parser = SwiftParser()

    def parse_one(self, code):
        tree = self.parser.parse(code)
        self.assertIsInstance(tree, TopLevelDeclaration)
        self.assertEqual(len(tree.statements), 1)
        return tree.statements[0]

    def parse_expression(self, code):
        return self.parse_one(f"let v = {code}").initializers[0].expression

    def test_constant(self):
        decl = self.parse_one("let x = 1")
        self.assertEqual(decl, ConstantDeclaration([PatternInitializer('x', lit('1'))]))

    def test_variable_with_type(self):
        decl = self.parse_one("var x: Int = 0")
        self.assertEqual(decl, VariableDeclaration(InitializerListBody([PatternInitializer('x: Int', lit('0'))])))

    def test_computed_variable(self):
        decl = self.parse_one("var half: Int { return 1 }")
        self.assertEqual(decl.body, CodeBlockBody('half', ': Int', CodeBlock([ReturnStatement(lit('1'))])))

    def test_precedence(self):
        expr = self.parse_expression("a + b * c")
        self.assertEqual(expr, BinaryOperatorExpression(
            ident('a'), '+', BinaryOperatorExpression(ident('b'), '*', ident('c'))))
        expr = self.parse_expression("a - b - c")
        self.assertEqual(expr, BinaryOperatorExpression(
            BinaryOperatorExpression(ident('a'), '-', ident('b')), '-', ident('c')))

    def test_assignment_and_nil_coalescing(self):
        stmt = self.parse_one("x = y ?? 0")
        self.assertEqual(stmt, AssignmentOperatorExpression(
            ident('x'), BinaryOperatorExpression(ident('y'), '??', lit('0'))))

    def test_ternary(self):
        expr = self.parse_expression("a ? b : c")
        self.assertEqual(expr, TernaryConditionalOperatorExpression(ident('a'), ident('b'), ident('c')))

    def test_collections(self):
        self.assertEqual(self.parse_expression("[1, 2, 3]"), ArrayLiteralExpression([lit('1'), lit('2'), lit('3')]))
        self.assertEqual(self.parse_expression("[:]"), DictionaryLiteralExpression([]))
        self.assertEqual(self.parse_expression('["a": 1]'), DictionaryLiteralExpression([(lit('"a"'), lit('1'))]))

    def test_call_with_trailing_closure(self):
        stmt = self.parse_one("foo(x: 1) { $0 }")
        self.assertEqual(stmt, FunctionCallExpression(
            ident('foo'), [Argument(lit('1'), label='x')], ClosureExpression(None, [ident('$0')])))

    def test_closure_signature(self):
        expr = self.parse_expression("{ x in x }")
        self.assertEqual(expr, ClosureExpression('x', [ident('x')]))

    def test_postfix_chain(self):
        expr = self.parse_expression("a?.b")
        self.assertEqual(expr, ExplicitMemberExpression(OptionalChainingExpression(ident('a')), 'b'))
        self.assertEqual(self.parse_expression("x!"), ForcedValueExpression(ident('x')))

    def test_cast_followed_by_operator(self):
        cast = TypeCastingOperatorExpression('as?', ident('x'), 'Int')
        self.assertEqual(self.parse_expression("x as? Int ?? 0"), BinaryOperatorExpression(cast, '??', lit('0')))
        check = TypeCastingOperatorExpression('is', ident('x'), 'Int')
        self.assertEqual(self.parse_expression("x is Int ? 1 : 2"),
                         TernaryConditionalOperatorExpression(check, lit('1'), lit('2')))

    def test_optional_type_suffix(self):
        decl = self.parse_one("let v: Int? = nil")
        self.assertEqual(decl, ConstantDeclaration([PatternInitializer('v: Int?', lit('nil'))]))
        self.assertEqual(self.parse_expression("x as! [String]?"),
                         TypeCastingOperatorExpression('as!', ident('x'), '[String]?'))

    def test_try(self):
        expr = self.parse_expression("try f()")
        self.assertEqual(expr, TryOperatorExpression('try', FunctionCallExpression(ident('f'), [])))

    def test_if_else(self):
        stmt = self.parse_one("if a { 1 } else { 2 }")
        self.assertEqual(stmt, IfStatement([ident('a')], CodeBlock([lit('1')]), else_body=CodeBlock([lit('2')])))

    def test_else_if(self):
        stmt = self.parse_one("if a {\n} else if b {\n}")
        self.assertEqual(stmt.else_if, IfStatement([ident('b')], CodeBlock([])))
        self.assertIsNone(stmt.else_body)

    def test_guard_with_bare_return(self):
        stmt = self.parse_one("guard let x = y else { return }")
        self.assertEqual(stmt, GuardStatement([PatternCondition('let', 'x', ident('y'))], CodeBlock([ReturnStatement()])))

    def test_return_value_on_next_line_is_separate(self):
        func = self.parse_one("func f() {\n    return\n}")
        self.assertEqual(func.body, CodeBlock([ReturnStatement()]))

    def test_for_in(self):
        stmt = self.parse_one("for i in 0..<n {\n    print(i)\n}")
        self.assertEqual(stmt, ForInStatement(
            'i', BinaryOperatorExpression(lit('0'), '..<', ident('n')),
            CodeBlock([FunctionCallExpression(ident('print'), [Argument(ident('i'))])])))

    def test_switch(self):
        code = "switch x {\ncase 1, 2:\n    a()\ndefault:\n    break\n}"
        self.assertEqual(self.parse_one(code), SwitchStatement(ident('x'), [
            SwitchCase([CaseItem('1'), CaseItem('2')], [FunctionCallExpression(ident('a'), [])]),
            SwitchCase(None, [RawStatement('break')]),
        ]))

    def test_function(self):
        decl = self.parse_one("func f(x: Int) -> Int { return x }")
        self.assertEqual(decl, FunctionDeclaration(
            'f', FunctionSignature(['x: Int'], None, FunctionResult('Int')),
            CodeBlock([ReturnStatement(ident('x'))])))

    def test_class(self):
        decl = self.parse_one("public final class Foo: Bar {\n    let x = 1\n}")
        self.assertIsInstance(decl, ClassDeclaration)
        self.assertEqual(decl.name, 'Foo')
        self.assertEqual(decl.access_level, 'public')
        self.assertTrue(decl.is_final)
        self.assertEqual(decl.inheritance, ': Bar')
        self.assertEqual(decl.members, [ConstantDeclaration([PatternInitializer('x', lit('1'))])])

    def test_extension(self):
        decl = self.parse_one("extension Int {\n    func double() -> Int { return self * 2 }\n}")
        self.assertIsInstance(decl, ExtensionDeclaration)
        self.assertEqual(decl.type_name, 'Int')
        body = decl.members[0].body
        self.assertEqual(body, CodeBlock([ReturnStatement(BinaryOperatorExpression(SelfExpression(), '*', lit('2')))]))

    def test_enum_with_one_case_per_line(self):
        decl = self.parse_one("enum Shape {\n    case point\n    case circle(radius: Double)\n    indirect case group([Shape])\n}")
        self.assertIsInstance(decl, EnumDeclaration)
        self.assertEqual(decl.members, [
            EnumCaseMember('case point'),
            EnumCaseMember('case circle(radius: Double)'),
            EnumCaseMember('indirect case group([Shape])'),
        ])

    def test_enum_with_raw_values(self):
        decl = self.parse_one("enum Level: Int {\n    case low = 1\n    case high\n    func next() {}\n}")
        self.assertEqual(decl.inheritance, ': Int')
        self.assertEqual(decl.members[:2], [EnumCaseMember('case low = 1'), EnumCaseMember('case high')])
        self.assertIsInstance(decl.members[2], FunctionDeclaration)

    def test_concurrency_keywords_are_rejected(self):
        for code in ("func f() async {}", "func f() async throws -> Int { return 1 }", "let x = await f()"):
            with self.assertRaises(SwiftParseError):
                self.parser.parse(code)

    def test_recursion_limit_is_restored(self):
        limit = sys.getrecursionlimit()
        self.parser.parse("let x = ((((1))))")
        self.assertEqual(sys.getrecursionlimit(), limit)

    def test_comments_are_ignored(self):
        tree = parse_program("// leading\nlet x = 1 /* inline */\n")
        self.assertEqual(tree.statements, [ConstantDeclaration([PatternInitializer('x', lit('1'))])])

    def test_statement_order(self):
        tree = self.parser.parse("a()\nb()\nc()")
        self.assertEqual([s.callee.name for s in tree.statements], ['a', 'b', 'c'])

    def test_empty_source(self):
        self.assertEqual(self.parser.parse(""), TopLevelDeclaration([]))

    def test_invalid_source(self):
        with self.assertRaises(SwiftParseError) as ctx:
            self.parser.parse("let x = 1\nlet = 2")
        self.assertEqual(ctx.exception.line, 2)


if __name__ == '__main__':
    unittest.main()
