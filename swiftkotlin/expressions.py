import logging
from typing import List, Optional

from swiftkotlin.config import TranslatorConfig, UnsupportedPolicy
from swiftkotlin.errors import UnsupportedConstructError
from swiftkotlin.indent import indent
from swiftkotlin.nodes import (
    Argument, ArrayLiteralExpression, AssignmentOperatorExpression, BinaryOperatorExpression,
    ClosureExpression, DictionaryLiteralExpression, ExplicitMemberExpression, ForcedValueExpression,
    FunctionCallExpression, IdentifierExpression, ImplicitMemberExpression, InitializerExpression,
    KeyPathExpression, LiteralExpression, OptionalChainingExpression, ParenthesizedExpression,
    PostfixOperatorExpression, PostfixSelfExpression, PrefixOperatorExpression, RawExpression,
    SelectorExpression, SelfExpression, SubscriptExpression, SuperclassExpression,
    TernaryConditionalOperatorExpression, TryOperatorExpression, TupleExpression,
    TypeCastingOperatorExpression, WildcardExpression,
)

logger = logging.getLogger(__name__)


class ExpressionFormatter:
    """Renders expression nodes as single Kotlin fragments.

    Closures contain statements, so this class expects `format_statements` to be
    provided by a subclass (see `KotlinFormatter`).
    """

    def __init__(self, config: Optional[TranslatorConfig] = None):
        self.config = config or TranslatorConfig()

    @property
    def policy(self) -> UnsupportedPolicy:
        return self.config.unsupported_constructs

    def indent(self, text: str) -> str:
        return indent(text, width=self.config.indent_width)

    def format_raw(self, node) -> str:
        """Pass-through default: the node's own text, unchanged."""
        text = getattr(node, 'text', None)
        if not isinstance(text, str):
            text = str(node)
        logger.debug("No Kotlin rule for %s, passing through %r", type(node).__name__, text)
        return text

    def unsupported(self, construct: str, text: str):
        if self.policy is UnsupportedPolicy.REJECT:
            raise UnsupportedConstructError(construct, text)

    def format_expressions(self, exprs: List) -> str:
        return ', '.join(self.format_expression(e) for e in exprs)

    def format_argument(self, argument: Argument) -> str:
        if not isinstance(argument, Argument):
            return self.format_raw(argument)
        value = self.format_expression(argument.expression)
        if argument.label:
            return f"{argument.label} = {value}"
        return value

    def format_closure(self, closure: ClosureExpression) -> str:
        signature_text = ''
        statements_text = ''
        if closure.signature is not None:
            signature_text = f" {closure.signature} ->"
            if not closure.statements:
                statements_text = ' '
        if closure.statements:
            if closure.signature is None and len(closure.statements) == 1:
                statements_text = f" {self.format_statement(closure.statements[0])} "
            else:
                statements_text = f"\n{self.indent(self.format_statements(closure.statements))}\n"
        return f"{{{signature_text}{statements_text}}}"

    def format_dictionary(self, expr: DictionaryLiteralExpression) -> str:
        if not expr.entries:
            return "mapOf()"
        if self.config.dictionary_literal_style == 'bracket':
            entries = ', '.join(f"{self.format_expression(k)}: {self.format_expression(v)}"
                                for k, v in expr.entries)
            return f"[{entries}]"
        entries = ', '.join(f"{self.format_expression(k)} to {self.format_expression(v)}"
                            for k, v in expr.entries)
        return f"mapOf({entries})"

    def format_member(self, expr: ExplicitMemberExpression) -> str:
        text = f"{self.format_expression(expr.base)}.{expr.member}"
        if expr.generic_arguments:
            text += expr.generic_arguments
        if expr.argument_names:
            text += '(' + ''.join(f"{name}:" for name in expr.argument_names) + ')'
        return text

    def format_self(self, expr, keyword: str, kotlin_keyword: str) -> str:
        if expr.subscript is not None:
            return f"{kotlin_keyword}[{self.format_expressions(expr.subscript)}]"
        if expr.initializer:
            return f"{keyword}.init"
        if expr.member:
            return f"{keyword}.{expr.member}"
        return keyword

    def format_type_casting(self, expr: TypeCastingOperatorExpression) -> str:
        operator = expr.kind
        if operator == 'as!':
            self.unsupported('forced cast', f"as! {expr.type}")
            if self.policy is UnsupportedPolicy.REWRITE:
                operator = 'as'
        return f"{self.format_expression(expr.expression)} {operator} {expr.type}"

    def format_try(self, expr: TryOperatorExpression) -> str:
        inner = self.format_expression(expr.expression)
        self.unsupported('try operator', f"{expr.kind} {inner}")
        if self.policy is UnsupportedPolicy.REWRITE:
            if expr.kind == 'try?':
                return f"runCatching {{ {inner} }}.getOrNull()"
            return inner
        return f"{expr.kind} {inner}"

    def format_expression(self, expr) -> str:
        """Format an expression node."""
        if isinstance(expr, LiteralExpression):
            return expr.text
        elif isinstance(expr, IdentifierExpression):
            return expr.name + (expr.generic_arguments or '')
        elif isinstance(expr, ImplicitMemberExpression):
            return f".{expr.name}"
        elif isinstance(expr, WildcardExpression):
            return '_'
        elif isinstance(expr, AssignmentOperatorExpression):
            return f"{self.format_expression(expr.left)} = {self.format_expression(expr.right)}"
        elif isinstance(expr, BinaryOperatorExpression):
            left = self.format_expression(expr.left)
            right = self.format_expression(expr.right)
            return f"{left} {expr.operator} {right}"
        elif isinstance(expr, PrefixOperatorExpression):
            return f"{expr.operator}{self.format_expression(expr.operand)}"
        elif isinstance(expr, PostfixOperatorExpression):
            return f"{self.format_expression(expr.operand)}{expr.operator}"
        elif isinstance(expr, TernaryConditionalOperatorExpression):
            condition = self.format_expression(expr.condition)
            true_text = self.format_expression(expr.true_expression)
            false_text = self.format_expression(expr.false_expression)
            return f"{condition} ? {true_text} : {false_text}"
        elif isinstance(expr, TypeCastingOperatorExpression):
            return self.format_type_casting(expr)
        elif isinstance(expr, TryOperatorExpression):
            return self.format_try(expr)
        elif isinstance(expr, FunctionCallExpression):
            text = self.format_expression(expr.callee)
            if expr.arguments is not None:
                text += '(' + ', '.join(self.format_argument(a) for a in expr.arguments) + ')'
            if expr.trailing_closure is not None:
                text += ' ' + self.format_closure(expr.trailing_closure)
            return text
        elif isinstance(expr, ClosureExpression):
            return self.format_closure(expr)
        elif isinstance(expr, ArrayLiteralExpression):
            return f"listOf({self.format_expressions(expr.elements)})"
        elif isinstance(expr, DictionaryLiteralExpression):
            return self.format_dictionary(expr)
        elif isinstance(expr, ExplicitMemberExpression):
            return self.format_member(expr)
        elif isinstance(expr, InitializerExpression):
            text = f"{self.format_expression(expr.base)}.init"
            if expr.argument_names:
                text += '(' + ''.join(f"{name}:" for name in expr.argument_names) + ')'
            return text
        elif isinstance(expr, PostfixSelfExpression):
            return f"{self.format_expression(expr.base)}.self"
        elif isinstance(expr, SubscriptExpression):
            return f"{self.format_expression(expr.base)}[{self.format_expressions(expr.arguments)}]"
        elif isinstance(expr, ForcedValueExpression):
            base = self.format_expression(expr.base)
            self.unsupported('forced unwrap', f"{base}!")
            if self.policy is UnsupportedPolicy.REWRITE:
                return f"{base}!!"
            return f"{base}!"
        elif isinstance(expr, OptionalChainingExpression):
            base = self.format_expression(expr.base)
            self.unsupported('optional chaining', f"{base}?")
            return f"{base}?"
        elif isinstance(expr, ParenthesizedExpression):
            return f"({self.format_expression(expr.expression)})"
        elif isinstance(expr, TupleExpression):
            elements = []
            for element in expr.elements:
                label = f"{element.label}: " if element.label else ''
                elements.append(label + self.format_expression(element.expression))
            return f"({', '.join(elements)})"
        elif isinstance(expr, SelfExpression):
            return self.format_self(expr, 'self', 'this')
        elif isinstance(expr, SuperclassExpression):
            return self.format_self(expr, 'super', 'super')
        elif isinstance(expr, KeyPathExpression):
            text = f"#keyPath({self.format_expression(expr.expression)})"
            self.unsupported('key path', text)
            if self.policy is UnsupportedPolicy.REWRITE:
                logger.warning("No Kotlin rewrite for key path %s, passing it through", text)
            return text
        elif isinstance(expr, SelectorExpression):
            inner = self.format_expression(expr.expression)
            if expr.kind in ('getter', 'setter'):
                inner = f"{expr.kind}: {inner}"
            text = f"#selector({inner})"
            self.unsupported('selector', text)
            if self.policy is UnsupportedPolicy.REWRITE:
                logger.warning("No Kotlin rewrite for selector %s, passing it through", text)
            return text
        elif isinstance(expr, RawExpression):
            return expr.text
        else:
            return self.format_raw(expr)
