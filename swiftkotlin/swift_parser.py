"""
pyparsing grammar for the Swift subset that `swiftkotlin.nodes` models.

Newlines are ordinary whitespace. Operators are classified by the whitespace
around them, the way Swift does it: `a - b` and `a-b` are binary, `-a` is
prefix, `a!` and `a?.b` are postfix. Binary expressions are parsed as a flat
operand/operator list and folded with Swift's precedence table afterwards.
Types, patterns, parameters and generic clauses are kept as source text.
"""

import logging
import sys
from typing import List, Optional

from pyparsing import (
    DelimitedList, FollowedBy, Forward, Group, Keyword, Literal, Opt, ParseBaseException,
    ParserElement, Regex, Suppress, ZeroOrMore, cpp_style_comment, original_text_for,
)

from swiftkotlin.errors import SwiftParseError
from swiftkotlin.nodes import (
    Argument, ArrayLiteralExpression, AssignmentOperatorExpression, AvailabilityCondition,
    BinaryOperatorExpression, CaseItem, CatchClause, ClassDeclaration, ClosureExpression, CodeBlock,
    CodeBlockBody, ConstantDeclaration, DeferStatement, DeinitializerDeclaration,
    DictionaryLiteralExpression, DidSetClause, DoStatement, EnumCaseMember, EnumDeclaration,
    ExplicitMemberExpression, ExtensionDeclaration, ForcedValueExpression, ForInStatement,
    FunctionCallExpression, FunctionDeclaration, FunctionResult, FunctionSignature, GetterClause,
    GetterSetterBlock, GetterSetterBody, GetterSetterKeywordBlock, GetterSetterKeywordBody,
    GuardStatement, IdentifierExpression, IfStatement, ImplicitMemberExpression, ImportDeclaration,
    InitializerDeclaration, InitializerExpression, InitializerListBody, KeyPathExpression,
    LabeledStatement, LiteralExpression, OperatorDeclaration, OptionalChainingExpression,
    ParenthesizedExpression, PatternCondition, PatternInitializer, PostfixOperatorExpression,
    PostfixSelfExpression, PrecedenceGroupDeclaration, PrefixOperatorExpression,
    ProtocolDeclaration, ProtocolPropertyMember, ProtocolSubscriptMember, RawDeclaration,
    RawExpression, RawStatement, RepeatWhileStatement, ReturnStatement, SelectorExpression,
    SelfExpression, SetterClause, StructDeclaration, SubscriptDeclaration, SubscriptExpression,
    SuperclassExpression, SwitchCase, SwitchStatement, TernaryConditionalOperatorExpression,
    ThrowStatement, TopLevelDeclaration, TryOperatorExpression, TupleElement, TupleExpression,
    TypealiasDeclaration, TypeCastingOperatorExpression, VariableDeclaration, WhileStatement,
    WildcardExpression, WillSetClause, WillSetDidSetBlock, WillSetDidSetBody,
)

logger = logging.getLogger(__name__)

# Every nesting level of the source costs a few dozen Python frames.
RECURSION_LIMIT = 10000

LPAR, RPAR, LBRACK, RBRACK, LBRACE, RBRACE, COLON, SEMI, EQ = map(Suppress, "()[]{}:;=")
ARROW = Suppress('->')

RESERVED_WORDS = frozenset("""
    associatedtype class deinit enum extension fileprivate func import init inout internal let
    operator precedencegroup private protocol public static struct subscript typealias var
    break case continue default defer do else fallthrough for guard if in repeat return switch
    where while as catch false is nil rethrows super self throw throws true try
    async await
""".split())

ACCESS_LEVELS = ('open', 'public', 'internal', 'fileprivate', 'private')
MODIFIERS = (
    'open', 'public', 'internal', 'fileprivate', 'private', 'static', 'final', 'override',
    'mutating', 'nonmutating', 'lazy', 'weak', 'unowned', 'optional', 'required', 'convenience',
    'dynamic', 'prefix', 'postfix', 'infix', 'indirect',
)

WORD = r'[A-Za-z_][A-Za-z0-9_]*'
IDENTIFIER = r'`[^`\n]+`|\$\d+|\$?' + WORD
OPERATOR = r'(?:\.\.[.<]|[/=\-+!*%<>&|^~?]+)'
STRING = (r'"""[\s\S]*?"""'
          r'|#"(?:[^"\n]|"(?!#))*"#'
          r'|"(?:[^"\\\n]|\\\((?:[^()"]|"(?:[^"\\\n]|\\.)*"|\([^()]*\))*\)|\\.)*"')
NUMBER = (r'0x[0-9a-fA-F_]+(?:\.[0-9a-fA-F_]+)?(?:[pP][+-]?\d+)?|0o[0-7_]+|0b[01_]+'
          r'|\d[\d_]*(?:\.\d[\d_]*)?(?:[eE][+-]?\d[\d_]*)?')
GENERIC_CLAUSE = r'<(?:[^<>{}();]|<(?:[^<>{}();]|<[^<>]*>)*>)*>'
# Generic arguments in expression position, only where a call or member access follows.
GENERIC_ARGUMENTS = r'<(?:[^<>(){}=;&|!]|<(?:[^<>(){}=;&|!]|<[^<>]*>)*>)*>(?=[(.])'
ARGUMENT_NAMES = r'\((?:' + WORD + r':)+\)'
CLOSURE_PARAMETERS = r'(?:\((?:[^()]|\([^()]*\))*\)|' + WORD + r'(?:\s*,\s*' + WORD + r')*)'
CLOSURE_SIGNATURE = (r'(?:\[[^\]]*\]\s*' + CLOSURE_PARAMETERS + r'?|' + CLOSURE_PARAMETERS + r')'
                     r'(?:\s*(?:re)?throws)?(?:\s*->\s*[^{}]*?)?(?=\s*\bin\b)')

SPACED_BINARY = r'(?<=\s)' + OPERATOR + r'(?=\s)'
UNSPACED_BINARY = r'(?<![\s(\[{,;:])' + OPERATOR + r'(?![\s)\]},;:])'
PREFIX = OPERATOR + r'(?![\s)\]},;:])'
POSTFIX = r'(?<![\s(\[{,;:])' + OPERATOR + r'(?=[\s)\]},;:.]|$)'
FORCED_UNWRAP = r'(?<!\s)!(?!=)'
OPTIONAL_CHAINING = r'(?<!\s)\?(?=[.\[(])'
TERNARY = r'(?<=\s)\?(?=\s)'
TYPE_CAST = r'as[?!]|as(?!\w)|is(?!\w)'
TRY = r'try[?!]|try(?!\w)'

ASSIGNMENT_OPERATORS = frozenset(['=', '*=', '/=', '%=', '+=', '-=', '<<=', '>>=', '&=', '|=', '^='])
RIGHT_ASSOCIATIVE = frozenset(['??'])
PRECEDENCE = {
    '<<': 160, '>>': 160, '&<<': 160, '&>>': 160,
    '*': 150, '/': 150, '%': 150, '&': 150, '&*': 150,
    '+': 140, '-': 140, '|': 140, '^': 140, '&+': 140, '&-': 140,
    '..<': 135, '...': 135,
    '??': 131,
    '<': 130, '<=': 130, '>': 130, '>=': 130, '==': 130, '!=': 130, '===': 130, '!==': 130, '~=': 130,
    '&&': 120,
    '||': 110,
}
CAST_PRECEDENCE = 132
DEFAULT_PRECEDENCE = 100
TERNARY_PRECEDENCE = 100
ASSIGNMENT_PRECEDENCE = 90


def kw(word: str):
    return Suppress(Keyword(word))


def access_level(modifiers: List[str]) -> Optional[str]:
    return next((m for m in modifiers if m in ACCESS_LEVELS), None)


def named(expr, name: str):
    """`expr` under a results name that holds its single token instead of a token list."""
    return expr.copy().add_parse_action(lambda t: t[0]).set_results_name(name)


def split_argument_names(text: Optional[str]) -> List[str]:
    """'(a:b:)' -> ['a', 'b']"""
    if not text:
        return []
    return text[1:-1].split(':')[:-1]


def is_try(token) -> bool:
    return isinstance(token, tuple) and token[0] == 'try'


class SwiftParser:
    """Parses Swift source text into a `TopLevelDeclaration`."""

    def __init__(self):
        ParserElement.enable_packrat(cache_size_limit=None)
        self.program = self._build_grammar()

    def make_text(self, tokens):
        return ' '.join(tokens[0].split())

    def make_stripped(self, tokens):
        return tokens[0].strip()

    def make_type_annotation(self, tokens):
        attributes = list(tokens[0])
        return ': ' + ' '.join(attributes + [tokens[1]])

    def make_inheritance(self, tokens):
        return ': ' + ', '.join(tokens)

    def make_clause(self, tokens):
        return ' '.join(' '.join(tokens).split())

    # Expressions
    def make_literal(self, tokens):
        return LiteralExpression(tokens[0])

    def make_identifier(self, tokens):
        return IdentifierExpression(tokens[0], tokens.get('generic'))

    def make_self(self, tokens, node_class):
        if 'init' in tokens:
            return node_class(initializer=True)
        if 'subscript' in tokens:
            return node_class(subscript=list(tokens['subscript']))
        if 'member' in tokens:
            return node_class(member=tokens['member'][1:])
        return node_class()

    def make_selector(self, tokens):
        return SelectorExpression(tokens['expression'], tokens.get('kind', 'selector'))

    def make_closure(self, tokens):
        return ClosureExpression(tokens.get('signature'), list(tokens.get('statements', [])))

    def make_tuple(self, tokens):
        elements = []
        for group in tokens:
            if len(group) == 2:
                elements.append(TupleElement(group[1], label=group[0]))
            else:
                elements.append(TupleElement(group[0]))
        if len(elements) == 1 and elements[0].label is None:
            return ParenthesizedExpression(elements[0].expression)
        return TupleExpression(elements)

    def make_dictionary(self, tokens):
        return DictionaryLiteralExpression([(group[0], group[1]) for group in tokens])

    def make_argument(self, tokens):
        if len(tokens) == 2:
            return Argument(tokens[1], label=tokens[0])
        return Argument(tokens[0])

    def make_member_suffix(self, tokens):
        member = tokens[0][1:]
        return 'member', member, tokens.get('generic'), split_argument_names(tokens.get('names'))

    def enrich_postfix(self, tokens):
        expr = tokens[0]
        previous = None
        for suffix in tokens[1:]:
            kind = suffix[0]
            if kind == 'call':
                expr = FunctionCallExpression(expr, suffix[1])
            elif kind == 'closure':
                if previous == 'call':
                    expr = FunctionCallExpression(expr.callee, expr.arguments, suffix[1])
                else:
                    expr = FunctionCallExpression(expr, None, suffix[1])
            elif kind == 'member':
                expr = ExplicitMemberExpression(expr, suffix[1], suffix[2], suffix[3])
            elif kind == 'init':
                expr = InitializerExpression(expr, suffix[1])
            elif kind == 'self':
                expr = PostfixSelfExpression(expr)
            elif kind == 'subscript':
                expr = SubscriptExpression(expr, suffix[1])
            elif kind == 'force':
                expr = ForcedValueExpression(expr)
            elif kind == 'optional':
                expr = OptionalChainingExpression(expr)
            elif kind == 'postfix':
                expr = PostfixOperatorExpression(expr, suffix[1])
            previous = kind
        return expr

    def enrich_prefix(self, tokens):
        if len(tokens) == 2:
            return PrefixOperatorExpression(tokens[0], tokens[1])
        return tokens[0]

    def precedence(self, op) -> tuple:
        """(precedence, right associative) of an infix operator token."""
        kind = op[0]
        if kind == 'ternary':
            return TERNARY_PRECEDENCE, True
        if kind == 'cast':
            return CAST_PRECEDENCE, False
        if op[1] in ASSIGNMENT_OPERATORS:
            return ASSIGNMENT_PRECEDENCE, True
        return PRECEDENCE.get(op[1], DEFAULT_PRECEDENCE), op[1] in RIGHT_ASSOCIATIVE

    def make_infix(self, op, left, right):
        kind = op[0]
        if kind == 'cast':
            return TypeCastingOperatorExpression(op[1], left, op[2])
        if kind == 'ternary':
            return TernaryConditionalOperatorExpression(left, op[1], right)
        if op[1] == '=':
            return AssignmentOperatorExpression(left, right)
        return BinaryOperatorExpression(left, op[1], right)

    def climb(self, left, infixes, pos, min_precedence):
        while pos < len(infixes):
            op, right = infixes[pos]
            precedence, right_associative = self.precedence(op)
            if precedence < min_precedence:
                break
            pos += 1
            if right is not None:
                while pos < len(infixes):
                    next_precedence, _ = self.precedence(infixes[pos][0])
                    if next_precedence > precedence or (right_associative and next_precedence == precedence):
                        right, pos = self.climb(right, infixes, pos, next_precedence)
                    else:
                        break
            left = self.make_infix(op, left, right)
        return left, pos

    def fold_binary(self, tokens):
        items = list(tokens)
        leading_try = items.pop(0)[1] if is_try(items[0]) else None
        left = items[0]
        infixes = []
        i = 1
        while i < len(items):
            op = items[i]
            i += 1
            right = None
            if op[0] != 'cast':
                if is_try(items[i]):
                    right = TryOperatorExpression(items[i][1], items[i + 1])
                    i += 2
                else:
                    right = items[i]
                    i += 1
            infixes.append((op, right))
        expr, _ = self.climb(left, infixes, 0, 0)
        if leading_try is not None:
            return TryOperatorExpression(leading_try, expr)
        return expr

    # Statements
    def make_code_block(self, tokens):
        return CodeBlock(list(tokens[0]))

    def make_pattern_condition(self, tokens):
        return PatternCondition(tokens[0], tokens[1], tokens[2])

    def enrich_if(self, tokens):
        else_part = tokens.get('else')
        return IfStatement(
            list(tokens['conditions']),
            tokens['body'],
            else_body=else_part if isinstance(else_part, CodeBlock) else None,
            else_if=else_part if isinstance(else_part, IfStatement) else None,
        )

    def enrich_for_in(self, tokens):
        return ForInStatement(
            tokens['pattern'], tokens['collection'], tokens['body'],
            is_case_matching='case' in tokens, where_clause=tokens.get('where'),
        )

    def make_case_item(self, tokens):
        return CaseItem(tokens['pattern'], tokens.get('where'))

    def enrich_switch_case(self, tokens):
        label = tokens[0]
        items = label[1] if label[0] == 'case' else None
        return SwitchCase(items, list(tokens[1]))

    def make_catch(self, tokens):
        return CatchClause(tokens['body'], tokens.get('pattern'), tokens.get('where'))

    # Declarations
    def enrich_import(self, tokens):
        return ImportDeclaration(tokens['path'], tokens.get('kind'), list(tokens['attributes']))

    def enrich_typealias(self, tokens):
        return TypealiasDeclaration(
            tokens['name'], tokens['assignment'], list(tokens['attributes']),
            access_level(list(tokens['modifiers'])), tokens.get('generic'),
        )

    def make_pattern_initializer(self, tokens):
        return PatternInitializer(tokens['pattern'], tokens.get('expression'))

    def enrich_constant(self, tokens):
        return ConstantDeclaration(
            list(tokens['initializers']), list(tokens['attributes']), list(tokens['modifiers']),
        )

    def enrich_variable(self, tokens):
        return VariableDeclaration(tokens['body'], list(tokens['attributes']), list(tokens['modifiers']))

    def make_getter(self, tokens):
        return GetterClause(tokens['body'], list(tokens['attributes']), tokens.get('mutation'))

    def make_setter(self, tokens):
        return SetterClause(tokens['body'], list(tokens['attributes']), tokens.get('mutation'), tokens.get('name'))

    def make_getter_setter_block(self, tokens):
        getter = next(t for t in tokens if isinstance(t, GetterClause))
        setter = next((t for t in tokens if isinstance(t, SetterClause)), None)
        return GetterSetterBlock(getter, setter)

    def make_keyword_block(self, tokens):
        return GetterSetterKeywordBlock(' '.join(tokens['getter'].split()),
                                        ' '.join(tokens['setter'].split()) if 'setter' in tokens else None)

    def make_observer_block(self, tokens):
        will_set = next((t for t in tokens if isinstance(t, WillSetClause)), None)
        did_set = next((t for t in tokens if isinstance(t, DidSetClause)), None)
        return WillSetDidSetBlock(will_set, did_set)

    def enrich_function(self, tokens):
        signature = FunctionSignature(list(tokens['parameters']), tokens.get('throws'), tokens.get('result'))
        return FunctionDeclaration(
            tokens['name'], signature, tokens.get('body'), list(tokens['attributes']),
            list(tokens['modifiers']), tokens.get('generic'), tokens.get('where'),
        )

    def enrich_initializer(self, tokens):
        return InitializerDeclaration(
            tokens['body'], list(tokens['parameters']), tokens.get('kind', ''), list(tokens['attributes']),
            list(tokens['modifiers']), tokens.get('generic'), tokens.get('throws'), tokens.get('where'),
        )

    def enrich_subscript(self, tokens):
        return SubscriptDeclaration(
            tokens['result'], tokens['body'], list(tokens['parameters']), list(tokens['result_attributes']),
            list(tokens['attributes']), list(tokens['modifiers']),
        )

    def enrich_type(self, tokens, node_class):
        modifiers = list(tokens['modifiers'])
        fields = dict(
            name=tokens['name'], members=list(tokens['members']), attributes=list(tokens['attributes']),
            access_level=access_level(modifiers), generic_parameters=tokens.get('generic'),
            inheritance=tokens.get('inheritance'), where_clause=tokens.get('where'),
        )
        if node_class is ClassDeclaration:
            fields['is_final'] = 'final' in modifiers
        elif node_class is EnumDeclaration:
            fields['is_indirect'] = 'indirect' in modifiers
        return node_class(**fields)

    def enrich_protocol(self, tokens):
        return ProtocolDeclaration(
            tokens['name'], list(tokens['members']), list(tokens['attributes']),
            access_level(list(tokens['modifiers'])), tokens.get('inheritance'),
        )

    def enrich_extension(self, tokens):
        return ExtensionDeclaration(
            tokens['type'], list(tokens['members']), list(tokens['attributes']),
            access_level(list(tokens['modifiers'])), tokens.get('inheritance'), tokens.get('where'),
        )

    def enrich_protocol_property(self, tokens):
        return ProtocolPropertyMember(
            tokens['name'], tokens['type'], tokens['block'], list(tokens['attributes']), list(tokens['modifiers']),
        )

    def enrich_protocol_subscript(self, tokens):
        return ProtocolSubscriptMember(
            tokens['result'], tokens['block'], list(tokens['parameters']), list(tokens['result_attributes']),
            list(tokens['attributes']), list(tokens['modifiers']),
        )

    def _build_grammar(self):
        expression = Forward()
        expression_nt = Forward()  # no trailing closures: conditions, switch subjects, for-in collections
        pattern_expression = Forward()  # no trailing closures, no assignment
        statement = Forward()
        type_ = Forward()
        pattern = Forward()
        declaration = Forward()

        identifier = Regex(IDENTIFIER).add_condition(lambda t: t[0] not in RESERVED_WORDS, call_during_try=True)
        label = Regex(WORD + r'(?=\s*:(?!:))') + COLON
        statements = ZeroOrMore(statement + Opt(SEMI))
        code_block = (LBRACE + Group(statements) + RBRACE).set_parse_action(self.make_code_block)

        # Attributes and types, kept as text
        attribute = original_text_for(Regex(r'@' + WORD) + Opt(Regex(r'\((?:[^()]|\([^()]*\))*\)').leave_whitespace()))
        attributes = Group(ZeroOrMore(attribute))
        type_name = Regex(WORD + r'|`[^`\n]+`').add_condition(lambda t: t[0] not in RESERVED_WORDS, call_during_try=True)
        generic_type_arguments = Literal('<') + DelimitedList(type_) + Literal('>')
        type_identifier = DelimitedList(type_name + Opt(generic_type_arguments), delim='.')
        tuple_type_element = (Opt(Regex(WORD + r'(?:\s+' + WORD + r')?\s*:(?!:)')) + type_ + Opt(Literal('...')))
        paren_type = Literal('(') + Opt(DelimitedList(tuple_type_element)) + Literal(')')
        collection_type = Literal('[') + type_ + Opt(Literal(':') + type_) + Literal(']')
        type_base = (ZeroOrMore(attribute) + Opt(Regex(r'(?:some|any|inout|__owned|__shared)(?!\w)'))
                     + (paren_type | collection_type | type_identifier))
        type_suffix = Regex(r'(?<!\s)[?!]').leave_whitespace() | Regex(r'\.(?:Type|Protocol)(?!\w)')
        function_type_tail = Opt(Regex(r'(?:re)?throws(?!\w)')) + Literal('->') + type_
        composed_type = type_base + ZeroOrMore(type_suffix)
        type_ <<= original_text_for(DelimitedList(composed_type, delim='&') + Opt(function_type_tail)).add_parse_action(self.make_text)

        type_annotation = (COLON + attributes + type_).set_parse_action(self.make_type_annotation)
        generic_clause = Regex(GENERIC_CLAUSE).set_parse_action(self.make_text)
        inheritance = (COLON + DelimitedList(type_)).set_parse_action(self.make_inheritance)
        type_where = (Keyword('where') + Regex(r'[^{]+')).set_parse_action(self.make_clause)
        function_where = (Keyword('where') + Regex(r'[^{}\n]+')).set_parse_action(self.make_clause)

        # Patterns, kept as text
        decl_pattern = Forward()
        decl_pattern <<= Regex(r'_(?!\w)') | identifier | (Literal('(') + Opt(DelimitedList(decl_pattern)) + Literal(')'))
        typed_pattern = (original_text_for(decl_pattern).add_parse_action(self.make_text) + Opt(type_annotation)).set_parse_action(lambda t: ''.join(t))
        tuple_pattern = Literal('(') + Opt(DelimitedList(Opt(Regex(WORD + r'\s*:(?!:)')) + pattern)) + Literal(')')
        enum_case_pattern = Regex(r'(?:' + WORD + r')?(?:\.' + WORD + r')+') + Opt(tuple_pattern)
        binding_pattern = (Keyword('let') | Keyword('var')) + pattern
        is_pattern = Keyword('is') + type_
        pattern_choice = is_pattern ^ binding_pattern ^ enum_case_pattern ^ tuple_pattern ^ pattern_expression
        pattern <<= original_text_for(pattern_choice + Opt(Regex(r'\?').leave_whitespace())).add_parse_action(self.make_stripped)

        # Primary expressions
        literal = (Regex(STRING) | Regex(NUMBER) | Keyword('nil') | Keyword('true') | Keyword('false')
                   | Regex(r'#(?:file|fileID|filePath|line|column|function|dsohandle)(?!\w)'))
        literal.set_parse_action(self.make_literal)
        generic_arguments = Regex(GENERIC_ARGUMENTS).leave_whitespace()
        argument_names = Regex(ARGUMENT_NAMES).leave_whitespace()
        identifier_expression = (identifier + Opt(generic_arguments)("generic")).set_parse_action(self.make_identifier)
        self_suffix = (Regex(r'\.init(?!\w)')("init") | Regex(r'\.' + WORD)("member")
                       | Group(LBRACK + DelimitedList(expression) + RBRACK)("subscript"))
        self_expression = (kw('self') + Opt(self_suffix)).set_parse_action(lambda t: self.make_self(t, SelfExpression))
        super_expression = (kw('super') + Opt(self_suffix)).set_parse_action(lambda t: self.make_self(t, SuperclassExpression))
        key_path = (Suppress(Regex(r'#keyPath(?!\w)')) + LPAR + expression + RPAR).set_parse_action(lambda t: KeyPathExpression(t[0]))
        selector = (Suppress(Regex(r'#selector(?!\w)')) + LPAR + Opt(Regex(r'(?:getter|setter)(?=\s*:)')("kind") + COLON)
                    + named(expression, "expression") + RPAR).set_parse_action(self.make_selector)
        closure_signature = Regex(CLOSURE_SIGNATURE).set_parse_action(self.make_text) + kw('in')
        closure = (LBRACE + Opt(named(closure_signature, "signature")) + Group(statements)("statements") + RBRACE)
        closure.set_parse_action(self.make_closure)
        dictionary = ((LBRACK + COLON + RBRACK).set_parse_action(lambda: DictionaryLiteralExpression([]))
                      | (LBRACK + DelimitedList(Group(expression + COLON + expression), allow_trailing_delim=True)
                         + RBRACK).set_parse_action(self.make_dictionary))
        array = (LBRACK + Group(Opt(DelimitedList(expression, allow_trailing_delim=True))) + RBRACK)
        array.set_parse_action(lambda t: ArrayLiteralExpression(list(t[0])))
        parenthesized = (LPAR + Opt(DelimitedList(Group(Opt(label) + expression))) + RPAR).set_parse_action(self.make_tuple)
        implicit_member = Regex(r'\.' + WORD).set_parse_action(lambda t: ImplicitMemberExpression(t[0][1:]))
        wildcard = Regex(r'_(?!\w)').set_parse_action(lambda: WildcardExpression())
        operator_reference = Regex(OPERATOR + r'(?=\s*[,)])').set_parse_action(lambda t: RawExpression(t[0]))
        raw_key_path = Regex(r'\\(?:' + WORD + r')?(?:\??\.' + WORD + r')+').set_parse_action(lambda t: RawExpression(t[0]))
        primary = (literal | key_path | selector | self_expression | super_expression | closure | dictionary
                   | array | parenthesized | implicit_member | wildcard | operator_reference | raw_key_path
                   | identifier_expression)

        # Postfix suffixes
        argument = (Opt(label) + expression).set_parse_action(self.make_argument)
        call = Group(LPAR + Opt(DelimitedList(argument)) + RPAR).set_parse_action(lambda t: ('call', list(t[0])))
        trailing_closure = closure.copy().add_parse_action(lambda t: ('closure', t[0]))
        init_suffix = (Regex(r'\.init(?!\w)') + Opt(argument_names)("names")).set_parse_action(
            lambda t: ('init', split_argument_names(t.get('names'))))
        self_postfix = Regex(r'\.self(?!\w)').set_parse_action(lambda: ('self',))
        member = (Regex(r'\.(?:' + WORD + r'|`[^`\n]+`|\d+)') + Opt(generic_arguments)("generic")
                  + Opt(argument_names)("names")).set_parse_action(self.make_member_suffix)
        subscript = (LBRACK + Group(DelimitedList(expression)) + RBRACK).set_parse_action(lambda t: ('subscript', list(t[0])))
        forced = Regex(FORCED_UNWRAP).set_parse_action(lambda: ('force',))
        optional = Regex(OPTIONAL_CHAINING).set_parse_action(lambda: ('optional',))
        postfix_operator = Regex(POSTFIX).add_condition(lambda t: t[0] not in ('?', '!', '='), call_during_try=True)
        postfix_operator.add_parse_action(lambda t: ('postfix', t[0]))
        suffixes_nt = forced | optional | init_suffix | self_postfix | member | call | subscript | postfix_operator
        suffixes = forced | optional | init_suffix | self_postfix | member | call | trailing_closure | subscript | postfix_operator

        # Operators
        prefix_operator = Regex(PREFIX).add_condition(lambda t: t[0] not in ('=', '?'), call_during_try=True)
        try_operator = Regex(TRY).set_parse_action(lambda t: ('try', t[0]))
        type_cast = (Regex(TYPE_CAST) + type_).set_parse_action(lambda t: ('cast', t[0], t[1]))

        def chain(forward, suffix_set, assignment):
            excluded = ('?', '!') if assignment else ('?', '!', '=')
            postfix = (primary + ZeroOrMore(suffix_set)).set_parse_action(self.enrich_postfix)
            prefix = (Opt(prefix_operator) + postfix).set_parse_action(self.enrich_prefix)
            operand = Opt(try_operator) + prefix
            binary = (Regex(SPACED_BINARY) | Regex(UNSPACED_BINARY)).add_condition(
                lambda t: t[0] not in excluded, call_during_try=True)
            binary.add_parse_action(lambda t: ('binary', t[0]))
            ternary = (Suppress(Regex(TERNARY)) + forward + COLON).set_parse_action(lambda t: ('ternary', t[0]))
            infix = (ternary + operand) | type_cast | (binary + operand)
            forward <<= (operand + ZeroOrMore(infix)).set_parse_action(self.fold_binary)

        chain(expression, suffixes, assignment=True)
        chain(expression_nt, suffixes_nt, assignment=True)
        chain(pattern_expression, suffixes_nt, assignment=False)

        # Statements
        availability = Regex(r'#(?:un)?available\s*\([^)]*\)').set_parse_action(lambda t: AvailabilityCondition(t[0]))
        case_condition = (Keyword('case') + pattern + EQ + expression_nt).set_parse_action(self.make_pattern_condition)
        binding_condition = ((Keyword('let') | Keyword('var')) + typed_pattern + EQ + expression_nt)
        binding_condition.set_parse_action(self.make_pattern_condition)
        condition = availability | case_condition | binding_condition | expression_nt
        condition_list = Group(DelimitedList(condition))

        if_statement = Forward()
        if_statement <<= (kw('if') + condition_list("conditions") + code_block("body")
                          + Opt(kw('else') + named(if_statement | code_block, "else"))).set_parse_action(self.enrich_if)
        guard_statement = (kw('guard') + condition_list + kw('else') + code_block).set_parse_action(
            lambda t: GuardStatement(list(t[0]), t[1]))
        while_statement = (kw('while') + condition_list + code_block).set_parse_action(
            lambda t: WhileStatement(list(t[0]), t[1]))
        repeat_statement = (kw('repeat') + code_block + kw('while') + expression_nt).set_parse_action(
            lambda t: RepeatWhileStatement(t[0], t[1]))
        for_in_statement = (kw('for') + Opt(Keyword('case'))("case") + named(pattern, "pattern") + kw('in')
                            + named(expression_nt, "collection") + Opt(kw('where') + named(expression_nt, "where"))
                            + code_block("body")).set_parse_action(self.enrich_for_in)

        case_item = (named(pattern, "pattern") + Opt(kw('where') + named(expression_nt, "where"))).set_parse_action(self.make_case_item)
        case_label = (kw('case') + Group(DelimitedList(case_item)) + COLON).set_parse_action(lambda t: ('case', list(t[0])))
        default_label = (Opt(Regex(r'@unknown(?!\w)')) + kw('default') + COLON).set_parse_action(lambda: ('default',))
        switch_case = ((case_label | default_label) + Group(statements)).set_parse_action(self.enrich_switch_case)
        switch_statement = (kw('switch') + expression_nt + LBRACE + Group(ZeroOrMore(switch_case)) + RBRACE)
        switch_statement.set_parse_action(lambda t: SwitchStatement(t[0], list(t[1])))

        catch_clause = (kw('catch') + Opt(~Literal('{') + named(pattern, "pattern")) + Opt(kw('where') + named(expression_nt, "where"))
                        + code_block("body")).set_parse_action(self.make_catch)
        do_statement = (kw('do') + code_block + Group(ZeroOrMore(catch_clause))).set_parse_action(
            lambda t: DoStatement(t[0], list(t[1])))
        defer_statement = (kw('defer') + code_block).set_parse_action(lambda t: DeferStatement(t[0]))
        throw_statement = (kw('throw') + expression).set_parse_action(lambda t: ThrowStatement(t[0]))
        same_line = FollowedBy(Regex(r'[ \t]*[^\s;}]')).leave_whitespace()
        return_statement = (kw('return') + Opt(same_line + expression)).set_parse_action(
            lambda t: ReturnStatement(t[0] if t else None))
        control_transfer = Regex(r'(?:break|continue)(?!\w)(?:[ \t]+' + WORD + r')?|fallthrough(?!\w)')
        control_transfer.set_parse_action(lambda t: RawStatement(t[0]))
        compiler_control = Regex(r'#(?:if|elseif|else|endif)(?!\w)[^\n]*|#(?:warning|error|sourceLocation)\([^\n]*')
        compiler_control.set_parse_action(lambda t: RawStatement(t[0].strip()))
        labeled_statement = (Regex(WORD + r'(?=\s*:\s*(?:for|while|repeat|if|switch|do)\b)') + COLON
                             + (for_in_statement | while_statement | repeat_statement | if_statement
                                | switch_statement | do_statement))
        labeled_statement.set_parse_action(lambda t: LabeledStatement(t[0], t[1]))

        statement <<= (compiler_control | declaration | labeled_statement | if_statement | guard_statement
                       | while_statement | repeat_statement | for_in_statement | switch_statement | do_statement
                       | defer_statement | return_statement | throw_statement | control_transfer | expression)

        # Declarations
        modifier = (Regex(r'(?:' + '|'.join(MODIFIERS) + r')(?!\w)(?:\s*\(\s*(?:set|safe|unsafe)\s*\))?')
                    | Regex(r'class(?=\s+(?:func|var|let|subscript|static|final|override|open|public|internal|private|fileprivate)\b)'))
        modifier.set_parse_action(lambda t: ''.join(t[0].split()))
        head = attributes("attributes") + Group(ZeroOrMore(modifier))("modifiers")
        throws = Regex(r'(?:re)?throws(?!\w)')
        parameter = original_text_for(
            Regex(r'(?:' + WORD + r'|`[^`]+`)(?:\s+(?:' + WORD + r'|`[^`]+`))?(?=\s*:)') + COLON + type_
            + Opt(Literal('...')) + Opt(EQ + expression)).add_parse_action(self.make_stripped)
        parameter_clause = Group(LPAR + Opt(DelimitedList(parameter)) + RPAR)
        mutation = Regex(r'(?:non)?mutating(?!\w)')
        member_block = Group(LBRACE + ZeroOrMore((compiler_control | declaration) + Opt(SEMI)) + RBRACE)

        import_declaration = (attributes("attributes") + kw('import')
                              + Opt(Regex(r'(?:typealias|struct|class|enum|protocol|let|var|func)(?=\s)'))("kind")
                              + Regex(WORD + r'(?:\.' + WORD + r')*')("path")).set_parse_action(self.enrich_import)
        operator_declaration = original_text_for(
            Regex(r'(?:prefix|postfix|infix)(?!\w)') + Keyword('operator') + Regex(r'[/=\-+!*%<>&|^~?.]+')
            + Opt(COLON + identifier)).add_parse_action(lambda t: OperatorDeclaration(' '.join(t[0].split())))
        precedence_attribute = (Regex(r'(?:higherThan|lowerThan|associativity|assignment)(?=\s*:)') + COLON
                                + DelimitedList(Regex(WORD))).set_parse_action(lambda t: f"{t[0]}: {', '.join(t[1:])}")
        precedence_group = (kw('precedencegroup') + identifier + LBRACE + Group(ZeroOrMore(precedence_attribute))
                            + RBRACE).set_parse_action(lambda t: PrecedenceGroupDeclaration(t[0], list(t[1])))
        typealias = (head + kw('typealias') + identifier("name") + Opt(generic_clause)("generic") + EQ
                     + named(type_, "assignment")).set_parse_action(self.enrich_typealias)

        pattern_initializer = (typed_pattern("pattern") + Opt(EQ + named(expression, "expression")))
        pattern_initializer.set_parse_action(self.make_pattern_initializer)
        constant = (head + kw('let') + Group(DelimitedList(pattern_initializer))("initializers"))
        constant.set_parse_action(self.enrich_constant)

        getter = (attributes("attributes") + Opt(mutation)("mutation") + kw('get') + code_block("body"))
        getter.set_parse_action(self.make_getter)
        setter = (attributes("attributes") + Opt(mutation)("mutation") + kw('set')
                  + Opt(LPAR + identifier("name") + RPAR) + code_block("body")).set_parse_action(self.make_setter)
        getter_setter_block = (LBRACE + ((getter + Opt(setter)) | (setter + getter)) + RBRACE)
        getter_setter_block.set_parse_action(self.make_getter_setter_block)
        get_keyword = original_text_for(ZeroOrMore(attribute) + Opt(mutation) + Keyword('get'))
        set_keyword = original_text_for(ZeroOrMore(attribute) + Opt(mutation) + Keyword('set'))
        keyword_block = (LBRACE + ((get_keyword("getter") + Opt(set_keyword("setter")))
                                   | (set_keyword("setter") + get_keyword("getter"))) + RBRACE)
        keyword_block.set_parse_action(self.make_keyword_block)
        will_set = (attributes("attributes") + kw('willSet') + Opt(LPAR + identifier("name") + RPAR)
                    + code_block("body")).set_parse_action(lambda t: WillSetClause(t['body'], list(t['attributes']), t.get('name')))
        did_set = (attributes("attributes") + kw('didSet') + Opt(LPAR + identifier("name") + RPAR)
                   + code_block("body")).set_parse_action(lambda t: DidSetClause(t['body'], list(t['attributes']), t.get('name')))
        observer_block = (LBRACE + ((will_set + Opt(did_set)) | (did_set + Opt(will_set))) + RBRACE)
        observer_block.set_parse_action(self.make_observer_block)

        getter_setter_body = (identifier("name") + type_annotation("type") + getter_setter_block("block")).set_parse_action(
            lambda t: GetterSetterBody(t['name'], t['type'], t['block']))
        keyword_body = (identifier("name") + type_annotation("type") + keyword_block("block")).set_parse_action(
            lambda t: GetterSetterKeywordBody(t['name'], t['type'], t['block']))
        code_block_body = (identifier("name") + type_annotation("type") + code_block("body")).set_parse_action(
            lambda t: CodeBlockBody(t['name'], t['type'], t['body']))
        observer_body = (identifier("name") + Opt(type_annotation("type")) + Opt(EQ + named(expression_nt, "initializer"))
                         + observer_block("block")).set_parse_action(
            lambda t: WillSetDidSetBody(t['name'], t['block'], t.get('type'), t.get('initializer')))
        initializer_list_body = Group(DelimitedList(pattern_initializer)).set_parse_action(
            lambda t: InitializerListBody(list(t[0])))
        variable_body = getter_setter_body | keyword_body | code_block_body | observer_body | initializer_list_body
        variable = (head + kw('var') + named(variable_body, "body")).set_parse_action(self.enrich_variable)

        function_name = identifier | Regex(r'[/=\-+!*%<>&|^~?.]+')
        function_result = (ARROW + attributes + type_).set_parse_action(lambda t: FunctionResult(t[1], list(t[0])))
        function = (head + kw('func') + function_name("name") + Opt(generic_clause)("generic")
                    + parameter_clause("parameters") + Opt(throws)("throws") + Opt(function_result("result"))
                    + Opt(function_where("where")) + Opt(code_block("body"))).set_parse_action(self.enrich_function)
        initializer = (head + kw('init') + Opt(Regex(r'[?!]').leave_whitespace())("kind") + Opt(generic_clause)("generic")
                       + parameter_clause("parameters") + Opt(throws)("throws") + Opt(function_where("where"))
                       + code_block("body")).set_parse_action(self.enrich_initializer)
        deinitializer = (head + kw('deinit') + code_block("body")).set_parse_action(
            lambda t: DeinitializerDeclaration(t['body'], list(t['attributes'])))
        subscript_declaration = (head + kw('subscript') + parameter_clause("parameters") + ARROW
                                 + attributes("result_attributes") + named(type_, "result")
                                 + named(getter_setter_block | keyword_block | code_block, "body"))
        subscript_declaration.set_parse_action(self.enrich_subscript)

        def type_declaration(keyword, node_class, members):
            grammar = (head + kw(keyword) + identifier("name") + Opt(generic_clause)("generic")
                       + Opt(inheritance("inheritance")) + Opt(type_where("where")) + members("members"))
            return grammar.set_parse_action(lambda t: self.enrich_type(t, node_class))

        enum_case_element = identifier + Opt(paren_type) + Opt(EQ + expression)
        enum_case = original_text_for(attributes + Opt(Keyword('indirect')) + Keyword('case')
                                      + DelimitedList(enum_case_element)).add_parse_action(lambda t: EnumCaseMember(t[0].strip()))
        enum_block = Group(LBRACE + ZeroOrMore((compiler_control | enum_case | declaration) + Opt(SEMI)) + RBRACE)

        protocol_property = (head + kw('var') + identifier("name") + type_annotation("type") + keyword_block("block"))
        protocol_property.set_parse_action(self.enrich_protocol_property)
        protocol_subscript = (head + kw('subscript') + parameter_clause("parameters") + ARROW
                              + attributes("result_attributes") + named(type_, "result") + keyword_block("block"))
        protocol_subscript.set_parse_action(self.enrich_protocol_subscript)
        protocol_initializer = original_text_for(
            head + Keyword('init') + Opt(Regex(r'[?!]').leave_whitespace()) + Opt(generic_clause) + parameter_clause
            + Opt(throws) + Opt(function_where) + ~Literal('{')).add_parse_action(lambda t: RawDeclaration(t[0].strip()))
        associated_type = original_text_for(
            head + Keyword('associatedtype') + identifier + Opt(inheritance) + Opt(EQ + type_)
        ).add_parse_action(lambda t: RawDeclaration(' '.join(t[0].split())))
        protocol_block = Group(LBRACE + ZeroOrMore((compiler_control | protocol_property | protocol_subscript
                                                    | protocol_initializer | associated_type | declaration)
                                                   + Opt(SEMI)) + RBRACE)
        protocol = (head + kw('protocol') + identifier("name") + Opt(inheritance("inheritance"))
                    + protocol_block("members")).set_parse_action(self.enrich_protocol)
        extension = (head + kw('extension') + named(type_, "type") + Opt(inheritance("inheritance"))
                     + Opt(type_where("where")) + member_block("members")).set_parse_action(self.enrich_extension)

        declaration <<= (import_declaration | operator_declaration | precedence_group | typealias | constant
                         | variable | function | initializer | deinitializer | subscript_declaration
                         | type_declaration('class', ClassDeclaration, member_block)
                         | type_declaration('struct', StructDeclaration, member_block)
                         | type_declaration('enum', EnumDeclaration, enum_block)
                         | protocol | extension)

        program = statements.copy().set_parse_action(lambda t: TopLevelDeclaration(list(t)))
        program.ignore(Suppress(cpp_style_comment))
        return program

    def parse(self, text: str) -> TopLevelDeclaration:
        """
        Parses Swift source text.

        Raises:
            SwiftParseError: If the text is not in the supported Swift subset.
        """
        limit = sys.getrecursionlimit()
        sys.setrecursionlimit(max(limit, RECURSION_LIMIT))
        try:
            tree = self.program.parse_string(text, parse_all=True)[0]
        except ParseBaseException as e:
            raise SwiftParseError(e.msg, e.lineno, e.col, e.line) from e
        except RecursionError as e:
            raise SwiftParseError("source is nested too deeply") from e
        finally:
            sys.setrecursionlimit(limit)
        logger.debug("Parsed %d top-level statements", len(tree.statements))
        return tree


def parse_program(text: str) -> TopLevelDeclaration:
    """Convenience function to parse a program."""
    return SwiftParser().parse(text)
