from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union


# Pass-through nodes
@dataclass(frozen=True)
class RawExpression:
    """An expression emitted verbatim (operator references, in-out arguments, ...)."""
    text: str


@dataclass(frozen=True)
class RawStatement:
    """A statement emitted verbatim (break, continue, fallthrough, #if lines)."""
    text: str


@dataclass(frozen=True)
class RawDeclaration:
    """A declaration emitted verbatim."""
    text: str


# Expression classes
@dataclass(frozen=True)
class LiteralExpression:
    """Scalar literal: nil, true, false, numbers and strings, kept as written."""
    text: str


@dataclass(frozen=True)
class ArrayLiteralExpression:
    elements: List['Expression'] = field(default_factory=list)


@dataclass(frozen=True)
class DictionaryLiteralExpression:
    entries: List[Tuple['Expression', 'Expression']] = field(default_factory=list)


@dataclass(frozen=True)
class IdentifierExpression:
    name: str
    generic_arguments: Optional[str] = None  # e.g. '<Int>'


@dataclass(frozen=True)
class ImplicitMemberExpression:
    """`.member` with the base type left implicit."""
    name: str


@dataclass(frozen=True)
class WildcardExpression:
    """The discard target `_`."""


@dataclass(frozen=True)
class PrefixOperatorExpression:
    operator: str
    operand: 'Expression'


@dataclass(frozen=True)
class PostfixOperatorExpression:
    operand: 'Expression'
    operator: str


@dataclass(frozen=True)
class BinaryOperatorExpression:
    left: 'Expression'
    operator: str
    right: 'Expression'


@dataclass(frozen=True)
class AssignmentOperatorExpression:
    left: 'Expression'
    right: 'Expression'


@dataclass(frozen=True)
class TernaryConditionalOperatorExpression:
    condition: 'Expression'
    true_expression: 'Expression'
    false_expression: 'Expression'


@dataclass(frozen=True)
class TypeCastingOperatorExpression:
    kind: str  # 'is', 'as', 'as?' or 'as!'
    expression: 'Expression'
    type: str


@dataclass(frozen=True)
class TryOperatorExpression:
    kind: str  # 'try', 'try!' or 'try?'
    expression: 'Expression'


@dataclass(frozen=True)
class Argument:
    """One entry of a call argument clause; `label` is None for positional arguments."""
    expression: 'Expression'
    label: Optional[str] = None


@dataclass(frozen=True)
class FunctionCallExpression:
    callee: 'Expression'
    arguments: Optional[List[Argument]] = None  # None when there are no parentheses at all
    trailing_closure: Optional['ClosureExpression'] = None


@dataclass(frozen=True)
class ExplicitMemberExpression:
    """`base.member`; `member` is digits for positional tuple access."""
    base: 'Expression'
    member: str
    generic_arguments: Optional[str] = None
    argument_names: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class InitializerExpression:
    base: 'Expression'
    argument_names: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class PostfixSelfExpression:
    base: 'Expression'


@dataclass(frozen=True)
class SubscriptExpression:
    base: 'Expression'
    arguments: List['Expression'] = field(default_factory=list)


@dataclass(frozen=True)
class ForcedValueExpression:
    base: 'Expression'


@dataclass(frozen=True)
class OptionalChainingExpression:
    base: 'Expression'


@dataclass(frozen=True)
class ClosureExpression:
    """Closure literal. `signature` is the text before `in`, without the keyword."""
    signature: Optional[str] = None
    statements: List['Statement'] = field(default_factory=list)


@dataclass(frozen=True)
class TupleElement:
    expression: 'Expression'
    label: Optional[str] = None


@dataclass(frozen=True)
class TupleExpression:
    elements: List[TupleElement] = field(default_factory=list)


@dataclass(frozen=True)
class ParenthesizedExpression:
    expression: 'Expression'


@dataclass(frozen=True)
class SelfExpression:
    """`self`, `self.member`, `self[...]` or `self.init`."""
    member: Optional[str] = None
    subscript: Optional[List['Expression']] = None
    initializer: bool = False


@dataclass(frozen=True)
class SuperclassExpression:
    """`super.member`, `super[...]` or `super.init`."""
    member: Optional[str] = None
    subscript: Optional[List['Expression']] = None
    initializer: bool = False


@dataclass(frozen=True)
class KeyPathExpression:
    expression: 'Expression'


@dataclass(frozen=True)
class SelectorExpression:
    expression: 'Expression'
    kind: str = 'selector'  # 'selector', 'getter' or 'setter'


Expression = Union[
    RawExpression, LiteralExpression, ArrayLiteralExpression, DictionaryLiteralExpression,
    IdentifierExpression, ImplicitMemberExpression, WildcardExpression,
    PrefixOperatorExpression, PostfixOperatorExpression, BinaryOperatorExpression,
    AssignmentOperatorExpression, TernaryConditionalOperatorExpression,
    TypeCastingOperatorExpression, TryOperatorExpression, FunctionCallExpression,
    ExplicitMemberExpression, InitializerExpression, PostfixSelfExpression,
    SubscriptExpression, ForcedValueExpression, OptionalChainingExpression,
    ClosureExpression, TupleExpression, ParenthesizedExpression, SelfExpression,
    SuperclassExpression, KeyPathExpression, SelectorExpression,
]


# Statement classes
@dataclass(frozen=True)
class CodeBlock:
    statements: List['Statement'] = field(default_factory=list)


@dataclass(frozen=True)
class PatternCondition:
    """`let p = e`, `var p = e` or `case p = e` inside a condition list."""
    binding: str  # 'let', 'var' or 'case'
    pattern: str
    expression: Expression


@dataclass(frozen=True)
class AvailabilityCondition:
    text: str


Condition = Union[Expression, PatternCondition, AvailabilityCondition]


@dataclass(frozen=True)
class IfStatement:
    conditions: List[Condition]
    body: CodeBlock
    else_body: Optional[CodeBlock] = None
    else_if: Optional['IfStatement'] = None


@dataclass(frozen=True)
class GuardStatement:
    conditions: List[Condition]
    body: CodeBlock


@dataclass(frozen=True)
class WhileStatement:
    conditions: List[Condition]
    body: CodeBlock


@dataclass(frozen=True)
class RepeatWhileStatement:
    body: CodeBlock
    condition: Expression


@dataclass(frozen=True)
class ForInStatement:
    pattern: str
    collection: Expression
    body: CodeBlock
    is_case_matching: bool = False
    where_clause: Optional[Expression] = None


@dataclass(frozen=True)
class CaseItem:
    pattern: str
    where_clause: Optional[Expression] = None


@dataclass(frozen=True)
class SwitchCase:
    """A `case` label, or the `default` label when `items` is None."""
    items: Optional[List[CaseItem]]
    statements: List['Statement'] = field(default_factory=list)


@dataclass(frozen=True)
class SwitchStatement:
    subject: Expression
    cases: List[SwitchCase] = field(default_factory=list)


@dataclass(frozen=True)
class CatchClause:
    body: CodeBlock
    pattern: Optional[str] = None
    where_clause: Optional[Expression] = None


@dataclass(frozen=True)
class DoStatement:
    body: CodeBlock
    catch_clauses: List[CatchClause] = field(default_factory=list)


@dataclass(frozen=True)
class DeferStatement:
    body: CodeBlock


@dataclass(frozen=True)
class ThrowStatement:
    expression: Expression


@dataclass(frozen=True)
class ReturnStatement:
    expression: Optional[Expression] = None


@dataclass(frozen=True)
class LabeledStatement:
    label: str
    statement: 'Statement'


# Accessor blocks
@dataclass(frozen=True)
class GetterClause:
    body: CodeBlock
    attributes: List[str] = field(default_factory=list)
    mutation_modifier: Optional[str] = None


@dataclass(frozen=True)
class SetterClause:
    body: CodeBlock
    attributes: List[str] = field(default_factory=list)
    mutation_modifier: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class GetterSetterBlock:
    getter: GetterClause
    setter: Optional[SetterClause] = None


@dataclass(frozen=True)
class GetterSetterKeywordBlock:
    """Protocol requirement form `{ get set }`; each clause is kept as text."""
    getter: str
    setter: Optional[str] = None


@dataclass(frozen=True)
class WillSetClause:
    body: CodeBlock
    attributes: List[str] = field(default_factory=list)
    name: Optional[str] = None


@dataclass(frozen=True)
class DidSetClause:
    body: CodeBlock
    attributes: List[str] = field(default_factory=list)
    name: Optional[str] = None


@dataclass(frozen=True)
class WillSetDidSetBlock:
    will_set: Optional[WillSetClause] = None
    did_set: Optional[DidSetClause] = None


# Declaration classes
@dataclass(frozen=True)
class ImportDeclaration:
    path: str
    kind: Optional[str] = None
    attributes: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class TypealiasDeclaration:
    name: str
    assignment: str
    attributes: List[str] = field(default_factory=list)
    access_level: Optional[str] = None
    generic_parameters: Optional[str] = None


@dataclass(frozen=True)
class OperatorDeclaration:
    text: str


@dataclass(frozen=True)
class PatternInitializer:
    pattern: str
    expression: Optional[Expression] = None


@dataclass(frozen=True)
class ConstantDeclaration:
    initializers: List[PatternInitializer]
    attributes: List[str] = field(default_factory=list)
    modifiers: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class InitializerListBody:
    initializers: List[PatternInitializer]


@dataclass(frozen=True)
class CodeBlockBody:
    """Read-only computed property shorthand `var x: T { ... }`."""
    name: str
    type_annotation: str  # ': T'
    body: CodeBlock


@dataclass(frozen=True)
class GetterSetterBody:
    name: str
    type_annotation: str
    block: GetterSetterBlock


@dataclass(frozen=True)
class GetterSetterKeywordBody:
    name: str
    type_annotation: str
    block: GetterSetterKeywordBlock


@dataclass(frozen=True)
class WillSetDidSetBody:
    name: str
    block: WillSetDidSetBlock
    type_annotation: Optional[str] = None
    initializer: Optional[Expression] = None


VariableBody = Union[InitializerListBody, CodeBlockBody, GetterSetterBody,
                     GetterSetterKeywordBody, WillSetDidSetBody]


@dataclass(frozen=True)
class VariableDeclaration:
    body: VariableBody
    attributes: List[str] = field(default_factory=list)
    modifiers: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FunctionResult:
    type: str
    attributes: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FunctionSignature:
    parameters: List[str] = field(default_factory=list)
    throws_kind: Optional[str] = None  # 'throws' or 'rethrows'
    result: Optional[FunctionResult] = None


@dataclass(frozen=True)
class FunctionDeclaration:
    name: str
    signature: FunctionSignature
    body: Optional[CodeBlock] = None
    attributes: List[str] = field(default_factory=list)
    modifiers: List[str] = field(default_factory=list)
    generic_parameters: Optional[str] = None
    where_clause: Optional[str] = None


@dataclass(frozen=True)
class InitializerDeclaration:
    body: CodeBlock
    parameters: List[str] = field(default_factory=list)
    kind: str = ''  # '', '?' or '!'
    attributes: List[str] = field(default_factory=list)
    modifiers: List[str] = field(default_factory=list)
    generic_parameters: Optional[str] = None
    throws_kind: Optional[str] = None
    where_clause: Optional[str] = None


@dataclass(frozen=True)
class DeinitializerDeclaration:
    body: CodeBlock
    attributes: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class SubscriptDeclaration:
    result_type: str
    body: Union[CodeBlock, GetterSetterBlock, GetterSetterKeywordBlock]
    parameters: List[str] = field(default_factory=list)
    result_attributes: List[str] = field(default_factory=list)
    attributes: List[str] = field(default_factory=list)
    modifiers: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ClassDeclaration:
    name: str
    members: List['Statement'] = field(default_factory=list)
    attributes: List[str] = field(default_factory=list)
    access_level: Optional[str] = None
    is_final: bool = False
    generic_parameters: Optional[str] = None
    inheritance: Optional[str] = None  # ': A, B'
    where_clause: Optional[str] = None


@dataclass(frozen=True)
class StructDeclaration:
    name: str
    members: List['Statement'] = field(default_factory=list)
    attributes: List[str] = field(default_factory=list)
    access_level: Optional[str] = None
    generic_parameters: Optional[str] = None
    inheritance: Optional[str] = None
    where_clause: Optional[str] = None


@dataclass(frozen=True)
class EnumCaseMember:
    """An enum `case` member, kept as written."""
    text: str


@dataclass(frozen=True)
class EnumDeclaration:
    name: str
    members: List['Statement'] = field(default_factory=list)
    attributes: List[str] = field(default_factory=list)
    access_level: Optional[str] = None
    is_indirect: bool = False
    generic_parameters: Optional[str] = None
    inheritance: Optional[str] = None
    where_clause: Optional[str] = None


@dataclass(frozen=True)
class ProtocolPropertyMember:
    name: str
    type_annotation: str
    block: GetterSetterKeywordBlock
    attributes: List[str] = field(default_factory=list)
    modifiers: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ProtocolSubscriptMember:
    result_type: str
    block: GetterSetterKeywordBlock
    parameters: List[str] = field(default_factory=list)
    result_attributes: List[str] = field(default_factory=list)
    attributes: List[str] = field(default_factory=list)
    modifiers: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ProtocolDeclaration:
    name: str
    members: List['Statement'] = field(default_factory=list)
    attributes: List[str] = field(default_factory=list)
    access_level: Optional[str] = None
    inheritance: Optional[str] = None


@dataclass(frozen=True)
class ExtensionDeclaration:
    type_name: str
    members: List['Statement'] = field(default_factory=list)
    attributes: List[str] = field(default_factory=list)
    access_level: Optional[str] = None
    inheritance: Optional[str] = None
    where_clause: Optional[str] = None


@dataclass(frozen=True)
class PrecedenceGroupDeclaration:
    name: str
    attributes: List[str] = field(default_factory=list)  # e.g. 'associativity: left'


Declaration = Union[
    RawDeclaration, ImportDeclaration, TypealiasDeclaration, OperatorDeclaration,
    ConstantDeclaration, VariableDeclaration, FunctionDeclaration, InitializerDeclaration,
    DeinitializerDeclaration, SubscriptDeclaration, ClassDeclaration, StructDeclaration,
    EnumDeclaration, EnumCaseMember, ProtocolDeclaration, ProtocolPropertyMember,
    ProtocolSubscriptMember, ExtensionDeclaration, PrecedenceGroupDeclaration,
]

Statement = Union[
    Expression, Declaration, RawStatement, IfStatement, GuardStatement, WhileStatement,
    RepeatWhileStatement, ForInStatement, SwitchStatement, DoStatement, DeferStatement,
    ThrowStatement, ReturnStatement, LabeledStatement,
]


@dataclass(frozen=True)
class TopLevelDeclaration:
    """Root of a parsed source file."""
    statements: List[Statement] = field(default_factory=list)
