import logging
from typing import List, Optional

from swiftkotlin.nodes import (
    ClassDeclaration, CodeBlock, CodeBlockBody, ConstantDeclaration, DeinitializerDeclaration,
    EnumCaseMember, EnumDeclaration, ExtensionDeclaration, FunctionDeclaration,
    FunctionSignature, GetterClause, GetterSetterBlock, GetterSetterBody, GetterSetterKeywordBlock,
    GetterSetterKeywordBody, ImportDeclaration, InitializerDeclaration, InitializerListBody,
    OperatorDeclaration, PatternInitializer, PrecedenceGroupDeclaration, ProtocolDeclaration,
    ProtocolPropertyMember, ProtocolSubscriptMember, RawDeclaration, SetterClause,
    StructDeclaration, SubscriptDeclaration, TopLevelDeclaration, TypealiasDeclaration,
    VariableDeclaration, WillSetDidSetBlock, WillSetDidSetBody,
)
from swiftkotlin.statements import StatementFormatter

logger = logging.getLogger(__name__)

DECLARATION_TYPES = (
    RawDeclaration, ImportDeclaration, TypealiasDeclaration, OperatorDeclaration,
    ConstantDeclaration, VariableDeclaration, FunctionDeclaration, InitializerDeclaration,
    DeinitializerDeclaration, SubscriptDeclaration, ClassDeclaration, StructDeclaration,
    EnumDeclaration, EnumCaseMember, ProtocolDeclaration, ProtocolPropertyMember,
    ProtocolSubscriptMember, ExtensionDeclaration, PrecedenceGroupDeclaration,
)


def prefix(words: List[str]) -> str:
    """Space-joined words with one trailing space, or nothing for an empty list."""
    return ' '.join(words) + ' ' if words else ''


def optional_prefix(word: Optional[str]) -> str:
    return f"{word} " if word else ''


class DeclarationFormatter(StatementFormatter):
    """Renders declarations: a header followed by a member list or a body."""

    def is_declaration(self, node) -> bool:
        return isinstance(node, DECLARATION_TYPES)

    def format_members(self, members: List) -> str:
        """Member list of a type body; `{}` when there are no members."""
        if not members:
            return "{}"
        return f"{{\n{self.indent(self.format_statements(members))}\n}}"

    def format_type_neck(self, decl) -> str:
        where = f" {decl.where_clause}" if decl.where_clause else ''
        return f"{decl.generic_parameters or ''}{decl.inheritance or ''}{where}"

    def format_class(self, decl: ClassDeclaration) -> str:
        final = "final " if decl.is_final else ''
        head = f"{prefix(decl.attributes)}{optional_prefix(decl.access_level)}{final}class {decl.name}"
        return f"\n{head}{self.format_type_neck(decl)} {self.format_members(decl.members)}"

    def format_struct(self, decl: StructDeclaration) -> str:
        head = f"{prefix(decl.attributes)}{optional_prefix(decl.access_level)}data class {decl.name}"
        return f"{head}{self.format_type_neck(decl)} {self.format_members(decl.members)}"

    def format_enum(self, decl: EnumDeclaration) -> str:
        indirect = "indirect " if decl.is_indirect else ''
        head = f"{prefix(decl.attributes)}{optional_prefix(decl.access_level)}{indirect}enum {decl.name}"
        return f"{head}{self.format_type_neck(decl)} {self.format_members(decl.members)}"

    def format_protocol(self, decl: ProtocolDeclaration) -> str:
        head = f"{prefix(decl.attributes)}{optional_prefix(decl.access_level)}interface {decl.name}"
        return f"{head}{decl.inheritance or ''} {self.format_members(decl.members)}"

    def format_extension(self, decl: ExtensionDeclaration) -> str:
        """Lower an extension to receiver-qualified functions; other members are dropped."""
        head = f"{prefix(decl.attributes)}{optional_prefix(decl.access_level)}"
        functions = []
        for member in decl.members:
            if isinstance(member, FunctionDeclaration):
                functions.append(head + self.format_function(member, receiver=decl.type_name).lstrip('\n'))
            else:
                logger.debug("Dropping %s member of extension %s", type(member).__name__, decl.type_name)
        return '\n'.join(functions)

    def format_signature(self, signature: FunctionSignature) -> str:
        parts = [f"({', '.join(signature.parameters)})"]
        if signature.result is not None:
            parts.append(f": {prefix(signature.result.attributes)}{signature.result.type}")
        return ' '.join(parts)

    def format_function(self, decl: FunctionDeclaration, receiver: Optional[str] = None) -> str:
        head = f"{prefix(decl.attributes)}{prefix(decl.modifiers)}fun"
        name = f"{receiver}.{decl.name}" if receiver else decl.name
        where = f" {decl.where_clause}" if decl.where_clause else ''
        body = f" {self.format_code_block(decl.body)}" if decl.body is not None else ''
        signature = self.format_signature(decl.signature)
        return f"\n{head} {name}{decl.generic_parameters or ''}{signature}{where}{body}"

    def format_initializer(self, decl: InitializerDeclaration) -> str:
        head = f"{prefix(decl.attributes)}{prefix(decl.modifiers)}init{decl.kind}"
        parameters = f"({', '.join(decl.parameters)})"
        throws = f" {decl.throws_kind}" if decl.throws_kind else ''
        where = f" {decl.where_clause}" if decl.where_clause else ''
        return (f"{head}{decl.generic_parameters or ''}{parameters}{throws}{where} "
                f"{self.format_code_block(decl.body)}")

    def format_subscript(self, decl) -> str:
        parameters = f"({', '.join(decl.parameters)})"
        head = f"{prefix(decl.attributes)}{prefix(decl.modifiers)}subscript{parameters}"
        result = f"-> {prefix(decl.result_attributes)}{decl.result_type}"
        if isinstance(decl, ProtocolSubscriptMember):
            body = self.format_keyword_block(decl.block)
        else:
            body = self.format_accessor_body(decl.body)
        return f"{head} {result} {body}"

    def format_pattern_initializers(self, initializers: List[PatternInitializer]) -> str:
        rendered = []
        for initializer in initializers:
            if initializer.expression is None:
                rendered.append(initializer.pattern)
            else:
                rendered.append(f"{initializer.pattern} = {self.format_expression(initializer.expression)}")
        return ', '.join(rendered)

    # Accessor blocks
    def format_getter(self, clause: GetterClause) -> str:
        head = f"{prefix(clause.attributes)}{optional_prefix(clause.mutation_modifier)}"
        return f"{head}get {self.format_code_block(clause.body)}"

    def format_setter(self, clause: SetterClause) -> str:
        head = f"{prefix(clause.attributes)}{optional_prefix(clause.mutation_modifier)}"
        name = f"({clause.name})" if clause.name else ''
        return f"{head}set{name} {self.format_code_block(clause.body)}"

    def format_getter_setter_block(self, block: GetterSetterBlock) -> str:
        setter = f"\n{self.format_setter(block.setter)}" if block.setter is not None else ''
        return "{\n" + self.indent(f"{self.format_getter(block.getter)}{setter}") + "\n}"

    def format_keyword_block(self, block: GetterSetterKeywordBlock) -> str:
        setter = f"\n{self.indent(block.setter)}" if block.setter else ''
        return f"{{\n{self.indent(block.getter)}{setter}\n}}"

    def format_observer(self, keyword: str, clause) -> str:
        name = f"({clause.name})" if clause.name else ''
        return f"{prefix(clause.attributes)}{keyword}{name} {self.format_code_block(clause.body)}"

    def format_will_set_did_set_block(self, block: WillSetDidSetBlock) -> str:
        will_set = ''
        did_set = ''
        if block.will_set is not None:
            will_set = f"\n{self.indent(self.format_observer('willSet', block.will_set))}"
        if block.did_set is not None:
            did_set = f"\n{self.indent(self.format_observer('didSet', block.did_set))}"
        return f"{{{will_set}{did_set}\n}}"

    def format_accessor_body(self, body) -> str:
        if isinstance(body, GetterSetterBlock):
            return self.format_getter_setter_block(body)
        elif isinstance(body, GetterSetterKeywordBlock):
            return self.format_keyword_block(body)
        elif isinstance(body, WillSetDidSetBlock):
            return self.format_will_set_did_set_block(body)
        return self.format_code_block(body)

    def format_variable_body(self, body) -> str:
        if isinstance(body, InitializerListBody):
            return self.format_pattern_initializers(body.initializers)
        elif isinstance(body, CodeBlockBody):
            return f"{body.name}{body.type_annotation} {self.format_code_block(body.body)}"
        elif isinstance(body, (GetterSetterBody, GetterSetterKeywordBody)):
            return f"{body.name}{body.type_annotation} {self.format_accessor_body(body.block)}"
        elif isinstance(body, WillSetDidSetBody):
            type_annotation = body.type_annotation or ''
            initializer = f" = {self.format_expression(body.initializer)}" if body.initializer is not None else ''
            return f"{body.name}{type_annotation}{initializer} {self.format_will_set_did_set_block(body.block)}"
        return self.format_raw(body)

    def format_precedence_group(self, decl: PrecedenceGroupDeclaration) -> str:
        if not decl.attributes:
            return f"precedencegroup {decl.name} {{}}"
        attributes = '\n'.join(decl.attributes)
        return f"precedencegroup {decl.name} {{\n{self.indent(attributes)}\n}}"

    def format_declaration(self, decl) -> str:
        """Format a declaration node."""
        if isinstance(decl, ClassDeclaration):
            return self.format_class(decl)
        elif isinstance(decl, StructDeclaration):
            return self.format_struct(decl)
        elif isinstance(decl, EnumDeclaration):
            return self.format_enum(decl)
        elif isinstance(decl, ProtocolDeclaration):
            return self.format_protocol(decl)
        elif isinstance(decl, ExtensionDeclaration):
            return self.format_extension(decl)
        elif isinstance(decl, FunctionDeclaration):
            return self.format_function(decl)
        elif isinstance(decl, InitializerDeclaration):
            return self.format_initializer(decl)
        elif isinstance(decl, DeinitializerDeclaration):
            return f"{prefix(decl.attributes)}deinit {self.format_code_block(decl.body)}"
        elif isinstance(decl, (SubscriptDeclaration, ProtocolSubscriptMember)):
            return self.format_subscript(decl)
        elif isinstance(decl, ConstantDeclaration):
            head = f"{prefix(decl.attributes)}{prefix(decl.modifiers)}"
            return f"{head}val {self.format_pattern_initializers(decl.initializers)}"
        elif isinstance(decl, VariableDeclaration):
            head = f"{prefix(decl.attributes)}{prefix(decl.modifiers)}"
            return f"{head}var {self.format_variable_body(decl.body)}"
        elif isinstance(decl, ProtocolPropertyMember):
            head = f"{prefix(decl.attributes)}{prefix(decl.modifiers)}"
            return f"{head}var {decl.name}{decl.type_annotation} {self.format_keyword_block(decl.block)}"
        elif isinstance(decl, PrecedenceGroupDeclaration):
            return self.format_precedence_group(decl)
        elif isinstance(decl, ImportDeclaration):
            kind = f"{decl.kind} " if decl.kind else ''
            return f"{prefix(decl.attributes)}import {kind}{decl.path}"
        elif isinstance(decl, TypealiasDeclaration):
            head = f"{prefix(decl.attributes)}{optional_prefix(decl.access_level)}"
            return f"{head}typealias {decl.name}{decl.generic_parameters or ''} = {decl.assignment}"
        return self.format_raw(decl)


class KotlinFormatter(DeclarationFormatter):
    """Entry point of the renderer: turns a whole parsed file into Kotlin source."""

    def format(self, tree) -> str:
        if isinstance(tree, TopLevelDeclaration):
            return self.format_statements(tree.statements) + '\n'
        if isinstance(tree, CodeBlock):
            return self.format_code_block(tree)
        return self.format_statement(tree)
