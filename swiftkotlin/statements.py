from typing import List

from swiftkotlin.expressions import ExpressionFormatter
from swiftkotlin.nodes import (
    AvailabilityCondition, CaseItem, CatchClause, CodeBlock, DeferStatement, DoStatement,
    ForInStatement, GuardStatement, IfStatement, LabeledStatement, PatternCondition, RawStatement,
    RepeatWhileStatement, ReturnStatement, SwitchCase, SwitchStatement, ThrowStatement,
    WhileStatement,
)


class StatementFormatter(ExpressionFormatter):
    """Renders control flow and blocks; embedded expressions go to the expression rules."""

    def is_declaration(self, node) -> bool:
        return False

    def format_statements(self, statements: List) -> str:
        return '\n'.join(self.format_statement(s) for s in statements)

    def format_code_block(self, block: CodeBlock) -> str:
        if not block.statements:
            return "{}"
        return f"{{\n{self.indent(self.format_statements(block.statements))}\n}}"

    def format_condition(self, condition) -> str:
        if isinstance(condition, PatternCondition):
            keyword = {'let': 'val', 'var': 'var', 'case': 'case'}.get(condition.binding, condition.binding)
            return f"{keyword} {condition.pattern} = {self.format_expression(condition.expression)}"
        elif isinstance(condition, AvailabilityCondition):
            return condition.text
        return self.format_expression(condition)

    def format_conditions(self, conditions: List) -> str:
        return ', '.join(self.format_condition(c) for c in conditions)

    def format_if(self, stmt: IfStatement) -> str:
        text = f"if ({self.format_conditions(stmt.conditions)}) {self.format_code_block(stmt.body)}"
        if stmt.else_if is not None:
            text += f" else {self.format_if(stmt.else_if)}"
        elif stmt.else_body is not None:
            text += f" else {self.format_code_block(stmt.else_body)}"
        return text

    def format_for_in(self, stmt: ForInStatement) -> str:
        text = "for"
        if stmt.is_case_matching:
            text += " case"
        text += f" {stmt.pattern} in {self.format_expression(stmt.collection)} "
        if stmt.where_clause is not None:
            text += f"where {self.format_expression(stmt.where_clause)} "
        return text + self.format_code_block(stmt.body)

    def format_case_item(self, item: CaseItem) -> str:
        if item.where_clause is None:
            return item.pattern
        return f"{item.pattern} where {self.format_expression(item.where_clause)}"

    def format_switch_case(self, case: SwitchCase) -> str:
        body = self.indent(self.format_statements(case.statements))
        if case.items is None:
            return f"default:\n{body}"
        items = ', '.join(self.format_case_item(item) for item in case.items)
        return f"case {items}:\n{body}"

    def format_switch(self, stmt: SwitchStatement) -> str:
        cases = "{}"
        if stmt.cases:
            cases_text = '\n'.join(self.format_switch_case(c) for c in stmt.cases)
            cases = f"{{\n{cases_text}\n}}"
        return f"switch {self.format_expression(stmt.subject)} {cases}"

    def format_catch(self, clause: CatchClause) -> str:
        pattern = f" {clause.pattern}" if clause.pattern else ''
        where = f" where {self.format_expression(clause.where_clause)}" if clause.where_clause is not None else ''
        return f"catch{pattern}{where} {self.format_code_block(clause.body)}"

    def format_statement(self, stmt) -> str:
        """Format a statement; declarations and expressions are statements too."""
        if isinstance(stmt, IfStatement):
            return self.format_if(stmt)
        elif isinstance(stmt, GuardStatement):
            return f"guard {self.format_conditions(stmt.conditions)} else {self.format_code_block(stmt.body)}"
        elif isinstance(stmt, WhileStatement):
            return f"while {self.format_conditions(stmt.conditions)} {self.format_code_block(stmt.body)}"
        elif isinstance(stmt, RepeatWhileStatement):
            return f"repeat {self.format_code_block(stmt.body)} while {self.format_expression(stmt.condition)}"
        elif isinstance(stmt, ForInStatement):
            return self.format_for_in(stmt)
        elif isinstance(stmt, SwitchStatement):
            return self.format_switch(stmt)
        elif isinstance(stmt, DoStatement):
            parts = [f"do {self.format_code_block(stmt.body)}"]
            parts += [self.format_catch(c) for c in stmt.catch_clauses]
            return ' '.join(parts)
        elif isinstance(stmt, DeferStatement):
            return f"defer {self.format_code_block(stmt.body)}"
        elif isinstance(stmt, ThrowStatement):
            return f"throw {self.format_expression(stmt.expression)}"
        elif isinstance(stmt, ReturnStatement):
            if stmt.expression is None:
                return "return"
            return f"return {self.format_expression(stmt.expression)}"
        elif isinstance(stmt, LabeledStatement):
            return f"{stmt.label} = {self.format_statement(stmt.statement)}"
        elif isinstance(stmt, CodeBlock):
            return self.format_code_block(stmt)
        elif isinstance(stmt, RawStatement):
            return stmt.text
        elif self.is_declaration(stmt):
            return self.format_declaration(stmt)
        return self.format_expression(stmt)
