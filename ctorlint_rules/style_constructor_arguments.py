"""
Style Rule: Constructor Argument Layout

Constructors with up to two parameters may keep them on one line. Once a
constructor takes three or more, every parameter goes on its own line.

Only the first parameter that shares a line with its predecessor is
reported; the fix moves every such parameter, so a fix-all run converges
after one pass per constructor.
"""

import logging
from typing import Iterator, Optional

from ctorlint.config import resolve_newline
from ctorlint.formatter import format_node
from ctorlint.syntax import ConstructorDeclaration
from ctorlint.types import Diagnostic, Edit, Finding, Requires, Rule, RuleContext, RuleMeta

logger = logging.getLogger(__name__)

RULE_ID = "style.constructor_arguments"
MIN_PARAMETERS = 3
TITLE = "Constructor argument formatting"
FIX_TITLE = "Fix constructor argument formatting"


def _message(min_parameters: int) -> str:
    return (
        f"Constructor should have {min_parameters - 1} arguments in line, if has "
        f"{min_parameters} or more arguments each argument should be on a new line."
    )


MESSAGE = _message(MIN_PARAMETERS)


def evaluate(constructor: ConstructorDeclaration, min_parameters: int = MIN_PARAMETERS) -> Optional[Diagnostic]:
    """Return a diagnostic for the first parameter sharing a line with its predecessor.

    Constructors with fewer than min_parameters parameters are never reported.
    """
    parameters = constructor.parameters
    if len(parameters) < max(min_parameters, 2):
        return None

    previous_end_line = parameters[0].end_line
    for index in range(1, len(parameters)):
        parameter = parameters[index]
        if parameter.end_line == previous_end_line:
            return Diagnostic(
                rule=RULE_ID,
                message=_message(min_parameters),
                severity="warn",
                start_byte=parameter.start_byte,
                end_byte=parameter.end_byte,
                parameter_index=index,
                parameter_name=parameter.name,
            )
        previous_end_line = parameter.end_line

    return None


def rewrite(constructor: ConstructorDeclaration) -> ConstructorDeclaration:
    """Move every parameter that shares a line with its predecessor onto a new line.

    Only leading trivia changes. The result is flagged for the normalizer,
    which sets the final indentation.
    """
    parameters = constructor.parameters
    new_parameters = [parameters[0]]
    previous_end_line = parameters[0].end_line

    for parameter in parameters[1:]:
        if parameter.end_line == previous_end_line:
            new_parameters.append(parameter.with_leading_trivia(constructor.newline))
        else:
            new_parameters.append(parameter)
        previous_end_line = parameter.end_line

    return constructor.with_parameters(new_parameters).with_formatting_annotation()


class ConstructorArgumentsRule(Rule):
    """Rule to detect constructor parameters sharing a line."""

    meta = RuleMeta(
        id=RULE_ID,
        category="style",
        priority="P2",
        autofix_safety="safe",
        title=TITLE,
        description="Enforces constructor argument formatting.",
        langs=["csharp"],
    )

    requires = Requires(syntax=True)

    def visit(self, ctx: RuleContext) -> Iterator[Finding]:
        """Visit the file and report constructors whose parameters share a line."""
        if ctx.language not in self.meta.langs or ctx.tree is None:
            return

        config = ctx.config or {}
        min_parameters = int(config.get("min_parameters", MIN_PARAMETERS))
        newline = resolve_newline(config.get("newline"))

        for node in ctx.adapter.iter_constructors(ctx.tree):
            ctx.check_cancelled()

            if node.has_error:
                logger.debug(f"Skipping constructor with parse errors at byte {node.start_byte} in {ctx.file_path}")
                continue

            constructor = ConstructorDeclaration.from_node(node, ctx.source, newline=newline)
            diagnostic = evaluate(constructor, min_parameters)
            if diagnostic is None:
                continue

            fixed = format_node(rewrite(constructor), ctx.language, **config)

            yield Finding(
                rule=diagnostic.rule,
                message=diagnostic.message,
                file=ctx.file_path,
                start_byte=diagnostic.start_byte,
                end_byte=diagnostic.end_byte,
                severity=diagnostic.severity,
                autofix=[Edit(
                    start_byte=constructor.start_byte,
                    end_byte=constructor.end_byte,
                    replacement=fixed.to_source(),
                )],
                meta={
                    "fix_title": FIX_TITLE,
                    "constructor": constructor.name,
                    "parameter": diagnostic.parameter_name,
                    "parameter_index": diagnostic.parameter_index,
                },
            )


rule = ConstructorArgumentsRule()
RULES = [rule]
