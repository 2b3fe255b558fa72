"""
Translate GraphQL query documents into executor field trees.

Fragments are inlined, variables substituted and ``@skip`` / ``@include``
honoured. Type conditions on fragments are not checked.
"""

from collections.abc import Mapping
from typing import Any

from graphql import GraphQLSyntaxError, parse
from graphql.language import (
    DirectiveNode,
    DocumentNode,
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    InlineFragmentNode,
    OperationDefinitionNode,
    OperationType,
    SelectionSetNode,
)
from graphql.pyutils import Undefined
from graphql.utilities import value_from_ast_untyped

from ..errors import InvalidOperation, InvalidSelection, QuerySyntaxError
from ..resolution.request import FieldRequest


def parse_query(
    source: str,
    variables: Mapping[str, Any] | None = None,
    operation_name: str | None = None,
) -> list[FieldRequest]:
    """Parse a query document into root field requests.

    Raises:
        QuerySyntaxError: If the document is not valid GraphQL syntax
        InvalidOperation: If no single query operation can be selected
    """
    try:
        document = parse(source)
    except GraphQLSyntaxError as e:
        raise QuerySyntaxError(e.message) from e

    operation = _select_operation(document, operation_name)
    fragments = {
        definition.name.value: definition
        for definition in document.definitions
        if isinstance(definition, FragmentDefinitionNode)
    }
    values = _variable_values(operation, variables or {})
    return _FieldTreeBuilder(fragments, values).build(operation.selection_set)


def operation_label(source: str) -> str | None:
    """Best-effort operation name for logging; never raises."""
    try:
        document = parse(source)
    except GraphQLSyntaxError:
        return None
    for definition in document.definitions:
        if isinstance(definition, OperationDefinitionNode):
            return definition.name.value if definition.name else "unnamed_operation"
    return None


def _select_operation(
    document: DocumentNode, operation_name: str | None
) -> OperationDefinitionNode:
    operations = [
        definition
        for definition in document.definitions
        if isinstance(definition, OperationDefinitionNode)
    ]
    if not operations:
        raise InvalidOperation("Document contains no operations")

    if operation_name is not None:
        matches = [op for op in operations if op.name and op.name.value == operation_name]
        if not matches:
            raise InvalidOperation(f"Unknown operation named '{operation_name}'")
        operation = matches[0]
    elif len(operations) > 1:
        raise InvalidOperation(
            "Must provide operation name if query contains multiple operations"
        )
    else:
        operation = operations[0]

    if operation.operation != OperationType.QUERY:
        raise InvalidOperation(
            f"Only query operations are supported, got {operation.operation.value}"
        )
    return operation


def _variable_values(
    operation: OperationDefinitionNode, variables: Mapping[str, Any]
) -> dict[str, Any]:
    values = dict(variables)
    for definition in operation.variable_definitions or ():
        name = definition.variable.name.value
        if name not in values and definition.default_value is not None:
            values[name] = value_from_ast_untyped(definition.default_value)
    return values


class _FieldTreeBuilder:
    def __init__(
        self, fragments: Mapping[str, FragmentDefinitionNode], variables: Mapping[str, Any]
    ):
        self.fragments = fragments
        self.variables = variables

    def build(self, selection_set: SelectionSetNode | None) -> list[FieldRequest]:
        return self._merge(tuple(self._collect(selection_set, frozenset())))

    def _dedupe(self, request: FieldRequest) -> FieldRequest:
        if request.is_leaf:
            return request
        # Re-run merging over children that came from several fragments
        return FieldRequest(
            name=request.name,
            arguments=request.arguments,
            selections=tuple(self._merge(request.selections)),
            alias=request.alias,
        )

    def _merge(self, requests: tuple[FieldRequest, ...]) -> list[FieldRequest]:
        merged: dict[str, FieldRequest] = {}
        for request in requests:
            existing = merged.get(request.response_key)
            if existing is None:
                merged[request.response_key] = request
            elif existing.name == request.name and existing.arguments == request.arguments:
                merged[request.response_key] = FieldRequest(
                    name=existing.name,
                    arguments=existing.arguments,
                    selections=existing.selections + request.selections,
                    alias=existing.alias,
                )
            else:
                raise InvalidSelection(
                    "",
                    request.name,
                    f"Fields '{request.response_key}' conflict: they select different fields",
                )
        return [self._dedupe(request) for request in merged.values()]

    def _collect(self, selection_set: SelectionSetNode | None, visited: frozenset[str]):
        if selection_set is None:
            return
        for selection in selection_set.selections:
            if not self._included(selection.directives):
                continue
            if isinstance(selection, FieldNode):
                yield FieldRequest(
                    name=selection.name.value,
                    arguments=self._arguments(selection),
                    selections=tuple(self._collect(selection.selection_set, visited)),
                    alias=selection.alias.value if selection.alias else None,
                )
            elif isinstance(selection, InlineFragmentNode):
                yield from self._collect(selection.selection_set, visited)
            elif isinstance(selection, FragmentSpreadNode):
                name = selection.name.value
                fragment = self.fragments.get(name)
                if fragment is None:
                    raise InvalidOperation(f"Unknown fragment '{name}'")
                if name in visited:
                    raise InvalidOperation(f"Fragment '{name}' spreads itself")
                yield from self._collect(fragment.selection_set, visited | {name})

    def _included(self, directives: tuple[DirectiveNode, ...] | None) -> bool:
        for directive in directives or ():
            arguments = self._arguments(directive)
            if directive.name.value == "skip" and arguments.get("if") is True:
                return False
            if directive.name.value == "include" and arguments.get("if") is False:
                return False
        return True

    def _arguments(self, node: FieldNode | DirectiveNode) -> dict[str, Any]:
        # Arguments bound to variables that were not supplied are treated as omitted
        arguments = {}
        for argument in node.arguments or ():
            value = value_from_ast_untyped(argument.value, self.variables)
            if value is not Undefined:
                arguments[argument.name.value] = value
        return arguments
