"""
Query executor.

Walks a requested field tree depth-first and materializes a response tree
with exactly the requested shape. The whole request is planned (and checked)
before any resolver runs; data-level failures during execution are recorded
at the response path where they happen and the field's value becomes null.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from functools import partial
from typing import Any

from ..errors import InvalidArgument, InvalidSelection, MediaGraphError, ResolutionError
from ..logging import get_logger
from .registry import (
    ROOT_TYPE,
    FieldDefinition,
    FieldResolverRegistry,
    ResolverContext,
    project_attribute,
)
from .request import FieldRequest

logger = get_logger(__name__)

TYPENAME_FIELD = "__typename"

Path = list[str | int]


@dataclass(frozen=True)
class FieldPlan:
    """A validated field, ready to execute."""

    key: str
    name: str
    parent_type: str
    definition: FieldDefinition | None = None
    attribute: str | None = None
    arguments: dict[str, Any] = field(default_factory=dict)
    children: tuple[FieldPlan, ...] = ()


@dataclass
class FieldError:
    """An error attached to a location in the response tree."""

    message: str
    code: str
    path: Path

    @classmethod
    def from_exception(cls, exc: MediaGraphError, path: Path) -> FieldError:
        return cls(message=str(exc), code=exc.code, path=list(path))

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "path": self.path, "extensions": {"code": self.code}}


@dataclass
class ExecutionResult:
    """The response tree plus any field-level errors."""

    data: dict[str, Any]
    errors: list[FieldError] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"data": self.data}
        if self.errors:
            result["errors"] = [error.to_dict() for error in self.errors]
        return result


def format_request_error(exc: MediaGraphError) -> dict[str, Any]:
    """Serialize a request-level error (no response tree, no path)."""
    return {"message": str(exc), "extensions": {"code": exc.code}}


class QueryExecutor:
    """Executes field trees against a resolver registry.

    Holds no per-request state: every ``execute`` call plans and walks its
    own tree, so one executor can serve concurrent queries.
    """

    def __init__(self, registry: FieldResolverRegistry, context: ResolverContext):
        self.registry = registry
        self.context = context

    async def execute(self, request: FieldRequest | Sequence[FieldRequest]) -> ExecutionResult:
        """Execute one or more root fields.

        Raises:
            InvalidArgument: If a root argument is missing or malformed
            UnknownField: If the request names a field the schema does not have
            InvalidSelection: If sub-selections do not match the field types
        """
        roots = [request] if isinstance(request, FieldRequest) else list(request)
        plans = self.plan(roots)

        errors: list[FieldError] = []
        values = await self._gather_in_order(
            [partial(self._complete_field, plan, None, [plan.key]) for plan in plans], errors
        )
        data = {plan.key: value for plan, value in zip(plans, values)}

        logger.info(
            "Query executed",
            fields=[plan.name for plan in plans],
            error_count=len(errors),
        )
        return ExecutionResult(data=data, errors=errors)

    def plan(self, roots: Sequence[FieldRequest]) -> tuple[FieldPlan, ...]:
        """Check a request against the registry and build its execution plan."""
        if not roots:
            raise InvalidSelection(ROOT_TYPE, "", "A query must select at least one field")
        return self._plan_selections(ROOT_TYPE, roots)

    def _plan_selections(
        self, type_name: str, selections: Sequence[FieldRequest]
    ) -> tuple[FieldPlan, ...]:
        plans: dict[str, FieldPlan] = {}
        for request in selections:
            if request.response_key in plans:
                raise InvalidSelection(
                    type_name,
                    request.name,
                    f"Field '{request.response_key}' is selected more than once on {type_name}",
                )
            plans[request.response_key] = self._plan_field(type_name, request)
        return tuple(plans.values())

    def _plan_field(self, type_name: str, request: FieldRequest) -> FieldPlan:
        if request.name == TYPENAME_FIELD:
            self._require_leaf(type_name, request)
            return FieldPlan(key=request.response_key, name=request.name, parent_type=type_name)

        target = self.registry.lookup(type_name, request.name)

        if isinstance(target, str):
            if request.arguments:
                raise InvalidArgument(
                    f"Field {type_name}.{request.name} takes no arguments",
                    argument=next(iter(request.arguments)),
                )
            self._require_leaf(type_name, request)
            return FieldPlan(
                key=request.response_key,
                name=request.name,
                parent_type=type_name,
                attribute=target,
            )

        arguments = target.bind_arguments(type_name, request.name, request.arguments)
        children: tuple[FieldPlan, ...] = ()
        if target.type_name is None:
            self._require_leaf(type_name, request)
        else:
            if request.is_leaf:
                raise InvalidSelection(
                    type_name,
                    request.name,
                    f"Field {type_name}.{request.name} of type {target.type_name} "
                    "must have a selection of sub-fields",
                )
            children = self._plan_selections(target.type_name, request.selections)

        return FieldPlan(
            key=request.response_key,
            name=request.name,
            parent_type=type_name,
            definition=target,
            arguments=arguments,
            children=children,
        )

    @staticmethod
    def _require_leaf(type_name: str, request: FieldRequest) -> None:
        if not request.is_leaf:
            raise InvalidSelection(
                type_name,
                request.name,
                f"Field {type_name}.{request.name} is a scalar and has no sub-fields",
            )

    async def _resolve(self, plan: FieldPlan, parent: Any) -> Any:
        if plan.definition is not None:
            return await plan.definition.resolver(parent, plan.arguments, self.context)
        if plan.attribute is None:
            return plan.parent_type
        return project_attribute(plan.parent_type, plan.name, parent, plan.attribute)

    async def _complete_field(
        self, plan: FieldPlan, parent: Any, path: Path, errors: list[FieldError]
    ) -> Any:
        try:
            value = await self._resolve(plan, parent)
        except ResolutionError as e:
            logger.info(
                "Field resolution failed",
                field=f"{plan.parent_type}.{plan.name}",
                path=path,
                code=e.code,
                error=str(e),
            )
            errors.append(FieldError.from_exception(e, path))
            return None

        if value is None or not plan.children:
            return value

        if isinstance(value, (list, tuple)):
            return await self._gather_in_order(
                [
                    partial(self._complete_object, plan.children, item, [*path, index])
                    for index, item in enumerate(value)
                ],
                errors,
            )
        return await self._complete_object(plan.children, value, path, errors)

    async def _complete_object(
        self, plans: tuple[FieldPlan, ...], entity: Any, path: Path, errors: list[FieldError]
    ) -> dict[str, Any] | None:
        if entity is None:
            return None
        values = await self._gather_in_order(
            [partial(self._complete_field, plan, entity, [*path, plan.key]) for plan in plans],
            errors,
        )
        return {plan.key: value for plan, value in zip(plans, values)}

    @staticmethod
    async def _gather_in_order(
        steps: list[Callable[[list[FieldError]], Awaitable[Any]]], errors: list[FieldError]
    ) -> list[Any]:
        """Run sibling steps concurrently; their errors are kept in step order."""
        step_errors: list[list[FieldError]] = [[] for _ in steps]
        values = await asyncio.gather(
            *(step(collected) for step, collected in zip(steps, step_errors))
        )
        for collected in step_errors:
            errors.extend(collected)
        return list(values)
