"""
Rule data models for Gatekeeper.
"""

import inspect
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from ..errors import RuleConfigurationError


Evaluator = Callable[[Any, Any], Any]


@dataclass(frozen=True)
class Rule:
    """A named authorization rule.

    ``evaluator`` is called as ``evaluator(parameters, context)``. It may be
    a plain function or return an awaitable; returning ``None`` contributes
    nothing to the invocation result.

    Unpacks like a pair, so ``name, evaluator = rule`` works.
    """
    name: str
    evaluator: Evaluator

    def __iter__(self) -> Iterator[Any]:
        yield self.name
        yield self.evaluator

    @property
    def is_async(self) -> bool:
        return inspect.iscoroutinefunction(self.evaluator) or (
            not inspect.isfunction(self.evaluator)
            and inspect.iscoroutinefunction(getattr(self.evaluator, "__call__", None))
        )


RuleLike = Union[Rule, Tuple[str, Evaluator]]


def rule(name: str, evaluator: Evaluator) -> Rule:
    """Pair a rule name with its evaluator."""
    if not isinstance(name, str) or not name:
        raise RuleConfigurationError(
            "Rule name must be a non-empty string",
            {"name": repr(name)}
        )
    if not callable(evaluator):
        raise RuleConfigurationError(
            f"Evaluator for rule '{name}' is not callable",
            {"rule": name, "evaluator_type": type(evaluator).__name__}
        )
    return Rule(name=name, evaluator=evaluator)


def _coerce(item: Any, position: int) -> Rule:
    if isinstance(item, Rule):
        return rule(item.name, item.evaluator)

    if isinstance(item, tuple) and len(item) == 2:
        return rule(item[0], item[1])

    raise RuleConfigurationError(
        f"Rule at position {position} must be a Rule or a (name, evaluator) pair",
        {"position": position, "type": type(item).__name__}
    )


class RuleDescription(BaseModel):
    """Read-only description of a configured rule."""
    name: str = Field(..., description="Rule name")
    position: int = Field(..., description="Zero-based evaluation position")
    evaluator: str = Field(..., description="Qualified name of the evaluator")
    is_async: bool = Field(..., description="Whether the evaluator is a coroutine function")
    summary: Optional[str] = Field(None, description="First line of the evaluator docstring")


class RuleSet(Sequence):
    """Ordered, immutable collection of rules.

    Evaluation order is declaration order. With ``strict`` (the default),
    duplicate names are rejected here rather than silently overwriting
    each other's results at invocation time.
    """

    def __init__(self, rules: Iterable[RuleLike] = (), strict: bool = True):
        self._rules: Tuple[Rule, ...] = tuple(
            _coerce(item, position) for position, item in enumerate(rules)
        )
        self._strict = strict

        if strict:
            seen = set()
            duplicates = []
            for item in self._rules:
                if item.name in seen and item.name not in duplicates:
                    duplicates.append(item.name)
                seen.add(item.name)

            if duplicates:
                raise RuleConfigurationError(
                    f"Duplicate rule names: {', '.join(duplicates)}",
                    {"duplicates": duplicates}
                )

    def __getitem__(self, index):
        if isinstance(index, slice):
            return RuleSet(self._rules[index], strict=self._strict)
        return self._rules[index]

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return item in self.names
        return item in self._rules

    def __repr__(self) -> str:
        return f"RuleSet({list(self.names)!r})"

    @property
    def strict(self) -> bool:
        """Whether duplicate names were rejected at construction."""
        return self._strict

    @property
    def names(self) -> Tuple[str, ...]:
        """Rule names in evaluation order."""
        return tuple(item.name for item in self._rules)

    def get(self, name: str) -> Optional[Rule]:
        """Get the first rule with ``name``."""
        for item in self._rules:
            if item.name == name:
                return item
        return None

    def describe(self) -> List[RuleDescription]:
        """Describe the configured rules for diagnostics and documentation."""
        descriptions = []
        for position, item in enumerate(self._rules):
            doc = inspect.getdoc(item.evaluator)
            descriptions.append(RuleDescription(
                name=item.name,
                position=position,
                evaluator=_qualified_name(item.evaluator),
                is_async=item.is_async,
                summary=doc.splitlines()[0] if doc else None
            ))
        return descriptions


def _qualified_name(evaluator: Evaluator) -> str:
    module = getattr(evaluator, "__module__", None)
    qualname = getattr(evaluator, "__qualname__", None) or type(evaluator).__qualname__
    return f"{module}.{qualname}" if module else qualname
