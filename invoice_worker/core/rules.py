"""
Rule-based validation framework.
Rules are plain data (name, description, predicate) grouped into
ordered, immutable rule sets attached to each entity type.
"""
from typing import Any, Callable, ClassVar, Dict, Iterator, List

from pydantic import BaseModel, ConfigDict


class ValidationRule(BaseModel):
    """
    Named business rule over an entity.

    Two rules with the same name are the same rule, whatever their
    description or predicate.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    predicate: Callable[[Any], bool]

    def is_satisfied_by(self, entity: Any) -> bool:
        return bool(self.predicate(entity))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationRule):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        return f"{self.name}: {self.description}"


class RuleSet:
    """Fixed, ordered collection of validation rules for one entity type"""

    def __init__(self, *rules: ValidationRule):
        self._rules = tuple(rules)
        self._by_name: Dict[str, ValidationRule] = {}

        for rule in self._rules:
            if rule.name in self._by_name:
                raise ValueError(f"Duplicate rule name: {rule.name}")
            self._by_name[rule.name] = rule

    def violations(self, entity: Any) -> List[ValidationRule]:
        """
        Evaluate every rule against an entity.

        Args:
            entity: Instance to check

        Returns:
            Violated rules in rule-set order (empty when the entity is valid)
        """
        return [rule for rule in self._rules if not rule.is_satisfied_by(entity)]

    def __getitem__(self, name: str) -> ValidationRule:
        return self._by_name[name]

    def __contains__(self, rule: object) -> bool:
        if isinstance(rule, ValidationRule):
            return rule.name in self._by_name
        return rule in self._by_name

    def __iter__(self) -> Iterator[ValidationRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    @property
    def names(self) -> List[str]:
        return [rule.name for rule in self._rules]


def is_specified(value: Any) -> bool:
    """True for non-empty strings and other non-empty values"""
    return bool(value)


class ValidatableModel(BaseModel):
    """
    Base for entities validated by a rule set.
    Subclasses declare ``rules``; ``is_valid`` and ``violations``
    always agree because both go through it.
    """

    rules: ClassVar[RuleSet] = RuleSet()

    def violations(self) -> List[ValidationRule]:
        """Rules this instance currently violates, in rule order"""
        return self.rules.violations(self)

    @property
    def is_valid(self) -> bool:
        return not self.violations()
