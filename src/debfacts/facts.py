"""Transactional hand-off of package records to a fact engine.

The engine is an external collaborator. ``FactEmitter`` is the contract the
pipeline relies on: open a transaction, insert records into a named base
relation, commit, and get back the facts that became true as a result.
``InMemoryFactStore`` is a small reference engine that honors it.
"""

import logging
from typing import Protocol

from pydantic import BaseModel, ConfigDict

from debfacts.models import Package

logger = logging.getLogger(__name__)

PACKAGE_RELATION = "Package"
DEPENDS_ON_RELATION = "DependsOn"


class TransactionError(RuntimeError):
    """A fact emitter was driven out of begin/insert/commit order."""


class Fact(BaseModel):
    """One tuple of a relation."""

    model_config = ConfigDict(frozen=True)

    relation: str
    record: BaseModel


class DependsOn(BaseModel):
    """Derived edge: ``package`` at ``version`` may be satisfied by ``alternative``."""

    model_config = ConfigDict(frozen=True)

    package: str
    version: str
    alternative: str


class FactEmitter(Protocol):
    def begin(self) -> None: ...

    def insert(self, relation: str, record: BaseModel) -> None: ...

    def commit(self) -> list[Fact]:
        """Apply the open transaction and return the newly materialized facts."""
        ...

    def rollback(self) -> None: ...


class InMemoryFactStore:
    """Set-semantics fact store with one derived relation.

    Inserting a record that is already present is not a change, so it does not
    show up in the commit delta. Every new ``Package`` also yields one
    ``DependsOn`` fact per dependency alternative.
    """

    def __init__(self):
        self.relations: dict[str, set[BaseModel]] = {}
        self._pending: list[Fact] | None = None

    @property
    def in_transaction(self) -> bool:
        return self._pending is not None

    def begin(self) -> None:
        if self._pending is not None:
            raise TransactionError("transaction already open")
        self._pending = []

    def insert(self, relation: str, record: BaseModel) -> None:
        if self._pending is None:
            raise TransactionError("insert outside of a transaction")
        self._pending.append(Fact(relation=relation, record=record))

    def commit(self) -> list[Fact]:
        if self._pending is None:
            raise TransactionError("commit outside of a transaction")
        pending, self._pending = self._pending, None

        delta: list[Fact] = []
        for fact in pending:
            if self._add(fact):
                delta.append(fact)
                if fact.relation == PACKAGE_RELATION and isinstance(fact.record, Package):
                    delta.extend(f for f in self._derive_depends_on(fact.record) if self._add(f))

        logger.debug(f"Committed {len(pending)} inserts, {len(delta)} new facts")
        return delta

    def rollback(self) -> None:
        if self._pending is None:
            raise TransactionError("rollback outside of a transaction")
        logger.debug(f"Rolling back {len(self._pending)} inserts")
        self._pending = None

    def facts(self, relation: str) -> set[BaseModel]:
        return set(self.relations.get(relation, ()))

    def _add(self, fact: Fact) -> bool:
        records = self.relations.setdefault(fact.relation, set())
        if fact.record in records:
            return False
        records.add(fact.record)
        return True

    @staticmethod
    def _derive_depends_on(package: Package) -> list[Fact]:
        return [
            Fact(
                relation=DEPENDS_ON_RELATION,
                record=DependsOn(package=package.name, version=package.version, alternative=alternative),
            )
            for dependency in package.depends
            for alternative in dependency.alternatives
        ]
