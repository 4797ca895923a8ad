# fusion_systems/closure.py
"""
Closure Engine

Computes the smallest fusion system containing a set of seed morphisms, as a
fixed point over a worklist of morphisms still to be propagated.

================================================================================
RULES
================================================================================

(a) Restriction: when a morphism φ: A → B is incorporated, φ|_{A'} for every
    non-trivial proper subgroup A' < A is queued. Restriction of a composite
    is the composite of restrictions, so restricting what gets incorporated
    is enough for the whole system to be restriction-closed.

(b) Inversion, (c) composition and (d) closure of Aut(A) under composition
    hold structurally: the MorphismTable stores a groupoid (invertible
    witnesses plus automorphism groups), so inverses and composites of
    stored morphisms are present as soon as their factors are.

A queued morphism already present (equality of functions) is dropped
without propagation. Each incorporation either merges two subgroup classes
or grows an automorphism group, so the loop ends after finitely many steps.
The table reached does not depend on seed order, only the step count does.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterable, Iterator, Optional
import logging

from .constants import DEFAULT_MAX_MORPHISMS, DEFAULT_MAX_STEPS
from .exceptions import ClosureOverflow
from .groups import PermutationGroup
from .homomorphisms import GroupHomomorphism
from .registry import SubgroupRegistry
from .table import MorphismTable

_logger = logging.getLogger(__name__)


@dataclass
class ClosureConfig:
    """
    Safety ceilings for one closure computation.

    Attributes:
        max_steps: Worklist items processed before ClosureOverflow
        max_morphisms: Table size (automorphisms + witnesses) before ClosureOverflow
    """
    max_steps: int = DEFAULT_MAX_STEPS
    max_morphisms: int = DEFAULT_MAX_MORPHISMS

    def __post_init__(self):
        """Validate configuration."""
        if self.max_steps < 1:
            raise ValueError(f"max_steps must be >= 1, got {self.max_steps}")
        if self.max_morphisms < 1:
            raise ValueError(f"max_morphisms must be >= 1, got {self.max_morphisms}")


@dataclass
class ClosureStats:
    steps: int = 0          # worklist items processed
    incorporated: int = 0   # items that grew the table
    redundant: int = 0      # items already present


class ClosureEngine:
    """
    Fixed-point saturation of a MorphismTable over one p-group.

    Usage:
        engine = ClosureEngine(P)
        engine.seed(generators)
        table = engine.run()
    """

    def __init__(self, group: PermutationGroup, config: Optional[ClosureConfig] = None):
        self.group = group
        self.config = config or ClosureConfig()
        self.registry = SubgroupRegistry(group)
        self.table = MorphismTable(self.registry)
        self.stats = ClosureStats()
        self._queue: Deque[GroupHomomorphism] = deque()
        self._lattice = group.subgroups()

    def register(self, subgroups: Iterable[PermutationGroup]) -> None:
        """Make subgroups known to the registry; each starts with its identity."""
        for H in subgroups:
            self.registry.register(H)

    def seed(self, morphisms: Iterable[GroupHomomorphism]) -> None:
        for phi in morphisms:
            self.registry.register(phi.domain)
            self.registry.register(phi.image)
            self._queue.append(phi)

    def _restrictions(self, phi: GroupHomomorphism) -> Iterator[GroupHomomorphism]:
        for sub in self._lattice:
            if sub.order > 1 and sub < phi.domain:
                yield phi.restrict(sub)

    def run(self) -> MorphismTable:
        """Drain the worklist and freeze the table."""
        if self.table.frozen:
            return self.table
        _logger.debug("closure over %r: %d seeds, %d subgroups registered",
                      self.group, len(self._queue), len(self.registry))

        while self._queue:
            phi = self._queue.popleft()
            self.stats.steps += 1
            if self.stats.steps > self.config.max_steps:
                raise ClosureOverflow(
                    f"closure exceeded {self.config.max_steps} steps",
                    steps=self.stats.steps, size=self.table.size)

            if not self.table.add(phi):
                self.stats.redundant += 1
                continue
            self.stats.incorporated += 1
            if self.table.size > self.config.max_morphisms:
                raise ClosureOverflow(
                    f"morphism table exceeded {self.config.max_morphisms} entries",
                    steps=self.stats.steps, size=self.table.size)
            self._queue.extend(self._restrictions(phi))

        self.table.freeze()
        _logger.info("closure over %r finished: %d steps, %d incorporated, %d redundant, %d classes",
                     self.group, self.stats.steps, self.stats.incorporated,
                     self.stats.redundant, len(self.registry.representatives()))
        return self.table
