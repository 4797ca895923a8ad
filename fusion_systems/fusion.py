# fusion_systems/fusion.py
"""
Fusion System Facade

One interface, four variants:

    RealizedFusionSystem     F_P(G): conjugation by an ambient group G ≥ P
    TransportedFusionSystem  F^φ: another fusion system moved along φ
    UniversalFusionSystem    every injective homomorphism between subgroups
    GeneratedFusionSystem    closure of a base system plus extra generators

Each answers hom(A, B), aut(A) and defining_data(). Only the Generated
variant runs the closure engine; the others compute hom on demand.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Iterator, Optional, Set, Tuple

from .closure import ClosureConfig, ClosureEngine, ClosureStats
from .exceptions import DomainError, InvalidGeneratorError
from .groups import PermutationGroup, is_prime
from .homomorphisms import (
    GroupHomomorphism,
    all_injective_homomorphisms,
    conjugation_map,
    find_isomorphism,
)
from .registry import SubgroupRegistry


# =============================================================================
# SECTION 1: Defining Data
# =============================================================================

@dataclass(frozen=True)
class RealizedData:
    ambient_group: PermutationGroup


@dataclass(frozen=True)
class TransportedData:
    source: "FusionSystem"
    isomorphism: GroupHomomorphism


@dataclass(frozen=True)
class UniversalData:
    pass


@dataclass(frozen=True)
class GeneratedData:
    base: "FusionSystem"
    generators: Tuple[GroupHomomorphism, ...] = field(default_factory=tuple)


def _validate_p_group(group: PermutationGroup, prime: Optional[int]) -> int:
    if not isinstance(group, PermutationGroup):
        raise DomainError(f"Expected a PermutationGroup, got {type(group).__name__}")
    if prime is not None and not is_prime(prime):
        raise DomainError(f"{prime} is not prime")
    if group.is_trivial():
        if prime is None:
            raise DomainError("the prime must be given for the trivial group")
        return prime
    p = group.prime
    if p is None:
        raise DomainError(f"{group!r} has order {group.order}, not a prime power")
    if prime is not None and prime != p:
        raise DomainError(f"{group!r} is a {p}-group, not a {prime}-group")
    return p


# =============================================================================
# SECTION 2: Common Contract
# =============================================================================

class FusionSystem(ABC):
    """
    A fusion system on a finite p-group P.

    Objects are the subgroups of P; hom(A, B) is a set of injective
    homomorphisms A → B (each with codomain B), closed under composition,
    restriction and inversion onto images.

    Attributes:
        group: The p-group P
        prime: p
    """

    def __init__(self, group: PermutationGroup, prime: Optional[int] = None):
        self.prime = _validate_p_group(group, prime)
        self.group = group
        self._classes: Optional[SubgroupRegistry] = None

    @abstractmethod
    def hom(self, source: PermutationGroup, target: PermutationGroup) -> FrozenSet[GroupHomomorphism]:
        """Hom_F(source, target)."""

    @abstractmethod
    def defining_data(self):
        """Provenance: what this system was built from."""

    def aut(self, subgroup: PermutationGroup) -> FrozenSet[GroupHomomorphism]:
        """Aut_F(subgroup), a group under composition."""
        return self.hom(subgroup, subgroup)

    def _check_subgroup(self, subgroup: PermutationGroup) -> None:
        if not isinstance(subgroup, PermutationGroup) or not subgroup <= self.group:
            raise DomainError(f"{subgroup!r} is not a subgroup of {self.group!r}")

    def subgroups(self) -> Tuple[PermutationGroup, ...]:
        return self.group.subgroups()

    def is_morphism(self, phi: GroupHomomorphism) -> bool:
        return phi in self.hom(phi.domain, phi.codomain)

    def hom_table(self) -> Dict[Tuple[PermutationGroup, PermutationGroup], FrozenSet[GroupHomomorphism]]:
        """hom(A, B) for every ordered pair of subgroups of P."""
        subs = self.subgroups()
        return {(A, B): self.hom(A, B) for A in subs for B in subs}

    def morphisms(self) -> Iterator[GroupHomomorphism]:
        for homs in self.hom_table().values():
            yield from sorted(homs, key=lambda phi: phi.sort_key)

    def same_morphisms(self, other: "FusionSystem") -> bool:
        """True when both systems live on P and have identical hom tables."""
        return self.group == other.group and self.hom_table() == other.hom_table()

    def _find_isomorphism(self, source: PermutationGroup,
                          target: PermutationGroup) -> Optional[GroupHomomorphism]:
        homs = self.hom(source, target) if source.order == target.order else ()
        return min(homs, key=lambda phi: phi.sort_key) if homs else None

    def fusion_classes(self) -> SubgroupRegistry:
        """The F-isomorphism classes of subgroups of P."""
        if self._classes is None:
            self._classes = SubgroupRegistry.populated(self.group, finder=self._find_isomorphism)
        return self._classes

    def are_fusion_isomorphic(self, first: PermutationGroup, second: PermutationGroup) -> bool:
        self._check_subgroup(first)
        self._check_subgroup(second)
        return self.fusion_classes().is_conjugate_or_isomorphic(first, second)

    def __repr__(self):
        return f"{type(self).__name__}({self.group!r}, p={self.prime})"


# =============================================================================
# SECTION 3: Variants
# =============================================================================

class RealizedFusionSystem(FusionSystem):
    """
    F_P(G): Hom(A, B) = {c_g : g ∈ G, A^g ≤ B}.

    Args:
        ambient: The finite group G
        subgroup: P ≤ G; defaults to a Sylow p-subgroup of G
        prime: p, required when subgroup is omitted
    """

    def __init__(self, ambient: PermutationGroup, subgroup: Optional[PermutationGroup] = None,
                 prime: Optional[int] = None):
        if not isinstance(ambient, PermutationGroup):
            raise DomainError(f"Expected a PermutationGroup, got {type(ambient).__name__}")
        if subgroup is None:
            if prime is None or not is_prime(prime):
                raise DomainError("a prime is required to choose a Sylow subgroup")
            subgroup = ambient.sylow_subgroup(prime)
        if not isinstance(subgroup, PermutationGroup) or not subgroup <= ambient:
            raise DomainError(f"{subgroup!r} is not a subgroup of {ambient!r}")
        super().__init__(subgroup, prime)
        self.ambient = ambient
        self._cache: Dict[Tuple[PermutationGroup, PermutationGroup], FrozenSet[GroupHomomorphism]] = {}

    def hom(self, source, target):
        self._check_subgroup(source)
        self._check_subgroup(target)
        key = (source, target)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        found = set()
        if target.order % source.order == 0:
            for g in self.ambient.element_list:
                if source.conjugate(g) <= target:
                    found.add(conjugation_map(g, source, target))
        result = frozenset(found)
        self._cache[key] = result
        return result

    def _find_isomorphism(self, source, target):
        g = self.ambient.find_conjugator(source, target)
        return None if g is None else conjugation_map(g, source, target)

    def defining_data(self) -> RealizedData:
        return RealizedData(self.ambient)


def inner_fusion_system(group: PermutationGroup, prime: Optional[int] = None) -> RealizedFusionSystem:
    """F_P(P): only conjugation by elements of P itself."""
    return RealizedFusionSystem(group, group, prime)


class TransportedFusionSystem(FusionSystem):
    """
    F^φ on φ(Q) for a fusion system F on Q and an isomorphism φ: Q → P.

    Hom(A, B) = {φ ∘ ψ ∘ φ⁻¹ : ψ ∈ Hom_F(φ⁻¹(A), φ⁻¹(B))}.
    """

    def __init__(self, source: FusionSystem, isomorphism: GroupHomomorphism):
        if not isinstance(source, FusionSystem):
            raise DomainError(f"Expected a FusionSystem, got {type(source).__name__}")
        if not isinstance(isomorphism, GroupHomomorphism):
            raise DomainError(f"Expected a GroupHomomorphism, got {type(isomorphism).__name__}")
        if isomorphism.domain != source.group:
            raise DomainError("the isomorphism must be defined on the source p-group")
        if not isomorphism.is_homomorphism() or not isomorphism.is_isomorphism():
            raise DomainError(f"{isomorphism!r} is not an isomorphism")
        super().__init__(isomorphism.codomain, source.prime)
        self.source = source
        self.isomorphism = isomorphism
        self._inverse = isomorphism.inverse()

    def hom(self, source, target):
        self._check_subgroup(source)
        self._check_subgroup(target)
        pre_source = self._inverse.map_subgroup(source)
        pre_target = self._inverse.map_subgroup(target)
        return frozenset(psi.transport(self.isomorphism)
                         for psi in self.source.hom(pre_source, pre_target))

    def defining_data(self) -> TransportedData:
        return TransportedData(self.source, self.isomorphism)


class UniversalFusionSystem(FusionSystem):
    """Every injective homomorphism between subgroups of P."""

    def __init__(self, group: PermutationGroup, prime: Optional[int] = None):
        super().__init__(group, prime)

    def hom(self, source, target):
        self._check_subgroup(source)
        self._check_subgroup(target)
        return frozenset(all_injective_homomorphisms(source, target))

    def _find_isomorphism(self, source, target):
        return find_isomorphism(source, target)

    def defining_data(self) -> UniversalData:
        return UniversalData()


class GeneratedFusionSystem(FusionSystem):
    """
    The smallest fusion system containing a base system and extra generators.

    Base morphisms are seeded lazily: only subgroups reachable from the
    generators (closed under taking subgroups and base isomorphism) are
    handed to the closure engine. Any other subgroup has exactly the
    morphisms it had in the base system, so hom on it delegates to the base.

    Args:
        group: The p-group P
        generators: Injective homomorphisms between subgroups of P
        base: Fusion system on P to extend; defaults to F_P(P)
        prime: p (inferred from |P| when omitted)
        config: Closure ceilings

    Raises:
        InvalidGeneratorError: a generator is not an injective homomorphism
            between subgroups of P
        DomainError: p or the base system is inconsistent with P
        ClosureOverflow: a ceiling in config was exceeded
    """

    def __init__(self, group: PermutationGroup, generators: Iterable[GroupHomomorphism] = (),
                 base: Optional[FusionSystem] = None, prime: Optional[int] = None,
                 config: Optional[ClosureConfig] = None):
        super().__init__(group, prime)
        if base is None:
            base = inner_fusion_system(group, self.prime)
        elif not isinstance(base, FusionSystem) or base.group != group:
            raise DomainError("the base fusion system must live on the same p-group")
        self.base = base
        self.generators: Tuple[GroupHomomorphism, ...] = tuple(
            self._validate_generator(phi) for phi in generators
        )

        self._reachable = self._reachable_subgroups()
        engine = ClosureEngine(group, config)
        engine.register(sorted(self._reachable, key=lambda h: h.sort_key))
        engine.seed(self.generators)
        engine.seed(self._base_seeds())
        self.table = engine.run()
        self.stats: ClosureStats = engine.stats

    def _validate_generator(self, phi) -> GroupHomomorphism:
        if not isinstance(phi, GroupHomomorphism):
            raise InvalidGeneratorError(f"Expected a GroupHomomorphism, got {type(phi).__name__}")
        if not (phi.domain <= self.group and phi.codomain <= self.group):
            raise InvalidGeneratorError(f"{phi!r} is not a map between subgroups of {self.group!r}")
        if not phi.is_homomorphism():
            raise InvalidGeneratorError(f"{phi!r} is not a homomorphism")
        if not phi.is_injective():
            raise InvalidGeneratorError(f"{phi!r} is not injective")
        return phi

    def _reachable_subgroups(self) -> Set[PermutationGroup]:
        lattice = self.group.subgroups()
        reachable: Set[PermutationGroup] = set()
        pending = []
        for phi in self.generators:
            pending.extend((phi.domain, phi.image, phi.codomain))
        while pending:
            H = pending.pop()
            if H in reachable:
                continue
            reachable.add(H)
            for K in lattice:
                if K in reachable:
                    continue
                if K <= H or (K.order == H.order and self.base.hom(H, K)):
                    pending.append(K)
        return reachable

    def _base_seeds(self) -> Iterator[GroupHomomorphism]:
        ordered = sorted(self._reachable, key=lambda h: h.sort_key)
        for A in ordered:
            if A.order == 1:
                continue
            for C in ordered:
                if C.order == A.order:
                    yield from sorted(self.base.hom(A, C), key=lambda phi: phi.sort_key)

    def hom(self, source, target):
        self._check_subgroup(source)
        self._check_subgroup(target)
        if source in self._reachable:
            return self.table.get(source, target)
        return self.base.hom(source, target)

    def defining_data(self) -> GeneratedData:
        return GeneratedData(self.base, self.generators)
