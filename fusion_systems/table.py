# fusion_systems/table.py
"""
Morphism Table

Stores the morphisms of a fusion system in finite canonical form. Every
morphism factors as an isomorphism onto its image followed by an inclusion,
so only isomorphisms are kept, and they are kept per class of the
SubgroupRegistry:

    Iso(A, C) = { w_C⁻¹ ∘ β ∘ w_A : β ∈ Aut(R) }     (A, C in the class of R)
    Hom(A, B) = { ι ∘ ψ : ψ ∈ Iso(A, C), C ≤ B }

so the table itself only holds Aut(R) for each class representative R.
Automorphism sets are kept closed under composition, which makes them
groups and makes the stored isomorphisms a groupoid: inverses and
composites of stored morphisms are present as soon as their factors are.
"""

from __future__ import annotations
from typing import Dict, FrozenSet, Iterable, Set, Tuple

from .exceptions import DomainError
from .groups import PermutationGroup
from .homomorphisms import GroupHomomorphism, identity_map, inclusion_map
from .registry import SubgroupRegistry


def close_automorphisms(generators: Iterable[GroupHomomorphism],
                        identity: GroupHomomorphism) -> Set[GroupHomomorphism]:
    """The group generated by a set of automorphisms of one group."""
    gens = list(generators)
    els = {identity}
    els.update(gens)
    bdy = list(els)
    while bdy:
        _bdy = []
        for a in gens:
            for b in bdy:
                c = a.compose(b)
                if c not in els:
                    els.add(c)
                    _bdy.append(c)
        bdy = _bdy
    return els


class MorphismTable:
    """
    De-duplicated morphisms of one fusion system, keyed by subgroup class.

    Grows monotonically while the closure runs; freeze() makes it read-only.
    """

    def __init__(self, registry: SubgroupRegistry):
        self.registry = registry
        self._automorphisms: Dict[PermutationGroup, Set[GroupHomomorphism]] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    @property
    def size(self) -> int:
        """Stored automorphisms plus witness isomorphisms."""
        stored = sum(len(auts) for auts in self._automorphisms.values())
        return stored + len(self.registry)

    def __len__(self):
        return self.size

    def automorphisms(self, representative: PermutationGroup) -> FrozenSet[GroupHomomorphism]:
        auts = self._automorphisms.get(representative)
        if auts is None:
            return frozenset({identity_map(representative)})
        return frozenset(auts)

    def _translate(self, phi: GroupHomomorphism) -> Tuple[PermutationGroup, PermutationGroup,
                                                          GroupHomomorphism]:
        """Move φ: A → C into representative coordinates w_C ∘ φ ∘ w_A⁻¹."""
        iso = phi.corestrict()
        a_rep = self.registry.representative(iso.domain)
        c_rep, w_c = self.registry.class_of(iso.codomain)
        alpha = w_c.compose(iso).compose(self.registry.inverse_witness(iso.domain))
        return a_rep, c_rep, alpha

    def contains(self, phi: GroupHomomorphism) -> bool:
        if not phi.is_injective():
            return False
        iso = phi.corestrict()
        if iso.domain not in self.registry or iso.codomain not in self.registry:
            # an unregistered subgroup only has its identity
            return iso == identity_map(iso.domain)
        a_rep, c_rep, alpha = self._translate(phi)
        return a_rep == c_rep and alpha in self.automorphisms(a_rep)

    def add(self, phi: GroupHomomorphism) -> bool:
        """
        Insert an injective homomorphism.

        Returns:
            True if the table grew, False if φ was already present
        """
        if self._frozen:
            raise RuntimeError("morphism table is frozen")
        if not phi.is_injective():
            raise ValueError(f"{phi!r} is not injective")

        a_rep, c_rep, alpha = self._translate(phi)
        if a_rep == c_rep:
            auts = self._automorphisms.setdefault(a_rep, {identity_map(a_rep)})
            if alpha in auts:
                return False
            self._automorphisms[a_rep] = close_automorphisms(auts | {alpha}, identity_map(a_rep))
            return True

        survivor, absorbed, transport = self.registry.merge(phi)
        back = transport.inverse()
        carried = {transport.compose(beta).compose(back)
                   for beta in self._automorphisms.pop(absorbed, ())}
        auts = self._automorphisms.setdefault(survivor, {identity_map(survivor)})
        if carried - auts:
            self._automorphisms[survivor] = close_automorphisms(auts | carried, identity_map(survivor))
        return True

    def get(self, source: PermutationGroup, target: PermutationGroup) -> FrozenSet[GroupHomomorphism]:
        """
        Every stored morphism source → target.

        Read-only: a source that was never registered is a singleton class
        whose only morphism is its inclusion, and it is not registered here.
        """
        if source not in self.registry:
            if not isinstance(source, PermutationGroup) or not source <= self.registry.group:
                raise DomainError(f"{source!r} is not a subgroup of {self.registry.group!r}")
            if source <= target:
                return frozenset({inclusion_map(source, target)})
            return frozenset()
        rep, w_source = self.registry.class_of(source)
        auts = self.automorphisms(rep)
        found = set()
        for member in self.registry.members(rep):
            if not member <= target:
                continue
            back = self.registry.inverse_witness(member)
            for beta in auts:
                found.add(back.compose(beta).compose(w_source).corestrict(target))
        return frozenset(found)

    def __repr__(self):
        return (f"MorphismTable(classes={len(self.registry.representatives())}, "
                f"size={self.size}, frozen={self._frozen})")
