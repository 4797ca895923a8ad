# fusion_systems/homomorphisms.py
"""
Group Homomorphisms between permutation groups.

A homomorphism is stored as its complete element table, so application,
composition, restriction and inversion are dictionary operations. Two
homomorphisms are equal when they have the same domain, the same codomain
and agree on every generator of the domain: equality of functions, never
object identity.
"""

from __future__ import annotations
from typing import Dict, Iterator, List, Optional, Sequence
from itertools import product

from .groups import Perm, PermutationGroup


def extend_homomorphism(generators: Sequence[Perm], images: Sequence[Perm],
                        source_identity: Perm, target_identity: Perm) -> Optional[Dict[Perm, Perm]]:
    """
    Extend an assignment on generators to the generated group.

    Walks the group breadth first; every product b * a with a a generator is
    checked against hom(b) * hom(a), which is enough for the result to be a
    homomorphism.

    Returns:
        The full element table, or None when the assignment does not extend
    """
    hom = {source_identity: target_identity}
    for g, h in zip(generators, images):
        if g in hom and hom[g] != h:
            return None
        hom[g] = h
    bdy = list(hom)
    while bdy:
        _bdy = []
        for a, ha in zip(generators, images):
            for b in bdy:
                c = b * a
                hc = hom[b] * ha
                if c not in hom:
                    hom[c] = hc
                    _bdy.append(c)
                elif hom[c] != hc:
                    return None
        bdy = _bdy
    return hom


class GroupHomomorphism:
    """
    A homomorphism φ: domain → codomain of permutation groups.

    Attributes:
        domain: Source group
        codomain: Target group (contains the image, need not equal it)
    """

    def __init__(self, domain: PermutationGroup, codomain: PermutationGroup,
                 mapping: Dict[Perm, Perm]):
        if set(mapping) != domain.elements:
            raise ValueError("mapping must be defined on exactly the elements of the domain")
        for value in mapping.values():
            if value not in codomain:
                raise ValueError(f"{value} is not an element of the codomain")
        self.domain = domain
        self.codomain = codomain
        self._mapping = dict(mapping)
        self._hash: Optional[int] = None
        self._image: Optional[PermutationGroup] = None

    @classmethod
    def from_images(cls, domain: PermutationGroup, codomain: PermutationGroup,
                    generators: Sequence[Perm], images: Sequence[Perm]) -> "GroupHomomorphism":
        """
        Build the homomorphism sending generators[i] to images[i].

        Raises:
            ValueError: if the generators do not generate the domain, or the
                assignment is not a homomorphism
        """
        if len(generators) != len(images):
            raise ValueError(f"{len(generators)} generators but {len(images)} images")
        for g in generators:
            if g not in domain:
                raise ValueError(f"{g} is not in the domain")
        for h in images:
            if h not in codomain:
                raise ValueError(f"{h} is not in the codomain")
        table = extend_homomorphism(generators, images, domain.identity, codomain.identity)
        if table is None:
            raise ValueError("assignment does not extend to a homomorphism")
        if len(table) != domain.order:
            raise ValueError("generators do not generate the domain")
        return cls(domain, codomain, table)

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def __call__(self, g: Perm) -> Perm:
        return self._mapping[g]

    def items(self):
        return self._mapping.items()

    def map_subgroup(self, subgroup: PermutationGroup) -> PermutationGroup:
        """φ(H) for a subgroup H of the domain."""
        if not subgroup <= self.domain:
            raise ValueError(f"{subgroup!r} is not a subgroup of the domain")
        return self.codomain.subgroup([self._mapping[h] for h in subgroup.generators])

    @property
    def image(self) -> PermutationGroup:
        if self._image is None:
            self._image = self.map_subgroup(self.domain)
        return self._image

    def is_homomorphism(self) -> bool:
        """Check φ(xy) = φ(x)φ(y) for x in the domain and y a generator."""
        if self._mapping[self.domain.identity] != self.codomain.identity:
            return False
        for y in self.domain.generators:
            hy = self._mapping[y]
            for x, hx in self._mapping.items():
                if self._mapping[x * y] != hx * hy:
                    return False
        return True

    def is_injective(self) -> bool:
        return len(set(self._mapping.values())) == self.domain.order

    def is_surjective(self) -> bool:
        return self.image.order == self.codomain.order

    def is_isomorphism(self) -> bool:
        return self.is_injective() and self.is_surjective()

    # -------------------------------------------------------------------------
    # Categorical operations
    # -------------------------------------------------------------------------

    def compose(self, other: "GroupHomomorphism") -> "GroupHomomorphism":
        """
        self ∘ other: apply other first.

        Requires the image of other to lie in the domain of self.
        """
        if not other.image <= self.domain:
            raise ValueError("image of the inner map does not lie in the outer domain")
        mapping = {x: self._mapping[y] for x, y in other._mapping.items()}
        return GroupHomomorphism(other.domain, self.codomain, mapping)

    def restrict(self, subgroup: PermutationGroup,
                 codomain: Optional[PermutationGroup] = None) -> "GroupHomomorphism":
        """φ|_H : H → φ(H), or into the given codomain."""
        if not subgroup <= self.domain:
            raise ValueError(f"{subgroup!r} is not a subgroup of the domain")
        mapping = {h: self._mapping[h] for h in subgroup.elements}
        if codomain is None:
            codomain = self.map_subgroup(subgroup)
        return GroupHomomorphism(subgroup, codomain, mapping)

    def corestrict(self, codomain: Optional[PermutationGroup] = None) -> "GroupHomomorphism":
        """The same map with a different codomain (the image by default)."""
        if codomain is None:
            codomain = self.image
        if codomain == self.codomain:
            return self
        return GroupHomomorphism(self.domain, codomain, self._mapping)

    def inverse(self) -> "GroupHomomorphism":
        """φ⁻¹ : φ(domain) → domain. Only defined for injective maps."""
        if not self.is_injective():
            raise ValueError("only injective homomorphisms can be inverted")
        mapping = {y: x for x, y in self._mapping.items()}
        return GroupHomomorphism(self.image, self.domain, mapping)

    def transport(self, isomorphism: "GroupHomomorphism") -> "GroupHomomorphism":
        """
        Conjugate by an isomorphism: x ↦ iso(φ(iso⁻¹(x))).

        The domain and codomain of self must be subgroups of the domain of
        the isomorphism; the result maps iso(domain) → iso(codomain).
        """
        domain = isomorphism.map_subgroup(self.domain)
        codomain = isomorphism.map_subgroup(self.codomain)
        mapping = {isomorphism(a): isomorphism(b) for a, b in self._mapping.items()}
        return GroupHomomorphism(domain, codomain, mapping)

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    def __eq__(self, other):
        if not isinstance(other, GroupHomomorphism):
            return NotImplemented
        if self is other:
            return True
        if self.domain != other.domain or self.codomain != other.codomain:
            return False
        return all(self._mapping[g] == other._mapping[g] for g in self.domain.generators)

    def __hash__(self):
        if self._hash is None:
            self._hash = hash((self.domain, self.codomain, frozenset(self._mapping.items())))
        return self._hash

    @property
    def sort_key(self):
        return (self.domain.sort_key, self.codomain.sort_key,
                tuple(self._mapping[g].sort_key for g in self.domain.element_list))

    def __repr__(self):
        body = ", ".join(f"{g!r} -> {self._mapping[g]!r}" for g in self.domain.generators)
        return f"GroupHomomorphism({body})"


# =============================================================================
# Standard maps
# =============================================================================

def identity_map(group: PermutationGroup) -> GroupHomomorphism:
    return GroupHomomorphism(group, group, {g: g for g in group.elements})


def inclusion_map(subgroup: PermutationGroup, group: PermutationGroup) -> GroupHomomorphism:
    if not subgroup <= group:
        raise ValueError(f"{subgroup!r} is not a subgroup of {group!r}")
    return GroupHomomorphism(subgroup, group, {g: g for g in subgroup.elements})


def conjugation_map(g: Perm, subgroup: PermutationGroup,
                    codomain: Optional[PermutationGroup] = None) -> GroupHomomorphism:
    """c_g : H → codomain, x ↦ g⁻¹ x g (codomain defaults to H^g)."""
    g_inv = g.inverse()
    mapping = {x: g_inv * x * g for x in subgroup.elements}
    if codomain is None:
        codomain = subgroup.conjugate(g)
    return GroupHomomorphism(subgroup, codomain, mapping)


# =============================================================================
# Enumeration
# =============================================================================

def _iter_injective(source: PermutationGroup,
                    target: PermutationGroup) -> Iterator[Dict[Perm, Perm]]:
    if source.order > target.order or target.order % source.order:
        return
    gens = source.small_generating_set()
    # an injective map preserves element orders
    candidates = [[h for h in target.element_list if h.order == g.order] for g in gens]
    for images in product(*candidates):
        table = extend_homomorphism(gens, images, source.identity, target.identity)
        if table is None or len(set(table.values())) != source.order:
            continue
        yield table


def all_injective_homomorphisms(source: PermutationGroup,
                                target: PermutationGroup) -> List[GroupHomomorphism]:
    """Every injective homomorphism source → target, in a deterministic order."""
    return [GroupHomomorphism(source, target, table) for table in _iter_injective(source, target)]


def find_isomorphism(source: PermutationGroup,
                     target: PermutationGroup) -> Optional[GroupHomomorphism]:
    """An isomorphism source → target, or None when the groups are not isomorphic."""
    if source.order != target.order:
        return None
    if sorted(g.order for g in source.elements) != sorted(h.order for h in target.elements):
        return None
    for table in _iter_injective(source, target):
        return GroupHomomorphism(source, target, table)
    return None
