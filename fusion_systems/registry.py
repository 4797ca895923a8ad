# fusion_systems/registry.py
"""
Subgroup Registry

Groups the subgroups of a fixed p-group P into classes and keeps, for every
registered subgroup H, a witness isomorphism w_H : H → R onto the
representative R of its class.

The structure is a union-find over subgroups with explicit member lists:

- register(H): on first sight, existing representatives are searched with a
  finder (H, R) -> isomorphism | None before a new class is minted
- merge(iso): unions two classes along an isomorphism between members

The representative of a class is always its member with the smallest
sort_key, so discovery order never changes which subgroup represents a
class. Subgroups are identified by element set (PermutationGroup equality),
never by object identity.
"""

from __future__ import annotations
from typing import Callable, Dict, Iterable, List, Optional, Tuple
import logging

from .exceptions import DomainError
from .groups import PermutationGroup
from .homomorphisms import GroupHomomorphism, identity_map

_logger = logging.getLogger(__name__)

Finder = Callable[[PermutationGroup, PermutationGroup], Optional[GroupHomomorphism]]


class SubgroupRegistry:
    """
    Classes of subgroups of a p-group with cached witness isomorphisms.

    Attributes:
        group: The ambient p-group P
    """

    def __init__(self, group: PermutationGroup, finder: Optional[Finder] = None):
        self.group = group
        self._finder = finder
        self._representative: Dict[PermutationGroup, PermutationGroup] = {}
        self._witness: Dict[PermutationGroup, GroupHomomorphism] = {}
        self._members: Dict[PermutationGroup, List[PermutationGroup]] = {}
        self._inverse_witness: Dict[PermutationGroup, GroupHomomorphism] = {}

    @classmethod
    def populated(cls, group: PermutationGroup, finder: Optional[Finder] = None,
                  subgroups: Optional[Iterable[PermutationGroup]] = None) -> "SubgroupRegistry":
        """A registry holding every subgroup of group (or the given ones)."""
        registry = cls(group, finder)
        for H in (group.subgroups() if subgroups is None else subgroups):
            registry.register(H)
        return registry

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, subgroup: PermutationGroup) -> PermutationGroup:
        """Register a subgroup and return the representative of its class."""
        rep = self._representative.get(subgroup)
        if rep is not None:
            return rep
        if not isinstance(subgroup, PermutationGroup) or not subgroup <= self.group:
            raise DomainError(f"{subgroup!r} is not a subgroup of {self.group!r}")

        if self._finder is not None:
            for rep in list(self._members):
                if rep.order != subgroup.order:
                    continue
                iso = self._finder(subgroup, rep)
                if iso is not None:
                    self._attach(subgroup, rep, iso)
                    if subgroup.sort_key < rep.sort_key:
                        self._reroot(rep, subgroup)
                    return self._representative[subgroup]

        self._representative[subgroup] = subgroup
        self._witness[subgroup] = identity_map(subgroup)
        self._members[subgroup] = [subgroup]
        return subgroup

    def _attach(self, subgroup: PermutationGroup, rep: PermutationGroup,
                witness: GroupHomomorphism) -> None:
        self._representative[subgroup] = rep
        self._witness[subgroup] = witness.corestrict(rep)
        members = self._members[rep]
        members.append(subgroup)
        members.sort(key=lambda h: h.sort_key)

    def _reroot(self, old_rep: PermutationGroup, new_rep: PermutationGroup) -> None:
        """Make new_rep (already a member) the representative of old_rep's class."""
        shift = self._witness[new_rep].inverse()  # old_rep -> new_rep
        members = self._members.pop(old_rep)
        for member in members:
            self._witness[member] = shift.compose(self._witness[member]).corestrict(new_rep)
            self._representative[member] = new_rep
            self._inverse_witness.pop(member, None)
        self._members[new_rep] = members

    def merge(self, iso: GroupHomomorphism) -> Tuple[PermutationGroup, Optional[PermutationGroup],
                                                     Optional[GroupHomomorphism]]:
        """
        Union the classes of iso.domain and iso.image.

        Returns:
            (survivor, absorbed, transport): transport is an isomorphism from
            the absorbed representative onto the surviving one. absorbed and
            transport are None when both already share a class.
        """
        iso = iso.corestrict()
        a_rep, w_a = self.class_of(iso.domain)
        c_rep, w_c = self.class_of(iso.codomain)
        if a_rep == c_rep:
            return a_rep, None, None

        alpha = w_c.compose(iso).compose(w_a.inverse())  # a_rep -> c_rep
        if a_rep.sort_key < c_rep.sort_key:
            survivor, absorbed, transport = a_rep, c_rep, alpha.inverse()
        else:
            survivor, absorbed, transport = c_rep, a_rep, alpha

        moved = self._members.pop(absorbed)
        for member in moved:
            self._witness[member] = transport.compose(self._witness[member])
            self._representative[member] = survivor
            self._inverse_witness.pop(member, None)
        members = self._members[survivor]
        members.extend(moved)
        members.sort(key=lambda h: h.sort_key)
        _logger.debug("merged class of %r (%d members) into %r", absorbed, len(moved), survivor)
        return survivor, absorbed, transport

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def class_of(self, subgroup: PermutationGroup) -> Tuple[PermutationGroup, GroupHomomorphism]:
        """(representative, witness isomorphism subgroup → representative)."""
        rep = self.register(subgroup)
        return rep, self._witness[subgroup]

    def representative(self, subgroup: PermutationGroup) -> PermutationGroup:
        return self.register(subgroup)

    def witness(self, subgroup: PermutationGroup) -> GroupHomomorphism:
        self.register(subgroup)
        return self._witness[subgroup]

    def inverse_witness(self, subgroup: PermutationGroup) -> GroupHomomorphism:
        """w_H⁻¹ : representative → H, cached."""
        inv = self._inverse_witness.get(subgroup)
        if inv is None:
            inv = self.witness(subgroup).inverse()
            self._inverse_witness[subgroup] = inv
        return inv

    def is_conjugate_or_isomorphic(self, first: PermutationGroup, second: PermutationGroup) -> bool:
        return self.register(first) == self.register(second)

    def members(self, representative: PermutationGroup) -> Tuple[PermutationGroup, ...]:
        return tuple(self._members.get(representative, ()))

    def representatives(self) -> Tuple[PermutationGroup, ...]:
        return tuple(sorted(self._members, key=lambda h: h.sort_key))

    def classes(self) -> List[Tuple[PermutationGroup, ...]]:
        return [self.members(rep) for rep in self.representatives()]

    def __contains__(self, subgroup) -> bool:
        return subgroup in self._representative

    def __len__(self):
        return len(self._representative)

    def __repr__(self):
        return f"SubgroupRegistry({self.group!r}, subgroups={len(self)}, classes={len(self._members)})"
