# fusion_systems/groups.py
"""
Permutation Groups: the finite-group layer

Finite groups are represented concretely as groups of permutations of
{0, ..., n-1}. Everything the fusion machinery needs from group theory lives
here or in homomorphisms.py:

- element enumeration by multiplicative closure
- subgroup containment and generation
- the full subgroup lattice (joins of cyclic subgroups)
- conjugacy search and Sylow subgroups

================================================================================
CONVENTIONS
================================================================================

- Permutations act on the right: (a * b)(x) = b(a(x)).
- Conjugation is x^g = g⁻¹ x g, and H^g = {h^g : h ∈ H}.
- A group is identified by its element set, never by object identity.
  Two PermutationGroup objects built from different generators are equal
  (and hash equal) when they contain the same permutations.

All algorithms are brute force. They are meant for the small groups that
fusion systems are usually studied on (orders up to a few hundred).
"""

from __future__ import annotations
from typing import FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple
import numpy as np

from .constants import MAX_ENUMERATED_ORDER


# =============================================================================
# SECTION 1: Number Helpers
# =============================================================================

def is_prime(n: int) -> bool:
    """Trial-division primality test."""
    if n < 2:
        return False
    d = 2
    while d * d <= n:
        if n % d == 0:
            return False
        d += 1
    return True


def prime_power(n: int) -> Optional[Tuple[int, int]]:
    """
    Decompose n as p^k.

    Returns:
        (p, k) when n = p^k with p prime and k >= 1, otherwise None.

    Example:
        >>> prime_power(8)
        (2, 3)
        >>> prime_power(12) is None
        True
    """
    if n < 2:
        return None
    p = 2
    while n % p:
        p += 1
    k = 0
    while n % p == 0:
        n //= p
        k += 1
    return (p, k) if n == 1 else None


# =============================================================================
# SECTION 2: Permutations
# =============================================================================

class Perm:
    """
    An immutable permutation of {0, ..., n-1}.

    Stored as a read-only numpy array of images, so that products are a
    single fancy-indexing operation.
    """

    __slots__ = ("_images", "_key")

    def __init__(self, images: Iterable[int]):
        if not isinstance(images, (np.ndarray, list, tuple)):
            images = list(images)
        arr = np.array(images, dtype=np.int64)
        if arr.ndim != 1:
            raise ValueError(f"Expected 1D image array, got {arr.ndim}D")
        if not np.array_equal(np.sort(arr), np.arange(arr.size)):
            raise ValueError(f"Not a permutation of 0..{arr.size - 1}: {arr.tolist()}")
        self._set(arr)

    def _set(self, arr: np.ndarray) -> None:
        arr.flags.writeable = False
        self._images = arr
        self._key = arr.tobytes()

    @classmethod
    def _wrap(cls, arr: np.ndarray) -> "Perm":
        perm = object.__new__(cls)
        perm._set(arr)
        return perm

    @classmethod
    def identity(cls, degree: int) -> "Perm":
        return cls._wrap(np.arange(degree, dtype=np.int64))

    @classmethod
    def from_cycles(cls, cycles: Sequence[Sequence[int]], degree: int) -> "Perm":
        """
        Build a permutation from disjoint cycles.

        Args:
            cycles: e.g. [(0, 1, 2), (3, 4)]
            degree: number of points acted on
        """
        arr = np.arange(degree, dtype=np.int64)
        seen: Set[int] = set()
        for cycle in cycles:
            for point in cycle:
                if point in seen or not 0 <= point < degree:
                    raise ValueError(f"Invalid cycle {tuple(cycle)} for degree {degree}")
                seen.add(point)
            m = len(cycle)
            for i in range(m):
                arr[cycle[i]] = cycle[(i + 1) % m]
        return cls._wrap(arr)

    @property
    def degree(self) -> int:
        return int(self._images.size)

    @property
    def images(self) -> np.ndarray:
        """Read-only array: images[x] is the image of point x."""
        return self._images

    @property
    def sort_key(self) -> Tuple[int, ...]:
        return tuple(self._images.tolist())

    def __call__(self, point: int) -> int:
        return int(self._images[point])

    def __mul__(self, other: "Perm") -> "Perm":
        if not isinstance(other, Perm):
            return NotImplemented
        if other.degree != self.degree:
            raise ValueError(f"Degree mismatch: {self.degree} vs {other.degree}")
        # apply self first, then other
        return Perm._wrap(other._images[self._images])

    def inverse(self) -> "Perm":
        inv = np.empty_like(self._images)
        inv[self._images] = np.arange(self._images.size, dtype=np.int64)
        return Perm._wrap(inv)

    __invert__ = inverse

    def __pow__(self, exponent: int) -> "Perm":
        if exponent < 0:
            return self.inverse() ** (-exponent)
        result = Perm.identity(self.degree)
        base = self
        while exponent:
            if exponent & 1:
                result = result * base
            base = base * base
            exponent >>= 1
        return result

    def conjugate(self, g: "Perm") -> "Perm":
        """Return self^g = g⁻¹ · self · g."""
        return g.inverse() * self * g

    def is_identity(self) -> bool:
        return bool(np.array_equal(self._images, np.arange(self._images.size)))

    def cycles(self) -> List[Tuple[int, ...]]:
        """Non-trivial cycles, each starting at its smallest point."""
        seen = np.zeros(self._images.size, dtype=bool)
        result = []
        for start in range(self._images.size):
            if seen[start]:
                continue
            cycle = [start]
            seen[start] = True
            point = int(self._images[start])
            while point != start:
                cycle.append(point)
                seen[point] = True
                point = int(self._images[point])
            if len(cycle) > 1:
                result.append(tuple(cycle))
        return result

    @property
    def order(self) -> int:
        lengths = [len(c) for c in self.cycles()]
        if not lengths:
            return 1
        return int(np.lcm.reduce(np.array(lengths, dtype=np.int64)))

    def __eq__(self, other):
        if not isinstance(other, Perm):
            return NotImplemented
        return self._key == other._key

    def __hash__(self):
        return hash(self._key)

    def __repr__(self):
        cycles = self.cycles()
        if not cycles:
            return "Perm(())"
        body = "".join("(" + " ".join(str(p) for p in c) + ")" for c in cycles)
        return f"Perm({body})"


def _closure(generators: Sequence[Perm], identity: Perm,
             maxsize: int = MAX_ENUMERATED_ORDER) -> Set[Perm]:
    """Multiplicative closure of generators, breadth first."""
    els = {identity}
    els.update(generators)
    bdy = list(els)
    while bdy:
        _bdy = []
        for a in generators:
            for b in bdy:
                c = b * a
                if c not in els:
                    els.add(c)
                    _bdy.append(c)
                    if len(els) > maxsize:
                        raise ValueError(f"Group exceeds {maxsize} elements")
        bdy = _bdy
    return els


# =============================================================================
# SECTION 3: Permutation Groups
# =============================================================================

class PermutationGroup:
    """
    A finite group generated by permutations of a common degree.

    The element set is computed lazily and cached. Equality, hashing and
    containment are all decided on element sets.

    Attributes:
        generators: Non-identity generators, duplicates removed
        degree: Number of points acted on
        name: Optional display name
    """

    def __init__(self, generators: Iterable[Perm], degree: Optional[int] = None,
                 name: Optional[str] = None):
        gens = list(generators)
        if degree is None:
            if not gens:
                raise ValueError("degree is required for a group without generators")
            degree = gens[0].degree
        for g in gens:
            if not isinstance(g, Perm):
                raise ValueError(f"Generators must be Perm instances, got {type(g).__name__}")
            if g.degree != degree:
                raise ValueError(f"Generator {g} has degree {g.degree}, expected {degree}")
        self.generators: Tuple[Perm, ...] = tuple(
            dict.fromkeys(g for g in gens if not g.is_identity())
        )
        self.degree = degree
        self.name = name
        self._elements: Optional[FrozenSet[Perm]] = None
        self._element_list: Optional[Tuple[Perm, ...]] = None
        self._hash: Optional[int] = None
        self._sort_key = None
        self._subgroups: Optional[Tuple["PermutationGroup", ...]] = None
        self._small_gens: Optional[Tuple[Perm, ...]] = None

    # -------------------------------------------------------------------------
    # Elements
    # -------------------------------------------------------------------------

    @property
    def identity(self) -> Perm:
        return Perm.identity(self.degree)

    @property
    def elements(self) -> FrozenSet[Perm]:
        if self._elements is None:
            self._elements = frozenset(_closure(self.generators, self.identity))
        return self._elements

    @property
    def element_list(self) -> Tuple[Perm, ...]:
        """Elements in a deterministic order."""
        if self._element_list is None:
            self._element_list = tuple(sorted(self.elements, key=lambda g: g.sort_key))
        return self._element_list

    @property
    def order(self) -> int:
        return len(self.elements)

    def __len__(self):
        return self.order

    def __iter__(self):
        return iter(self.element_list)

    def __contains__(self, g) -> bool:
        return g in self.elements

    def is_trivial(self) -> bool:
        return not self.generators

    def is_abelian(self) -> bool:
        return all(a * b == b * a for a in self.generators for b in self.generators)

    @property
    def sort_key(self):
        """(order, sorted element images): a total order on subgroups."""
        if self._sort_key is None:
            self._sort_key = (self.order, tuple(g.sort_key for g in self.element_list))
        return self._sort_key

    # -------------------------------------------------------------------------
    # Comparison (on element sets)
    # -------------------------------------------------------------------------

    def __eq__(self, other):
        if not isinstance(other, PermutationGroup):
            return NotImplemented
        if self is other:
            return True
        return (self.degree == other.degree and self.order == other.order
                and self.elements == other.elements)

    def __hash__(self):
        if self._hash is None:
            self._hash = hash((self.degree, self.elements))
        return self._hash

    def __le__(self, other: "PermutationGroup") -> bool:
        """Subgroup test."""
        if not isinstance(other, PermutationGroup):
            return NotImplemented
        if self.degree != other.degree or other.order % self.order:
            return False
        return all(g in other for g in self.generators)

    def __lt__(self, other: "PermutationGroup") -> bool:
        if not isinstance(other, PermutationGroup):
            return NotImplemented
        return self.order < other.order and self <= other

    # -------------------------------------------------------------------------
    # Subgroups
    # -------------------------------------------------------------------------

    def subgroup(self, generators: Iterable[Perm], name: Optional[str] = None) -> "PermutationGroup":
        """The subgroup generated by the given elements of this group."""
        gens = list(generators)
        for g in gens:
            if g not in self:
                raise ValueError(f"{g} is not an element of {self!r}")
        return PermutationGroup(gens, degree=self.degree, name=name)

    def conjugate(self, g: Perm) -> "PermutationGroup":
        """H^g for a permutation g of the same degree."""
        return PermutationGroup([h.conjugate(g) for h in self.generators], degree=self.degree)

    def subgroups(self) -> Tuple["PermutationGroup", ...]:
        """
        The full subgroup lattice, sorted by sort_key.

        Every subgroup is a join of cyclic subgroups, so the lattice is
        reached by repeatedly joining cyclic subgroups onto known ones.
        """
        if self._subgroups is not None:
            return self._subgroups

        cyclic = sorted({self.subgroup([g]) for g in self.element_list},
                        key=lambda h: h.sort_key)
        found = set(cyclic)
        frontier = list(cyclic)
        while frontier:
            new = []
            for H in frontier:
                for C in cyclic:
                    if C <= H:
                        continue
                    J = self.subgroup(H.generators + C.generators)
                    if J not in found:
                        found.add(J)
                        new.append(J)
            frontier = new

        self._subgroups = tuple(sorted(found, key=lambda h: h.sort_key))
        return self._subgroups

    def small_generating_set(self) -> Tuple[Perm, ...]:
        """Greedy generating set, preferring elements of large order."""
        if self._small_gens is not None:
            return self._small_gens
        gens: List[Perm] = []
        span = {self.identity}
        for g in sorted(self.element_list, key=lambda x: (-x.order, x.sort_key)):
            if len(span) == self.order:
                break
            if g in span:
                continue
            gens.append(g)
            span = _closure(gens, self.identity)
        self._small_gens = tuple(gens)
        return self._small_gens

    def find_conjugator(self, source: "PermutationGroup",
                        target: "PermutationGroup") -> Optional[Perm]:
        """
        Find g in this group with source^g == target.

        Returns:
            The first such g in element order, or None
        """
        if source.order != target.order:
            return None
        for g in self.element_list:
            if source.conjugate(g) == target:
                return g
        return None

    def sylow_subgroup(self, p: int) -> "PermutationGroup":
        """A Sylow p-subgroup (the first in sort order)."""
        if not is_prime(p):
            raise ValueError(f"{p} is not prime")
        n = self.order
        target = 1
        while n % p == 0:
            n //= p
            target *= p
        for H in self.subgroups():
            if H.order == target:
                return H
        raise ValueError(f"No subgroup of order {target}")  # unreachable by Sylow's theorem

    @property
    def prime(self) -> Optional[int]:
        """p when this is a non-trivial p-group, otherwise None."""
        pp = prime_power(self.order)
        return pp[0] if pp else None

    def __repr__(self):
        if self.name:
            return self.name
        gens = ", ".join(repr(g) for g in self.generators)
        return f"PermutationGroup([{gens}], degree={self.degree})"


# =============================================================================
# SECTION 4: Named Groups
# =============================================================================

def cyclic_group(n: int) -> PermutationGroup:
    """C_n acting regularly on n points."""
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    r = Perm([(i + 1) % n for i in range(n)])
    return PermutationGroup([r], degree=n, name=f"C{n}")


def dihedral_group(n: int) -> PermutationGroup:
    """
    Dihedral group of order 2n, the symmetries of a regular n-gon.

    Generated by the rotation (0 1 ... n-1) and the reflection i -> -i mod n.
    dihedral_group(4) is D8 with r = (0 1 2 3) and s = (1 3).
    """
    if n < 3:
        raise ValueError(f"n must be >= 3, got {n}")
    r = Perm([(i + 1) % n for i in range(n)])
    s = Perm([(-i) % n for i in range(n)])
    return PermutationGroup([r, s], degree=n, name=f"D{2 * n}")


def symmetric_group(n: int) -> PermutationGroup:
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    if n == 1:
        return PermutationGroup([], degree=1, name="S1")
    gens = [Perm.from_cycles([(0, 1)], n), Perm.from_cycles([tuple(range(n))], n)]
    return PermutationGroup(gens, degree=n, name=f"S{n}")


def alternating_group(n: int) -> PermutationGroup:
    """A_n, generated by the 3-cycles (0 1 i)."""
    if n < 3:
        raise ValueError(f"n must be >= 3, got {n}")
    gens = [Perm.from_cycles([(0, 1, i)], n) for i in range(2, n)]
    return PermutationGroup(gens, degree=n, name=f"A{n}")


def klein_four_group() -> PermutationGroup:
    """The normal Klein four-group {e, (0 1)(2 3), (0 2)(1 3), (0 3)(1 2)} of S4."""
    gens = [Perm.from_cycles([(0, 1), (2, 3)], 4), Perm.from_cycles([(0, 2), (1, 3)], 4)]
    return PermutationGroup(gens, degree=4, name="V4")
