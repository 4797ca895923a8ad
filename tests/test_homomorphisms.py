"""
Tests for group homomorphisms
"""

import pytest

from fusion_systems.groups import Perm, cyclic_group, dihedral_group, klein_four_group
from fusion_systems.homomorphisms import (
    GroupHomomorphism,
    all_injective_homomorphisms,
    conjugation_map,
    find_isomorphism,
    identity_map,
    inclusion_map,
)


def cycles(*cs, degree=4):
    return Perm.from_cycles(list(cs), degree)


R = cycles((0, 1, 2, 3))
S = cycles((1, 3))


class TestConstruction:
    def test_from_images(self):
        V = klein_four_group()
        a, b = cycles((0, 1), (2, 3)), cycles((0, 2), (1, 3))
        swap = GroupHomomorphism.from_images(V, V, [a, b], [b, a])
        assert swap(a) == b
        assert swap(a * b) == b * a
        assert swap.is_isomorphism()

    def test_non_homomorphic_assignment_rejected(self):
        V = klein_four_group()
        C4 = cyclic_group(4)
        a, b = V.generators
        with pytest.raises(ValueError):
            GroupHomomorphism.from_images(V, C4, [a, b], [R, R])

    def test_generators_must_generate_domain(self):
        V = klein_four_group()
        a = V.generators[0]
        with pytest.raises(ValueError):
            GroupHomomorphism.from_images(V, V, [a], [a])

    def test_mapping_must_cover_domain(self):
        V = klein_four_group()
        with pytest.raises(ValueError):
            GroupHomomorphism(V, V, {V.identity: V.identity})

    def test_is_homomorphism_detects_bad_table(self):
        D8 = dihedral_group(4)
        A = D8.subgroup([S])
        bad = GroupHomomorphism(A, A, {A.identity: S, S: A.identity})
        assert not bad.is_homomorphism()
        assert identity_map(A).is_homomorphism()

    def test_non_injective(self):
        C4 = cyclic_group(4)
        D8 = dihedral_group(4)
        phi = GroupHomomorphism.from_images(C4, D8, [C4.generators[0]], [S])
        assert phi.is_homomorphism()
        assert not phi.is_injective()
        assert phi.image.order == 2
        with pytest.raises(ValueError):
            phi.inverse()


class TestOperations:
    def test_compose_restrict_inverse(self):
        D8 = dihedral_group(4)
        c_r = conjugation_map(R, D8)
        c_s = conjugation_map(S, D8)
        both = c_s.compose(c_r)
        assert both == conjugation_map(R * S, D8)

        A = D8.subgroup([S])
        restricted = c_r.restrict(A)
        assert restricted.domain == A
        assert restricted.codomain == A.conjugate(R)
        assert restricted.inverse().compose(restricted) == identity_map(A)

    def test_equality_is_functional(self):
        D8 = dihedral_group(4)
        Z = D8.subgroup([R ** 2])
        # every element of D8 centralizes the centre
        assert conjugation_map(R, Z) == conjugation_map(S, Z)
        assert len({conjugation_map(g, Z) for g in D8}) == 1

    def test_codomain_participates_in_equality(self):
        D8 = dihedral_group(4)
        A = D8.subgroup([S])
        assert identity_map(A) != inclusion_map(A, D8)
        assert identity_map(A).corestrict(D8) == inclusion_map(A, D8)

    def test_transport(self):
        V = klein_four_group()
        W = dihedral_group(4).subgroup([S, R ** 2])
        phi = find_isomorphism(V, W)
        assert phi is not None
        a = V.generators[0]
        X = V.subgroup([a])
        moved = identity_map(X).transport(phi)
        assert moved == identity_map(phi.map_subgroup(X))

    def test_compose_requires_matching_groups(self):
        D8 = dihedral_group(4)
        A = D8.subgroup([S])
        B = D8.subgroup([R ** 2])
        with pytest.raises(ValueError):
            identity_map(B).compose(identity_map(A))


class TestEnumeration:
    def test_automorphism_counts(self):
        assert len(all_injective_homomorphisms(cyclic_group(4), cyclic_group(4))) == 2
        V = klein_four_group()
        assert len(all_injective_homomorphisms(V, V)) == 6
        D8 = dihedral_group(4)
        assert len(all_injective_homomorphisms(D8, D8)) == 8

    def test_injective_into_larger_group(self):
        D8 = dihedral_group(4)
        C2 = D8.subgroup([S])
        # one for each involution of D8
        assert len(all_injective_homomorphisms(C2, D8)) == 5
        assert all_injective_homomorphisms(D8, C2) == []

    def test_find_isomorphism(self):
        C4 = cyclic_group(4)
        V = klein_four_group()
        assert find_isomorphism(C4, V) is None
        rotations = dihedral_group(4).subgroup([R])
        iso = find_isomorphism(C4, rotations)
        assert iso is not None and iso.is_isomorphism()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
