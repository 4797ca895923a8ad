"""
Tests for the Subgroup Registry and Morphism Table
"""

import pytest

from fusion_systems import DomainError
from fusion_systems.groups import Perm, alternating_group, dihedral_group, klein_four_group
from fusion_systems.homomorphisms import (
    GroupHomomorphism,
    conjugation_map,
    find_isomorphism,
    identity_map,
)
from fusion_systems.registry import SubgroupRegistry
from fusion_systems.table import MorphismTable


R = Perm.from_cycles([(0, 1, 2, 3)], 4)
S = Perm.from_cycles([(1, 3)], 4)
T = Perm.from_cycles([(0, 1), (2, 3)], 4)


class TestSubgroupRegistry:
    def test_isomorphism_classes_of_d8(self):
        D8 = dihedral_group(4)
        registry = SubgroupRegistry.populated(D8, finder=find_isomorphism)
        sizes = sorted(len(members) for members in registry.classes())
        # 1, C4, D8 alone; two Klein fours together; five involutions together
        assert sizes == [1, 1, 1, 2, 5]
        assert len(registry) == 10

    def test_witness_maps_onto_representative(self):
        D8 = dihedral_group(4)
        registry = SubgroupRegistry.populated(D8, finder=find_isomorphism)
        for H in D8.subgroups():
            rep, witness = registry.class_of(H)
            assert witness.domain == H
            assert witness.codomain == rep
            assert witness.is_isomorphism()

    def test_representative_independent_of_order(self):
        D8 = dihedral_group(4)
        forward = SubgroupRegistry.populated(D8, finder=find_isomorphism)
        backward = SubgroupRegistry.populated(D8, finder=find_isomorphism,
                                              subgroups=reversed(D8.subgroups()))
        for H in D8.subgroups():
            assert forward.representative(H) == backward.representative(H)
            assert backward.witness(H).codomain == backward.representative(H)

    def test_conjugacy_finder(self):
        A4 = alternating_group(4)
        V = klein_four_group()

        def conjugate_in_a4(source, target):
            g = A4.find_conjugator(source, target)
            return None if g is None else conjugation_map(g, source, target)

        registry = SubgroupRegistry.populated(V, finder=conjugate_in_a4)
        X = V.subgroup([T])
        Y = V.subgroup([Perm.from_cycles([(0, 3), (1, 2)], 4)])
        assert registry.is_conjugate_or_isomorphic(X, Y)
        assert not registry.is_conjugate_or_isomorphic(X, V)

    def test_merge_without_finder(self):
        D8 = dihedral_group(4)
        registry = SubgroupRegistry(D8)
        A = D8.subgroup([S])
        B = D8.subgroup([T])
        assert not registry.is_conjugate_or_isomorphic(A, B)

        phi = GroupHomomorphism.from_images(A, B, [S], [T])
        survivor, absorbed, transport = registry.merge(phi)
        assert {survivor, absorbed} == {A, B}
        assert transport.domain == absorbed and transport.codomain == survivor
        assert registry.is_conjugate_or_isomorphic(A, B)
        assert registry.members(survivor) == tuple(sorted([A, B], key=lambda h: h.sort_key))

        again = registry.merge(phi)
        assert again == (survivor, None, None)

    def test_foreign_subgroup_rejected(self):
        registry = SubgroupRegistry(klein_four_group())
        with pytest.raises(DomainError):
            registry.register(dihedral_group(4))


class TestMorphismTable:
    def test_add_is_deduplicated(self):
        D8 = dihedral_group(4)
        table = MorphismTable(SubgroupRegistry(D8))
        A = D8.subgroup([S])
        B = D8.subgroup([T])
        phi = GroupHomomorphism.from_images(A, B, [S], [T])
        assert table.add(phi)
        assert not table.add(phi)
        assert not table.add(GroupHomomorphism.from_images(A, B, [S], [T]))
        assert table.contains(phi)
        assert table.contains(phi.inverse())
        assert table.get(B, A) == frozenset({phi.inverse()})

    def test_identity_always_present(self):
        D8 = dihedral_group(4)
        table = MorphismTable(SubgroupRegistry(D8))
        assert not table.add(identity_map(D8))
        assert table.get(D8, D8) == frozenset({identity_map(D8)})

    def test_automorphisms_close_to_a_group(self):
        V = klein_four_group()
        table = MorphismTable(SubgroupRegistry(V))
        alpha = conjugation_map(Perm.from_cycles([(0, 1, 2)], 4), V, V)
        assert table.add(alpha)
        auts = table.get(V, V)
        assert len(auts) == 3
        assert alpha.compose(alpha) in auts

    def test_get_composes_through_inclusions(self):
        D8 = dihedral_group(4)
        table = MorphismTable(SubgroupRegistry(D8))
        A = D8.subgroup([S])
        B = D8.subgroup([T])
        V2 = D8.subgroup([T, R ** 2])
        phi = GroupHomomorphism.from_images(A, B, [S], [T])
        table.add(phi)
        assert table.get(A, V2) == frozenset({phi.corestrict(V2)})
        assert table.get(A, D8.subgroup([R])) == frozenset()

    def test_merge_carries_automorphisms(self):
        D8 = dihedral_group(4)
        table = MorphismTable(SubgroupRegistry(D8))
        V1 = D8.subgroup([S, R ** 2])
        V2 = D8.subgroup([T, R ** 2])
        swap = GroupHomomorphism.from_images(V1, V1, [S, R ** 2], [R ** 2, S])
        table.add(swap)
        iso = find_isomorphism(V1, V2)
        table.add(iso)
        assert len(table.get(V2, V2)) == 2
        assert len(table.get(V1, V2)) == 2

    def test_frozen_table_rejects_additions(self):
        D8 = dihedral_group(4)
        table = MorphismTable(SubgroupRegistry(D8))
        table.freeze()
        A = D8.subgroup([S])
        with pytest.raises(RuntimeError):
            table.add(identity_map(A))

    def test_frozen_table_lookups_do_not_register(self):
        D8 = dihedral_group(4)
        registry = SubgroupRegistry(D8)
        table = MorphismTable(registry)
        A = D8.subgroup([S])
        B = D8.subgroup([T])
        V1 = D8.subgroup([S, R ** 2])
        table.add(GroupHomomorphism.from_images(A, B, [S], [T]))
        table.freeze()
        size = table.size

        assert table.get(V1, D8) == frozenset({GroupHomomorphism(V1, D8, {g: g for g in V1})})
        assert table.get(V1, B) == frozenset()
        assert table.contains(identity_map(V1))
        assert not table.contains(GroupHomomorphism.from_images(V1, V1, [S, R ** 2], [R ** 2, S]))
        assert V1 not in registry
        assert A in registry
        assert table.size == size
        with pytest.raises(DomainError):
            table.get(alternating_group(4), D8)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
