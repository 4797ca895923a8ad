"""
Tests for the Closure Engine
"""

import logging

import pytest

from fusion_systems import ClosureOverflow
from fusion_systems.closure import ClosureConfig, ClosureEngine
from fusion_systems.groups import Perm, dihedral_group, klein_four_group
from fusion_systems.homomorphisms import GroupHomomorphism, conjugation_map, identity_map


R = Perm.from_cycles([(0, 1, 2, 3)], 4)
S = Perm.from_cycles([(1, 3)], 4)
T = Perm.from_cycles([(0, 1), (2, 3)], 4)
THREE_CYCLE = Perm.from_cycles([(0, 1, 2)], 4)


class TestClosureConfig:
    def test_defaults(self):
        config = ClosureConfig()
        assert config.max_steps >= 1
        assert config.max_morphisms >= 1

    def test_rejects_non_positive_ceilings(self):
        with pytest.raises(ValueError):
            ClosureConfig(max_steps=0)
        with pytest.raises(ValueError):
            ClosureConfig(max_morphisms=-1)


class TestClosureEngine:
    def test_restrictions_are_propagated(self):
        V = klein_four_group()
        engine = ClosureEngine(V)
        engine.seed([conjugation_map(THREE_CYCLE, V, V)])
        table = engine.run()

        assert table.frozen
        involutions = [H for H in V.subgroups() if H.order == 2]
        assert len(involutions) == 3
        # the order-3 automorphism permutes the three involutions
        for X in involutions:
            for Y in involutions:
                assert len(table.get(X, Y)) == 1
            assert len(table.get(X, V)) == 3
        assert len(table.get(V, V)) == 3

    def test_redundant_seeds_are_counted(self):
        V = klein_four_group()
        alpha = conjugation_map(THREE_CYCLE, V, V)
        engine = ClosureEngine(V)
        engine.seed([alpha, alpha, alpha.compose(alpha), identity_map(V)])
        engine.run()
        assert engine.stats.redundant >= 3
        assert engine.stats.steps == engine.stats.incorporated + engine.stats.redundant

    def test_seed_order_does_not_change_result(self):
        D8 = dihedral_group(4)
        A = D8.subgroup([S])
        B = D8.subgroup([T])
        seeds = [GroupHomomorphism.from_images(A, B, [S], [T]), conjugation_map(R, D8, D8)]

        tables = []
        for ordered in (seeds, list(reversed(seeds))):
            engine = ClosureEngine(D8)
            engine.register(D8.subgroups())
            engine.seed(ordered)
            tables.append(engine.run())

        first, second = tables
        for X in D8.subgroups():
            assert first.registry.representative(X) == second.registry.representative(X)
            for Y in D8.subgroups():
                assert first.get(X, Y) == second.get(X, Y)

    def test_run_is_idempotent(self):
        V = klein_four_group()
        engine = ClosureEngine(V)
        engine.seed([conjugation_map(THREE_CYCLE, V, V)])
        table = engine.run()
        steps = engine.stats.steps
        assert engine.run() is table
        assert engine.stats.steps == steps

    def test_step_ceiling(self):
        V = klein_four_group()
        engine = ClosureEngine(V, ClosureConfig(max_steps=2))
        engine.seed([conjugation_map(THREE_CYCLE, V, V)])
        with pytest.raises(ClosureOverflow) as excinfo:
            engine.run()
        assert excinfo.value.steps == 3

    def test_size_ceiling(self):
        V = klein_four_group()
        engine = ClosureEngine(V, ClosureConfig(max_morphisms=2))
        engine.seed([conjugation_map(THREE_CYCLE, V, V)])
        with pytest.raises(ClosureOverflow):
            engine.run()

    def test_logs_completion(self, caplog):
        V = klein_four_group()
        engine = ClosureEngine(V)
        engine.seed([conjugation_map(THREE_CYCLE, V, V)])
        with caplog.at_level(logging.INFO, logger="fusion_systems.closure"):
            engine.run()
        assert any("closure" in record.getMessage() for record in caplog.records)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
