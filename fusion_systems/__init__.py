"""
Fusion Systems - Fusion Systems on Finite p-Groups

Fusion systems are categories whose objects are the subgroups of a finite
p-group P and whose morphisms are injective homomorphisms between them,
closed under composition, restriction and inversion onto images.

Four constructions share one interface (hom, aut, defining_data):
realized from an ambient group, transported along an isomorphism,
universal, and generated by a closure computation.
"""

__version__ = "0.1.0"

from .exceptions import FusionSystemError, DomainError, InvalidGeneratorError, ClosureOverflow
from .groups import (
    Perm,
    PermutationGroup,
    cyclic_group,
    dihedral_group,
    symmetric_group,
    alternating_group,
    klein_four_group,
    is_prime,
    prime_power,
)
from .homomorphisms import (
    GroupHomomorphism,
    identity_map,
    inclusion_map,
    conjugation_map,
    all_injective_homomorphisms,
    find_isomorphism,
)
from .registry import SubgroupRegistry
from .table import MorphismTable
from .closure import ClosureConfig, ClosureEngine, ClosureStats
from .fusion import (
    FusionSystem,
    RealizedFusionSystem,
    TransportedFusionSystem,
    UniversalFusionSystem,
    GeneratedFusionSystem,
    RealizedData,
    TransportedData,
    UniversalData,
    GeneratedData,
    inner_fusion_system,
)

__all__ = [
    "FusionSystemError",
    "DomainError",
    "InvalidGeneratorError",
    "ClosureOverflow",
    "Perm",
    "PermutationGroup",
    "cyclic_group",
    "dihedral_group",
    "symmetric_group",
    "alternating_group",
    "klein_four_group",
    "is_prime",
    "prime_power",
    "GroupHomomorphism",
    "identity_map",
    "inclusion_map",
    "conjugation_map",
    "all_injective_homomorphisms",
    "find_isomorphism",
    "SubgroupRegistry",
    "MorphismTable",
    "ClosureConfig",
    "ClosureEngine",
    "ClosureStats",
    "FusionSystem",
    "RealizedFusionSystem",
    "TransportedFusionSystem",
    "UniversalFusionSystem",
    "GeneratedFusionSystem",
    "RealizedData",
    "TransportedData",
    "UniversalData",
    "GeneratedData",
    "inner_fusion_system",
]
