# fusion_systems/constants.py
"""
Fusion System Constants

LAYER 1: Closure Ceilings
- DEFAULT_MAX_STEPS: worklist items the closure engine may process
- DEFAULT_MAX_MORPHISMS: stored automorphisms + witnesses before giving up

LAYER 2: Group Enumeration
- MAX_ENUMERATED_ORDER: largest group whose elements are materialized
"""


# =============================================================================
# LAYER 1: Closure Ceilings
# =============================================================================

# Inputs are finite so closure always terminates; the ceilings only guard
# against pathological generator sets from untrusted callers.
DEFAULT_MAX_STEPS = 200_000
DEFAULT_MAX_MORPHISMS = 100_000

assert DEFAULT_MAX_STEPS >= 1 and DEFAULT_MAX_MORPHISMS >= 1


# =============================================================================
# LAYER 2: Group Enumeration
# =============================================================================

# Element sets are held in memory; everything here is brute force.
MAX_ENUMERATED_ORDER = 50_000
