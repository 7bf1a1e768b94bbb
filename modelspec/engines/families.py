"""Built-in model families and their generalized arguments."""
from __future__ import annotations

from ..registry.registry import SpecRegistry
from ..registry.types import (
    GeneralizedArgument,
    Mode,
    at_least,
    non_negative_number,
    one_of,
    positive_int,
    proportion,
    unit_interval,
)


REGRESSION = (Mode.REGRESSION,)
CLASSIFICATION = (Mode.CLASSIFICATION,)
BOTH = (Mode.REGRESSION, Mode.CLASSIFICATION)

PENALTY = GeneralizedArgument(
    "penalty", default=None, validator=non_negative_number,
    description="amount of regularization, non-negative number",
)
MIXTURE = GeneralizedArgument(
    "mixture", default=1.0, validator=unit_interval,
    description="proportion of L1 regularization, number in [0, 1]",
)
MTRY = GeneralizedArgument(
    "mtry", default=None, validator=positive_int,
    description="predictors sampled at each split, positive integer",
)
TREES = GeneralizedArgument(
    "trees", default=500, validator=positive_int,
    description="number of trees, positive integer",
)
MIN_N = GeneralizedArgument(
    "min_n", default=None, validator=at_least(2, integer=True),
    description="minimum rows in a node to split further, integer >= 2",
)
TREE_DEPTH = GeneralizedArgument(
    "tree_depth", default=None, validator=positive_int,
    description="maximum tree depth, positive integer",
)
LEARN_RATE = GeneralizedArgument(
    "learn_rate", default=0.1, validator=non_negative_number,
    description="boosting shrinkage, positive number",
)
SAMPLE_SIZE = GeneralizedArgument(
    "sample_size", default=1.0, validator=proportion,
    description="proportion of rows sampled per tree, number in (0, 1]",
)
COST_COMPLEXITY = GeneralizedArgument(
    "cost_complexity", default=0.0, validator=non_negative_number,
    description="cost-complexity pruning parameter, non-negative number",
)
NEIGHBORS = GeneralizedArgument(
    "neighbors", default=5, validator=positive_int,
    description="number of neighbors, positive integer",
)
WEIGHT_FUNC = GeneralizedArgument(
    "weight_func", default="uniform", validator=one_of("uniform", "distance"),
    description="neighbor weighting, 'uniform' or 'distance'",
)
DIST_POWER = GeneralizedArgument(
    "dist_power", default=2, validator=at_least(1),
    description="Minkowski distance power, number >= 1",
)


def register_default_families(registry: SpecRegistry) -> SpecRegistry:
    """Register the built-in model families.

    Args:
        registry: Registry to populate

    Returns:
        The same registry
    """
    registry.register_family(
        "linear_reg", [PENALTY, MIXTURE], REGRESSION,
        description="Linear regression",
    )
    registry.register_family(
        "logistic_reg", [PENALTY, MIXTURE], CLASSIFICATION,
        description="Logistic regression for binary outcomes",
    )
    registry.register_family(
        "rand_forest", [MTRY, TREES, MIN_N], BOTH,
        description="Random forest",
    )
    registry.register_family(
        "boost_tree", [MTRY, TREES, MIN_N, TREE_DEPTH, LEARN_RATE, SAMPLE_SIZE], BOTH,
        description="Gradient boosted trees",
    )
    registry.register_family(
        "decision_tree", [TREE_DEPTH, MIN_N, COST_COMPLEXITY], BOTH,
        description="Single decision tree",
    )
    registry.register_family(
        "nearest_neighbor", [NEIGHBORS, WEIGHT_FUNC, DIST_POWER], BOTH,
        description="K-nearest neighbors",
    )
    return registry
