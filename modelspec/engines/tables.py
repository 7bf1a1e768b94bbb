"""Tables comparing engines and their argument names."""
from __future__ import annotations

from typing import List

import pandas as pd

from ..registry.registry import SpecRegistry


def argument_table(registry: SpecRegistry, family: str) -> pd.DataFrame:
    """Native argument names per engine for one family.

    Rows are the family's generalized arguments in declaration order,
    columns are engines; a missing cell means the engine does not expose
    that argument.

    Example:
        >>> argument_table(default_registry(), "rand_forest")
                        sklearn
        argument
        mtry       max_features
        trees      n_estimators
        min_n  min_samples_split
    """
    fam = registry.get_family(family)
    engines = [registry.get_engine(family, name) for name in registry.list_engines(family)]
    data = {
        engine.name: [engine.native_name(arg) for arg in fam.argument_names]
        for engine in engines
    }
    table = pd.DataFrame(data, index=pd.Index(list(fam.argument_names), name="argument"))
    return table.reindex(columns=[e.name for e in engines])


def show_engines(registry: SpecRegistry, family: str) -> pd.DataFrame:
    """One row per (engine, mode) registered for a family."""
    rows: List[dict] = []
    for name in registry.list_engines(family):
        engine = registry.get_engine(family, name)
        for mode in sorted(engine.modes, key=lambda m: m.value):
            rows.append({"engine": name, "mode": mode.value})
    return pd.DataFrame(rows, columns=["engine", "mode"])
