from .PathCost import PathCost, PathCostAnalyzer, CyclePolicy
from .compare  import compare, Status, Verdict
