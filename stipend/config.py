from stipend.gas.CostTable import STIPEND

BUDGET               = STIPEND

# CFG exploration limits, per contract
MAX_STATES_PER_BLOCK = 16
STEPS_PER_BYTE       = 20
MIN_STEPS            = 100_000
TIMEOUT              = 60.0 # seconds, None disables

CYCLE_POLICY         = 'none' # see stipend.cost.PathCost.CyclePolicy

EXECUTOR             = 'process'
WORKERS              = None # os.cpu_count()

GRAPHS               = False
GRAPHS_DIR           = 'graphs'


class Settings:

    def __init__(self, budget=None, cycle_policy=None, max_states_per_block=None, timeout=TIMEOUT, graphs=None, graphs_dir=None):
        self.budget               = BUDGET               if budget               is None else budget
        self.cycle_policy         = CYCLE_POLICY         if cycle_policy         is None else cycle_policy
        self.max_states_per_block = MAX_STATES_PER_BLOCK if max_states_per_block is None else max_states_per_block
        self.timeout              = timeout
        self.graphs               = GRAPHS               if graphs               is None else graphs
        self.graphs_dir           = GRAPHS_DIR           if graphs_dir           is None else graphs_dir

    def __repr__(self):
        return 'Settings(' + ', '.join(f'{k}={v!r}' for k, v in vars(self).items()) + ')'
