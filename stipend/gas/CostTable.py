from stipend.assembly.EvmInstruction import instruction_map

# gas forwarded to the callee of a plain value transfer (transfer/send)
STIPEND = 2300

G_ZERO     = 0
G_JUMPDEST = 1
G_BASE     = 2
G_VERYLOW  = 3
G_LOW      = 5
G_MID      = 8
G_HIGH     = 10

TIERS = {
    G_ZERO: (
        'STOP', 'RETURN', 'REVERT', 'INVALID',
    ),
    G_BASE: (
        'ADDRESS', 'ORIGIN', 'CALLER', 'CALLVALUE', 'CALLDATASIZE', 'CODESIZE',
        'GASPRICE', 'RETURNDATASIZE', 'COINBASE', 'TIMESTAMP', 'NUMBER',
        'DIFFICULTY', 'GASLIMIT', 'CHAINID', 'POP', 'PC', 'MSIZE', 'GAS',
    ),
    G_VERYLOW: (
        'ADD', 'SUB', 'NOT', 'LT', 'GT', 'SLT', 'SGT', 'EQ', 'ISZERO', 'AND',
        'OR', 'XOR', 'BYTE', 'SHL', 'SHR', 'SAR', 'CALLDATALOAD', 'MLOAD',
        'MSTORE', 'MSTORE8', 'CALLDATACOPY', 'CODECOPY', 'RETURNDATACOPY',
    ),
    G_LOW: (
        'MUL', 'DIV', 'SDIV', 'MOD', 'SMOD', 'SIGNEXTEND', 'SELFBALANCE',
    ),
    G_MID: (
        'ADDMOD', 'MULMOD', 'JUMP',
    ),
    G_HIGH: (
        'JUMPI', 'EXP',
    ),
    G_JUMPDEST: (
        'JUMPDEST',
    ),
}

# Static part only: EXP bytes, SHA3/copy words, LOG data, memory expansion
# and the value/new-account surcharges of calls are not priced.
# SSTORE is the cheapest pre-EIP-2200 write.
SPECIAL = {
    'SHA3':         30,
    'BALANCE':      400,
    'EXTCODESIZE':  700,
    'EXTCODECOPY':  700,
    'EXTCODEHASH':  400,
    'BLOCKHASH':    20,
    'SLOAD':        200,
    'SSTORE':       5000,
    'CREATE':       32000,
    'CALL':         700,
    'CALLCODE':     700,
    'DELEGATECALL': 700,
    'CREATE2':      32000,
    'STATICCALL':   700,
    'SELFDESTRUCT': 5000,
}

def _base_costs():
    costs = dict(SPECIAL)
    for cost, names in TIERS.items():
        for name in names:
            costs[name] = cost
    for i in range(1, 33): costs[f'PUSH{i}'] = G_VERYLOW
    for i in range(1, 17): costs[f'DUP{i}']  = G_VERYLOW
    for i in range(1, 17): costs[f'SWAP{i}'] = G_VERYLOW
    for i in range(5):     costs[f'LOG{i}']  = 375 * (i + 1)
    return costs


class CostTable:

    def __init__(self, name, costs, invalid=()):
        self.name     = name
        self._costs   = dict(costs)
        self._invalid = frozenset(invalid)
        missing = sorted(n for n in instruction_map if n not in self._costs)
        if missing:
            raise ValueError(f'Cost table {name} has no cost for ' + ', '.join(missing))
        negative = sorted(n for n, c in self._costs.items() if c < 0)
        if negative:
            raise ValueError(f'Cost table {name} has negative cost for ' + ', '.join(negative))

    def __repr__(self):
        return f'CostTable({self.name})'

    def __iter__(self):
        return iter(sorted(self._costs.items()))

    def cost(self, name):
        return self._costs[name]

    # executing an invalid instruction is an exceptional halt
    def is_valid(self, name):
        return name != 'INVALID' and name not in self._invalid

    def with_costs(self, name, invalid=None, **changes):
        costs = dict(self._costs)
        for op, c in changes.items():
            if op not in costs:
                raise ValueError(f'Unknown opcode {op}')
            costs[op] = c
        return CostTable(name, costs, self._invalid if invalid is None else invalid)

    def diff(self, other):
        res = {}
        for op, c in self._costs.items():
            c2 = other.cost(op)
            if c != c2 or self.is_valid(op) != other.is_valid(op):
                res[op] = (c if self.is_valid(op) else None, c2 if other.is_valid(op) else None)
        return res


# Petersburg pricing, SELFBALANCE does not exist yet
PRE_EIP1884 = CostTable('PRE_EIP1884', _base_costs(), invalid=('SELFBALANCE',))

POST_EIP1884 = PRE_EIP1884.with_costs(
    'POST_EIP1884',
    invalid     = (),
    SLOAD       = 800,
    BALANCE     = 700,
    EXTCODEHASH = 700,
)
