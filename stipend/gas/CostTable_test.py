import pytest

from .CostTable import CostTable, PRE_EIP1884, POST_EIP1884, STIPEND

from stipend.assembly    import EvmInstruction, NamedEvmInstruction, instruction_map
from stipend.analysis    import BasicBlock

def ops_block(*names):
    return BasicBlock('b', [NamedEvmInstruction(i, n) for i, n in enumerate(names)])

def lookup_is_total_test():
    for opcode in range(256):
        name = EvmInstruction(0, opcode).name()
        for table in (PRE_EIP1884, POST_EIP1884):
            assert table.cost(name) >= 0
    for name in instruction_map:
        PRE_EIP1884.cost(name)
        POST_EIP1884.cost(name)

def eip1884_changes_test():
    assert PRE_EIP1884.diff(POST_EIP1884) == {
        'SLOAD':       (200, 800),
        'BALANCE':     (400, 700),
        'EXTCODEHASH': (400, 700),
        'SELFBALANCE': (None, 5),
    }
    assert not PRE_EIP1884.is_valid('SELFBALANCE')
    assert POST_EIP1884.is_valid('SELFBALANCE')
    assert not POST_EIP1884.is_valid('INVALID')
    assert STIPEND == 2300

def static_costs_test():
    assert PRE_EIP1884.cost('PUSH32')   == 3
    assert PRE_EIP1884.cost('JUMPDEST') == 1
    assert PRE_EIP1884.cost('JUMPI')    == 10
    assert PRE_EIP1884.cost('LOG2')     == 1125
    assert POST_EIP1884.cost('SSTORE')  == PRE_EIP1884.cost('SSTORE')

def capped_vault_costs_test():
    assert ops_block('SLOAD', 'SLOAD', 'BALANCE').cost(PRE_EIP1884) == 800
    assert ops_block('SLOAD', 'SELFBALANCE').cost(POST_EIP1884)     == 805
    assert     ops_block('SLOAD', 'SELFBALANCE').halts(PRE_EIP1884)
    assert not ops_block('SLOAD', 'SELFBALANCE').halts(POST_EIP1884)

def with_costs_test():
    t = POST_EIP1884.with_costs('T', SLOAD=576)
    assert t.cost('SLOAD')   == 576
    assert t.cost('BALANCE') == 700
    assert POST_EIP1884.cost('SLOAD') == 800
    with pytest.raises(ValueError):
        POST_EIP1884.with_costs('T', NOPE=1)
    with pytest.raises(ValueError):
        POST_EIP1884.with_costs('T', SLOAD=-1)

def missing_costs_test():
    with pytest.raises(ValueError):
        CostTable('partial', {'STOP': 0})
