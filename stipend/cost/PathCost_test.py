import math

import pytest

from .PathCost import PathCostAnalyzer, CyclePolicy
from .compare  import compare, Status

from stipend.analysis import Analysis
from stipend.assembly import assemble, disassemble
from stipend.gas      import PRE_EIP1884, POST_EIP1884
from stipend.helpers  import CycleInFallbackGraph

def ir(*blocks, entry=None):
    doc = {'blocks': [dict(id=ident, ops=ops, successors=succ, **extra) for ident, ops, succ, extra in blocks]}
    if entry is not None:
        doc['entry'] = entry
    a = Analysis()
    a.load_ir(doc)
    return a

def analyzed(text):
    a = Analysis()
    a.analyze(disassemble(assemble(text)))
    return a

def idents(pc):
    return [b.ident for b in pc.path]

def edge_idents(edges):
    return [(b.ident, b2.ident) for b, b2 in edges]

BRANCH = ir(
    ('a',     ['PUSH1 0x00', 'SLOAD', 'PUSH2 0x0010', 'JUMPI'], ['cheap', 'dear'], {}),
    ('dear',  ['BALANCE', 'POP', 'STOP'],                      [],                 {}),
    ('cheap', ['JUMPDEST', 'STOP'],                            [],                 {}),
)

# x <-> y is a cycle entered both at x (from e) and at y (from a)
DIAMOND = [
    ('e', ['JUMPDEST'],                    ['x', 'a'], {}),
    ('x', ['JUMPDEST'],                    ['y'],      {}),
    ('a', ['PUSH1 0x00', 'SLOAD', 'POP'],  ['y'],      {}),
    ('y', ['JUMPDEST'],                    ['x', 't'], {}),
    ('t', ['STOP'],                        [],         {}),
]

LOOP = '''
    PUSH1 0x00
loop:
    PUSH1 0x01 ADD DUP1 PUSH1 0x03 GT @loop JUMPI
    STOP
'''

# entry 5, head 220/820, body 421/1621, out 1
WHILE = '''
    PUSH1 0x00 POP
head:
    PUSH1 0x00 SLOAD ISZERO @out JUMPI
    PUSH1 0x00 SLOAD POP
    PUSH1 0x00 SLOAD POP
    @head JUMP
out:
    STOP
'''

# entry 14, fn 419/1619, ret1 15, ret2 1
CALLS = '''
    @ret1 @fn JUMP
ret1:
    @ret2 @fn JUMP
ret2:
    STOP
fn:
    PUSH1 0x00 SLOAD POP
    PUSH1 0x00 SLOAD POP
    JUMP
'''

def min_cost_test():
    pca = PathCostAnalyzer()
    pre = pca.min_cost(BRANCH, PRE_EIP1884)
    assert pre.cost == 216 + 1
    assert idents(pre) == ['a', 'cheap']
    assert pre.reachable()
    post = pca.min_cost(BRANCH, POST_EIP1884)
    assert post.cost == 816 + 1
    assert idents(post) == ['a', 'cheap']

def min_cost_is_stable_test():
    pca = PathCostAnalyzer()
    first = pca.min_cost(BRANCH, POST_EIP1884)
    again = pca.min_cost(BRANCH, POST_EIP1884)
    assert (first.cost, first.path) == (again.cost, again.path)

def single_block_test():
    ops = ['SLOAD'] * 4 + ['STOP']
    a   = ir(('f', ops, [], {}))
    pca = PathCostAnalyzer()
    assert pca.min_cost(a, PRE_EIP1884).cost == 800
    assert pca.min_cost(a, POST_EIP1884).cost == 3200
    test_table = POST_EIP1884.with_costs('POST_TEST', SLOAD=576, STOP=1)
    assert pca.min_cost(a, test_table).cost == 2305

def empty_exit_test():
    a = ir(('f', [], [], {}))
    assert PathCostAnalyzer().min_cost(a, PRE_EIP1884).cost == 0

def internal_function_called_twice_test():
    a   = analyzed(CALLS)
    pca = PathCostAnalyzer()
    pre = pca.min_cost(a, PRE_EIP1884)
    assert pre.cost == 14 + 419 + 15 + 419 + 1
    assert idents(pre) == [0, 17, 7, 17, 15]
    post = pca.min_cost(a, POST_EIP1884)
    assert post.cost == 14 + 1619 + 15 + 1619 + 1
    v = compare('c', pre.cost, post.cost)
    assert v.status is Status.FLAGGED
    assert (v.deficit, v.delta) == (968, 2400)
    # returning from the second call never reaches ret1 again
    assert PathCostAnalyzer(CyclePolicy.REJECT).min_cost(a, PRE_EIP1884).cost == 868

def cycle_with_two_entries_test():
    a = ir(*DIAMOND)
    for policy in (CyclePolicy.UNROLL_NONE, CyclePolicy.UNROLL_ONCE):
        pc = PathCostAnalyzer(policy).min_cost(a, PRE_EIP1884)
        assert pc.back_edges == []
        assert pc.cost == 3
        assert idents(pc) == ['e', 'x', 'y', 't']

def cycle_with_two_entries_rejected_test():
    a = ir(*DIAMOND)
    with pytest.raises(CycleInFallbackGraph) as e:
        PathCostAnalyzer(CyclePolicy.REJECT).min_cost(a, PRE_EIP1884)
    assert e.value.back_edges

def while_loop_test():
    a    = analyzed(WHILE)
    none = PathCostAnalyzer(CyclePolicy.UNROLL_NONE).min_cost(a, PRE_EIP1884)
    assert none.cost == 5 + 220 + 1
    assert idents(none) == [0, 3, 24]
    assert edge_idents(none.back_edges) == [(12, 3)]
    once = PathCostAnalyzer(CyclePolicy.UNROLL_ONCE).min_cost(a, PRE_EIP1884)
    assert once.cost == 5 + 220 + (421 + 220) + 1
    assert idents(once) == [0, 3, 24]
    assert PathCostAnalyzer(CyclePolicy.UNROLL_ONCE).min_cost(a, POST_EIP1884).cost == 5 + 820 + (1621 + 820) + 1
    with pytest.raises(CycleInFallbackGraph) as e:
        PathCostAnalyzer(CyclePolicy.REJECT).min_cost(a, PRE_EIP1884)
    assert edge_idents(e.value.back_edges) == [(12, 3)]

def self_loop_test():
    a = analyzed(LOOP)
    pc = PathCostAnalyzer(CyclePolicy.UNROLL_NONE).min_cost(a, PRE_EIP1884)
    assert pc.cost == 3 + 29 + 0
    assert idents(pc) == [0, 2, 14]
    assert edge_idents(pc.back_edges) == [(2, 2)]
    assert PathCostAnalyzer(CyclePolicy.UNROLL_ONCE).min_cost(a, PRE_EIP1884).cost == 3 + 29 + 29 + 0
    with pytest.raises(CycleInFallbackGraph):
        PathCostAnalyzer(CyclePolicy.REJECT).min_cost(a, PRE_EIP1884)

def loop_behind_halting_block_test():
    a = ir(
        ('e', ['JUMPDEST'],           ['h', 't'], {}),
        ('h', ['SELFBALANCE', 'POP'], ['l'],      {}),
        ('l', ['JUMPDEST'],           ['l', 't'], {}),
        ('t', ['STOP'],               [],         {}),
    )
    pca = PathCostAnalyzer(CyclePolicy.REJECT)
    # the loop is unreachable while SELFBALANCE is invalid
    pc = pca.min_cost(a, PRE_EIP1884)
    assert pc.cost == 1
    assert idents(pc) == ['e', 't']
    with pytest.raises(CycleInFallbackGraph) as e:
        pca.min_cost(a, POST_EIP1884)
    assert edge_idents(e.value.back_edges) == [('l', 'l')]

def halting_block_test():
    a = ir(
        ('e', ['JUMPDEST'],                           ['h', 'c'], {}),
        ('h', ['SELFBALANCE', 'POP', 'STOP'],         [],         {}),
        ('c', ['PUSH1 0x00', 'SLOAD', 'POP', 'STOP'], [],         {}),
    )
    pca = PathCostAnalyzer()
    # SELFBALANCE is an invalid instruction before Istanbul
    pre = pca.min_cost(a, PRE_EIP1884)
    assert pre.cost == 1 + 205
    assert idents(pre) == ['e', 'c']
    post = pca.min_cost(a, POST_EIP1884)
    assert post.cost == 1 + 7
    assert idents(post) == ['e', 'h']

def halting_entry_test():
    a   = ir(('e', ['SELFBALANCE', 'POP', 'STOP'], [], {}))
    pre = PathCostAnalyzer().min_cost(a, PRE_EIP1884)
    assert pre.cost == math.inf
    assert not pre.reachable()
    assert pre.path == []
    assert PathCostAnalyzer().min_cost(a, POST_EIP1884).cost == 7

def no_exit_under_table_test():
    a = ir(
        ('e', ['JUMPDEST'],                   ['h'], {}),
        ('h', ['SELFBALANCE', 'POP', 'STOP'], [],    {}),
    )
    assert PathCostAnalyzer().min_cost(a, PRE_EIP1884).cost == math.inf
    assert PathCostAnalyzer().min_cost(a, POST_EIP1884).cost == 8

def outside_fallback_ignored_test():
    a = ir(
        ('e', ['JUMPDEST'],                           ['o', 'c'], {}),
        ('o', ['STOP'],                               [],         {'fallback': False}),
        ('c', ['PUSH1 0x00', 'SLOAD', 'POP', 'STOP'], [],         {}),
    )
    pc = PathCostAnalyzer().min_cost(a, PRE_EIP1884)
    assert pc.cost == 206
    assert idents(pc) == ['e', 'c']

def tie_break_test():
    a = ir(
        ('e', ['JUMPDEST'],                  ['q', 'p'], {}),
        ('p', ['PUSH1 0x00', 'POP', 'STOP'], [],         {}),
        ('q', ['PUSH1 0x00', 'POP', 'STOP'], [],         {}),
    )
    pc = PathCostAnalyzer().min_cost(a, PRE_EIP1884)
    assert pc.cost == 6
    # equal costs resolve to the earlier block
    assert idents(pc) == ['e', 'p']
