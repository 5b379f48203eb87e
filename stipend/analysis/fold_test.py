from .fold import fold, NONZERO

from stipend.assembly import NamedEvmInstruction
from stipend.helpers  import FF32

def f(name, *avs):
    return fold(NamedEvmInstruction(7, name), list(avs))

def empty_calldata_test():
    assert f('CALLDATASIZE') == 0
    assert f('CALLDATALOAD', None) == 0
    assert f('CALLVALUE') is NONZERO
    assert f('PC') == 7

def selector_of_empty_calldata_test():
    # PUSH1 0 CALLDATALOAD PUSH1 0xe0 SHR
    assert f('SHR', 0xe0, 0) == 0
    assert f('DIV', 0, 1 << 224) == 0
    assert f('AND', 0xffffffff, 0) == 0
    assert f('EQ', 0x12345678, 0) == 0
    assert f('LT', 0, 4) == 1

def callvalue_test():
    assert f('ISZERO', NONZERO) == 0
    assert f('EQ', NONZERO, 0) == 0
    assert f('GT', NONZERO, 0) == 1
    assert f('ADD', NONZERO, 1) is None

def arithmetic_test():
    assert f('ADD', FF32, 2) == 1
    assert f('SUB', 1, 2) == FF32
    assert f('EXP', 2, 256) == 0
    assert f('EXP', 2, 8) == 256
    assert f('DIV', 5, 0) == 0
    assert f('MOD', 5, 3) == 2
    assert f('NOT', 0) == FF32
    assert f('BYTE', 31, 0x1234) == 0x34
    assert f('BYTE', 30, 0x1234) == 0x12
    assert f('SHL', 4, 1) == 16
    assert f('SAR', 4, FF32) == FF32
    assert f('SIGNEXTEND', 0, 0xff) == FF32
    assert f('SIGNEXTEND', 0, 0x7f) == 0x7f
    assert f('SLT', FF32, 0) == 1

def unknowns_test():
    assert f('ADD', None, 1) is None
    assert f('MUL', None, 0) == 0
    assert f('SUB', None, None) is None
    assert f('EQ', None, None) is None
    assert f('SLOAD', 0) is None
