# https://github.com/ethereum/yellowpaper, Istanbul
# PUSHn, DUPn, SWAPn and LOGn are generated below
_defined = (
    # Value, Mnemonic,          δ,  α  ->  opcode, name, pops, pushes
    (  0x00, 'STOP',            0,  0),
    (  0x01, 'ADD',             2,  1),
    (  0x02, 'MUL',             2,  1),
    (  0x03, 'SUB',             2,  1),
    (  0x04, 'DIV',             2,  1),
    (  0x05, 'SDIV',            2,  1),
    (  0x06, 'MOD',             2,  1),
    (  0x07, 'SMOD',            2,  1),
    (  0x08, 'ADDMOD',          3,  1),
    (  0x09, 'MULMOD',          3,  1),
    (  0x0a, 'EXP',             2,  1),
    (  0x0b, 'SIGNEXTEND',      2,  1),
    (  0x10, 'LT',              2,  1),
    (  0x11, 'GT',              2,  1),
    (  0x12, 'SLT',             2,  1),
    (  0x13, 'SGT',             2,  1),
    (  0x14, 'EQ',              2,  1),
    (  0x15, 'ISZERO',          1,  1),
    (  0x16, 'AND',             2,  1),
    (  0x17, 'OR',              2,  1),
    (  0x18, 'XOR',             2,  1),
    (  0x19, 'NOT',             1,  1),
    (  0x1a, 'BYTE',            2,  1),
    (  0x1b, 'SHL',             2,  1),
    (  0x1c, 'SHR',             2,  1),
    (  0x1d, 'SAR',             2,  1),
    (  0x20, 'SHA3',            2,  1),
    (  0x30, 'ADDRESS',         0,  1),
    (  0x31, 'BALANCE',         1,  1),
    (  0x32, 'ORIGIN',          0,  1),
    (  0x33, 'CALLER',          0,  1),
    (  0x34, 'CALLVALUE',       0,  1),
    (  0x35, 'CALLDATALOAD',    1,  1),
    (  0x36, 'CALLDATASIZE',    0,  1),
    (  0x37, 'CALLDATACOPY',    3,  0),
    (  0x38, 'CODESIZE',        0,  1),
    (  0x39, 'CODECOPY',        3,  0),
    (  0x3a, 'GASPRICE',        0,  1),
    (  0x3b, 'EXTCODESIZE',     1,  1),
    (  0x3c, 'EXTCODECOPY',     4,  0),
    (  0x3d, 'RETURNDATASIZE',  0,  1),
    (  0x3e, 'RETURNDATACOPY',  3,  0),
    (  0x3f, 'EXTCODEHASH',     1,  1),
    (  0x40, 'BLOCKHASH',       1,  1),
    (  0x41, 'COINBASE',        0,  1),
    (  0x42, 'TIMESTAMP',       0,  1),
    (  0x43, 'NUMBER',          0,  1),
    (  0x44, 'DIFFICULTY',      0,  1),
    (  0x45, 'GASLIMIT',        0,  1),
    (  0x46, 'CHAINID',         0,  1),
    (  0x47, 'SELFBALANCE',     0,  1),
    (  0x50, 'POP',             1,  0),
    (  0x51, 'MLOAD',           1,  1),
    (  0x52, 'MSTORE',          2,  0),
    (  0x53, 'MSTORE8',         2,  0),
    (  0x54, 'SLOAD',           1,  1),
    (  0x55, 'SSTORE',          2,  0),
    (  0x56, 'JUMP',            1,  0),
    (  0x57, 'JUMPI',           2,  0),
    (  0x58, 'PC',              0,  1),
    (  0x59, 'MSIZE',           0,  1),
    (  0x5a, 'GAS',             0,  1),
    (  0x5b, 'JUMPDEST',        0,  0),
    (  0xf0, 'CREATE',          3,  1),
    (  0xf1, 'CALL',            7,  1),
    (  0xf2, 'CALLCODE',        7,  1),
    (  0xf3, 'RETURN',          2,  0),
    (  0xf4, 'DELEGATECALL',    6,  1),
    (  0xf5, 'CREATE2',         4,  1),
    (  0xfa, 'STATICCALL',      6,  1),
    (  0xfd, 'REVERT',          2,  0),
    (  0xfe, 'INVALID',         0,  0),
    (  0xff, 'SELFDESTRUCT',    1,  0),
)

def _build_instruction_list():
    res = [()] * 256
    for t in _defined:
        res[t[0]] = t
    for i in range(32):
        res[0x60 + i] = (0x60 + i, f'PUSH{i + 1}',  0,     1    )
    for i in range(16):
        res[0x80 + i] = (0x80 + i, f'DUP{i + 1}',   i + 1, i + 2)
        res[0x90 + i] = (0x90 + i, f'SWAP{i + 1}',  i + 2, i + 2)
    for i in range(5):
        res[0xa0 + i] = (0xa0 + i, f'LOG{i}',       i + 2, 0    )
    return tuple(res)

instruction_list = _build_instruction_list()

instruction_map = {
    t[1]: t[0]
    for t in instruction_list
    if t
}

OPCODE_INVALID  = instruction_map['INVALID']
OPCODE_PUSH1    = instruction_map['PUSH1']
OPCODE_PUSH32   = instruction_map['PUSH32']
OPCODE_DUP1     = instruction_map['DUP1']
OPCODE_DUP16    = instruction_map['DUP16']
OPCODE_SWAP1    = instruction_map['SWAP1']
OPCODE_SWAP16   = instruction_map['SWAP16']
OPCODE_JUMPDEST = instruction_map['JUMPDEST']

OPCODES_JUMP = tuple(instruction_map[t] for t in (
    'JUMP',
    'JUMPI',
))

OPCODES_TERMINATOR = tuple(instruction_map[t] for t in (
    'INVALID',
    'JUMP',
    'JUMPI',
    'RETURN',
    'REVERT',
    'SELFDESTRUCT',
    'STOP',
))

# Halting successfully, the caller's transfer goes through
OPCODES_SUCCESS = tuple(instruction_map[t] for t in (
    'RETURN',
    'SELFDESTRUCT',
    'STOP',
))

OPCODES_FAILURE = tuple(instruction_map[t] for t in (
    'INVALID',
    'REVERT',
))

def is_defined(opcode):
    return 0 <= opcode < 256 and bool(instruction_list[opcode])

class EvmInstruction:

    def __init__(self, offset, opcode, push_value=None):
        self._offset     = offset
        self._opcode     = opcode
        self._push_value = push_value

    def __repr__(self):
        if self.is_push(): return f'{self._offset:x}:{self.name()} 0x{self._push_value:x}'
        else:              return f'{self._offset:x}:{self.name()}'

    def offset(    self): return self._offset
    def opcode(    self): return self._opcode
    def push_value(self): return self._push_value
    def name(      self): return self.data()[1]
    def pops(      self): return self.data()[2]
    def pushes(    self): return self.data()[3]

    def data(self):
        # undefined bytes execute like INVALID
        if is_defined(self._opcode): return instruction_list[self._opcode]
        else:                        return instruction_list[OPCODE_INVALID]

    def is_defined(          self): return is_defined(self._opcode)
    def is_push(             self): return OPCODE_PUSH1 <= self._opcode <= OPCODE_PUSH32
    def is_dup(              self): return OPCODE_DUP1  <= self._opcode <= OPCODE_DUP16
    def is_swap(             self): return OPCODE_SWAP1 <= self._opcode <= OPCODE_SWAP16
    def is_jumpdest(         self): return self._opcode == OPCODE_JUMPDEST
    def is_jump(             self): return self._opcode in OPCODES_JUMP
    def is_terminator(       self): return self._opcode in OPCODES_TERMINATOR or not self.is_defined()
    def is_success(          self): return self._opcode in OPCODES_SUCCESS
    def is_failure(          self): return self._opcode in OPCODES_FAILURE   or not self.is_defined()

    def size(self):
        if self.is_push(): return 2 + self._opcode - OPCODE_PUSH1
        else:              return 1

def NamedEvmInstruction(offset, name, push_value=None):
    return EvmInstruction(offset, instruction_map[name], push_value)
