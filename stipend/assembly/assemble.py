from .EvmInstruction import instruction_map, OPCODE_PUSH1, OPCODE_PUSH32

# Mnemonics separated by whitespace, `#` starts a comment.
#   PUSHn <int>   immediate in any base int() understands (0x.., 0b.., decimal)
#   name:         a JUMPDEST that can be referenced as @name
#   @name         PUSH2 of the label's offset
def assemble(text):
    tokens = []
    for line in text.splitlines():
        tokens.extend(line.partition('#')[0].split())
    #
    items  = []
    labels = {}
    offset = 0
    it     = iter(tokens)
    for tok in it:
        if tok.endswith(':'):
            label = tok[:-1]
            if label in labels:
                raise ValueError(f'Duplicate label {label}')
            labels[label] = offset
            items.append((instruction_map['JUMPDEST'], None, 0))
            offset += 1
        elif tok.startswith('@'):
            items.append((instruction_map['PUSH2'], tok[1:], 2))
            offset += 3
        else:
            opcode = instruction_map.get(tok.upper())
            if opcode is None:
                raise ValueError(f'Unknown mnemonic {tok}')
            if OPCODE_PUSH1 <= opcode <= OPCODE_PUSH32:
                size = 1 + opcode - OPCODE_PUSH1
                try:
                    value = int(next(it), 0)
                except StopIteration:
                    raise ValueError(f'{tok} without immediate') from None
                if not 0 <= value < 1 << (8 * size):
                    raise ValueError(f'{tok} immediate {value:#x} out of range')
                items.append((opcode, value, size))
                offset += 1 + size
            else:
                items.append((opcode, None, 0))
                offset += 1
    #
    res = bytearray()
    for opcode, value, size in items:
        res.append(opcode)
        if type(value) is str:
            if value not in labels:
                raise ValueError(f'Unknown label {value}')
            value = labels[value]
        if size:
            res += value.to_bytes(size, 'big')
    return bytes(res)
