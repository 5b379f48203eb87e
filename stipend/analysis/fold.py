from stipend.helpers import u256, s256, FF32

class _NonZero:
    def __repr__(self):
        return 'NZ'

# Unknown but certainly not zero, the CALLVALUE of a value transfer
NONZERO = _NonZero()

def _ints(*avs):
    return all(type(a) is int for a in avs)

# Value pushed by `en` given its popped arguments (avs[0] was the top of the
# stack), when executed as a plain value transfer: empty calldata and a
# nonzero CALLVALUE. Returns an int when known, NONZERO or None otherwise.
def fold(en, avs):
    # pylint: disable=too-many-branches
    # pylint: disable=too-many-return-statements
    name = en.name()
    #
    if   name == 'PC':            return en.offset()
    elif name == 'CALLDATASIZE':  return 0
    elif name == 'CALLDATALOAD':  return 0
    elif name == 'CALLVALUE':     return NONZERO
    #
    elif name == 'ADD':
        a0, a1 = avs
        if   a0 == 0:                        return a1
        elif a1 == 0:                        return a0
        elif _ints(a0, a1):                  return u256(a0 + a1)
        #
    elif name == 'SUB':
        a0, a1 = avs
        if   a1 == 0:                        return a0
        elif _ints(a0, a1):                  return u256(a0 - a1)
        #
    elif name == 'MUL':
        a0, a1 = avs
        if   a0 == 0 or a1 == 0:             return 0
        elif a0 == 1:                        return a1
        elif a1 == 1:                        return a0
        elif _ints(a0, a1):                  return u256(a0 * a1)
        #
    elif name == 'DIV':
        a0, a1 = avs
        if   a0 == 0 or a1 == 0:             return 0
        elif a1 == 1:                        return a0
        elif _ints(a0, a1):                  return a0 // a1
        #
    elif name == 'MOD':
        a0, a1 = avs
        if   a0 == 0 or a1 in (0, 1):        return 0
        elif _ints(a0, a1):                  return a0 % a1
        #
    elif name == 'ADDMOD':
        a0, a1, a2 = avs
        if   a2 in (0, 1):                   return 0
        elif _ints(a0, a1, a2):              return (a0 + a1) % a2
        #
    elif name == 'MULMOD':
        a0, a1, a2 = avs
        if   a0 == 0 or a1 == 0:             return 0
        elif a2 in (0, 1):                   return 0
        elif _ints(a0, a1, a2):              return (a0 * a1) % a2
        #
    elif name == 'EXP':
        a0, a1 = avs
        if   a1 == 0:                        return 1 # 0**0 = 1
        elif a0 == 0:                        return 0
        elif a0 == 1:                        return 1
        elif a1 == 1:                        return a0
        elif _ints(a0, a1):                  return pow(a0, a1, FF32 + 1)
        #
    elif name == 'LT':
        a0, a1 = avs
        if   a1 == 0:                        return 0
        elif _ints(a0, a1):                  return 1 if a0 < a1 else 0
        #
    elif name == 'GT':
        a0, a1 = avs
        if   a0 == 0:                        return 0
        elif a1 == 0 and a0 is NONZERO:      return 1
        elif _ints(a0, a1):                  return 1 if a0 > a1 else 0
        #
    elif name == 'SLT':
        a0, a1 = avs
        if   _ints(a0, a1):                  return 1 if s256(a0) < s256(a1) else 0
        #
    elif name == 'SGT':
        a0, a1 = avs
        if   _ints(a0, a1):                  return 1 if s256(a0) > s256(a1) else 0
        #
    elif name == 'EQ':
        a0, a1 = avs
        if   _ints(a0, a1):                  return 1 if a0 == a1 else 0
        elif NONZERO in (a0, a1) and 0 in (a0, a1): return 0
        #
    elif name == 'ISZERO':
        a0, = avs
        if   type(a0) is int:                return 1 if a0 == 0 else 0
        elif a0 is NONZERO:                  return 0
        #
    elif name == 'AND':
        a0, a1 = avs
        if   a0 == 0 or a1 == 0:             return 0
        elif a0 == FF32:                     return a1
        elif a1 == FF32:                     return a0
        elif _ints(a0, a1):                  return a0 & a1
        #
    elif name == 'OR':
        a0, a1 = avs
        if   a0 == 0:                        return a1
        elif a1 == 0:                        return a0
        elif NONZERO in (a0, a1):            return NONZERO
        elif _ints(a0, a1):                  return a0 | a1
        #
    elif name == 'XOR':
        a0, a1 = avs
        if   a0 == 0:                        return a1
        elif a1 == 0:                        return a0
        elif _ints(a0, a1):                  return a0 ^ a1
        #
    elif name == 'NOT':
        a0, = avs
        if   type(a0) is int:                return u256(~a0)
        #
    elif name == 'BYTE':
        a0, a1 = avs
        if type(a0) is int:
            if   a0 >= 32:                   return 0
            elif a1 == 0:                    return 0
            elif type(a1) is int:            return (a1 >> (248 - 8 * a0)) & 0xFF
        #
    elif name == 'SHL':
        a0, a1 = avs
        if   a1 == 0:                        return 0
        elif type(a0) is int:
            if   a0 >= 256:                  return 0
            elif type(a1) is int:            return u256(a1 << a0)
        #
    elif name == 'SHR':
        a0, a1 = avs
        if   a1 == 0:                        return 0
        elif type(a0) is int:
            if   a0 >= 256:                  return 0
            elif type(a1) is int:            return a1 >> a0
        #
    elif name == 'SAR':
        a0, a1 = avs
        if   a1 == 0:                        return 0
        elif _ints(a0, a1):                  return u256(s256(a1) >> min(a0, 256))
        #
    elif name == 'SIGNEXTEND':
        a0, a1 = avs
        if _ints(a0, a1):
            if a0 >= 31:                     return a1
            bit  = 8 * a0 + 7
            mask = (1 << bit) - 1
            if a1 & (1 << bit):              return u256(a1 | ~mask)
            else:                            return a1 & mask
    #
    return None
