from .EvmInstruction import EvmInstruction

from stipend.helpers import Log, DecompilationError

log = Log(__name__)

def read_hex(text):
    c = text.strip()
    if c[:2] in ('0x', '0X'):
        c = c[2:]
    try:
        return bytes.fromhex(c)
    except ValueError as e:
        raise DecompilationError(f'Not a hex string: {e}') from e

def disassemble_hex(text, strip=True):
    c = read_hex(text)
    if strip:
        c = strip_metadata(c)
    return disassemble(c)

# solc appends a CBOR map followed by its 2-byte big-endian length.
# The map starts with the swarm or ipfs hash of the metadata file.
METADATA_KEYS = (
    b'\x65bzzr0',
    b'\x65bzzr1',
    b'\x64ipfs',
)

def strip_metadata(runbin):
    r = runbin
    if len(r) < 2:
        return r
    meta_len = 2 + int.from_bytes(r[-2:], 'big')
    if len(r) <= meta_len:
        return r
    if r[-meta_len] & 0xF0 != 0xA0:
        return r
    if not r[1 - meta_len:].startswith(METADATA_KEYS):
        return r
    log.info('Removed', meta_len, 'bytes of metadata')
    return r[:-meta_len]

def disassemble(runbin):
    if not runbin:
        raise DecompilationError('Empty bytecode')
    res = []
    i   = 0
    l   = len(runbin)
    while i < l:
        en = EvmInstruction(i, runbin[i])
        if en.is_push():
            s = en.size()
            if i + s > l:
                raise DecompilationError(f'Truncated {en.name()} at byte {i}, code size is {l}')
            pv = int.from_bytes(runbin[i+1:i+s], 'big')
            en = EvmInstruction(i, runbin[i], pv)
            i += s
        else:
            i += 1
        res.append(en)
    log.debug('Disassembled', len(res), 'instructions from', l, 'bytes')
    return res
