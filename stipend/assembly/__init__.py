from .EvmInstruction import EvmInstruction, NamedEvmInstruction, instruction_list, instruction_map
from .disassemble    import disassemble, disassemble_hex, read_hex, strip_metadata
from .assemble       import assemble
