import time

from collections import deque

from .BasicBlock import BasicBlock
from .Stack      import Stack, StackUnderflow, StackOverflow, join_states
from .fold       import fold, NONZERO

from stipend                                import config
from stipend.assembly.EvmInstruction        import NamedEvmInstruction, instruction_map
from stipend.helpers                        import Log, DecompilationError, NoFallbackFunction, AnalysisBudgetExceeded

log = Log(__name__)

class Analysis:

    def __init__(self, max_states_per_block=None, max_steps=None, timeout=None):
        self._blocks               = []
        self._block_map            = {}
        self._entry                = None
        self._end                  = 0
        self._return_sites         = set()
        self._contexts             = {}
        self._context_edges        = {}
        self._exit_contexts        = set()
        self.max_states_per_block  = config.MAX_STATES_PER_BLOCK if max_states_per_block is None else max_states_per_block
        self.max_steps             = max_steps
        self.timeout               = timeout
        self.steps                 = 0

    def __iter__(self):
        return iter(self._blocks)

    def __len__(self):
        return len(self._blocks)

    def get_entry_block(self):
        return self._entry

    def get_block_at(self, ident):
        return self._block_map.get(ident)

    def fallback_blocks(self):
        return [b for b in self._blocks if b.fallback]

    # only edges whose both endpoints belong to the fallback function
    def fallback_edges(self):
        for b in self._blocks:
            if not b.fallback: continue
            for b2 in b.out_edges():
                if b2.fallback:
                    yield b, b2

    def unresolved_jumps(self):
        return [b for b in self._blocks if b.fallback and b.unresolved_jump]

    #
    # Contexts
    #
    # A context is a block together with the return addresses on the stack
    # when it is entered. An internal function called from two places is
    # two contexts, each returning only to its own call site.
    #

    def get_entry_context(self):
        return (self._entry, ())

    def contexts(self):
        return list(self._contexts)

    def context_edges(self):
        return list(self._context_edges)

    def is_exit_context(self, node):
        return node in self._exit_contexts

    def _context(self, b, state):
        return (b, tuple(w for w in state if type(w) is int and w in self._return_sites))

    def _add_context_edge(self, node, node2):
        self._contexts[node2] = None
        self._context_edges[(node, node2)] = None

    #
    # Bytecode
    #

    def analyze(self, ens):
        assert not self._blocks
        if not ens:
            raise DecompilationError('No instructions')
        self._prepare_basic_blocks(ens)
        self._explore()
        self._check_fallback()

    def _prepare_basic_blocks(self, ens):
        breaks = [0]
        for en in ens:
            if   en.is_jumpdest():   breaks.append(en.offset())
            elif en.is_terminator(): breaks.append(en.offset() + en.size())
        self._end = ens[-1].offset() + ens[-1].size()
        breaks.append(self._end)
        #
        j = 0
        l = len(ens)
        for i0, i1 in zip(breaks, breaks[1:]):
            if i1 <= i0: continue
            bens = []
            while j < l and ens[j].offset() < i1:
                bens.append(ens[j])
                j += 1
            b = BasicBlock(i0, bens, i1)
            self._blocks.append(b)
            self._block_map[i0] = b
        self._entry = self._blocks[0]
        #
        # PUSH ret; ...; PUSH fn; JUMP; ret: JUMPDEST
        for b, b2 in zip(self._blocks, self._blocks[1:]):
            last = b.last()
            if b2.is_jump_target() and last is not None and last.name() == 'JUMP':
                self._return_sites.add(b2.ident)
        log.debug('Prepared', len(self._blocks), 'basic blocks,', len(self._return_sites), 'return sites')

    def _explore(self):
        max_steps = self.max_steps
        if max_steps is None:
            max_steps = self._end * config.STEPS_PER_BYTE + config.MIN_STEPS
        deadline = None if self.timeout is None else time.monotonic() + self.timeout
        #
        seen = {}
        wl   = deque()
        self._admit(seen, self._entry, ())
        self._contexts[self.get_entry_context()] = None
        wl.append((self._entry, ()))
        while wl:
            b, state = wl.popleft()
            self.steps += 1
            if self.steps > max_steps:
                raise AnalysisBudgetExceeded(f'Exceeded {max_steps} block evaluations')
            if deadline is not None and self.steps & 0xFF == 0 and time.monotonic() > deadline:
                raise AnalysisBudgetExceeded(f'Exceeded {self.timeout}s')
            #
            b.fallback = True
            node = self._context(b, state)
            for b2, state2 in self._step(node, state):
                state2, new = self._admit(seen, b2, state2)
                self._add_context_edge(node, self._context(b2, state2))
                if new:
                    wl.append((b2, state2))
        #
        log.debug('Explored', len(self.fallback_blocks()), 'blocks in', len(self._contexts), 'contexts and', self.steps, 'steps')

    # Returns the state `b` is explored with and whether it is new.
    # Beyond max_states_per_block, states are widened with what was seen before.
    def _admit(self, seen, b, state):
        states = seen.setdefault(b, set())
        if state in states:
            return state, False
        if len(states) >= self.max_states_per_block:
            state = join_states([s for s in states if len(s) == len(state)] + [state])
            if state in states:
                return state, False
        states.add(state)
        return state, True

    def _set_exit(self, node):
        node[0].exit = True
        self._exit_contexts.add(node)

    def _step(self, node, state):
        # pylint: disable=too-many-return-statements
        b     = node[0]
        stack = Stack(state)
        try:
            for en in b:
                if   en.is_jumpdest(): continue
                elif en.is_push():     stack.push(en.push_value()); continue
                elif en.is_dup():      stack.dup( -en.pops());      continue
                elif en.is_swap():     stack.swap(-en.pops());      continue
                #
                name = en.name()
                if name == 'JUMP':
                    dst = stack.pop()
                    return self._jump(b, dst, stack.state())
                #
                if name == 'JUMPI':
                    dst  = stack.pop()
                    cond = stack.pop()
                    res  = []
                    if cond is None or cond is NONZERO or cond != 0:
                        res.extend(self._jump(b, dst, stack.state()))
                    if cond is None or cond == 0:
                        res.extend(self._fallthrough(node, stack.state()))
                    return res
                #
                if en.is_terminator():
                    if en.is_success():
                        self._set_exit(node)
                    return []
                #
                avs = [stack.pop() for _ in range(en.pops())]
                v   = fold(en, avs)
                for _ in range(en.pushes()):
                    stack.push(v)
        except (StackUnderflow, StackOverflow) as e:
            log.debug('Exceptional halt in', b, type(e).__name__)
            return []
        return self._fallthrough(node, stack.state())

    def _fallthrough(self, node, state):
        b  = node[0]
        b2 = self._block_map.get(b.end)
        if b2 is None:
            # running off the end of the code is a STOP
            self._set_exit(node)
            return []
        b.set_fallthrough(b2)
        return [(b2, state)]

    def _jump(self, b, dst, state):
        if type(dst) is not int:
            if not b.unresolved_jump:
                log.warning('Unresolved jump target in', b)
            b.unresolved_jump = True
            return []
        b2 = self._block_map.get(dst)
        if b2 is None or not b2.is_jump_target():
            log.debug(f'Invalid jump from {b} to {dst:x}')
            return []
        b.add_jump_to(b2)
        return [(b2, state)]

    def _check_fallback(self):
        if not self._exit_contexts:
            raise NoFallbackFunction('No successful exit reachable with empty calldata and nonzero value')

    #
    # JSON IR
    #
    # {"entry": id, "blocks": [{"id": id, "ops": ["PUSH1", ...], "successors": [id, ...], "fallback": true}]}
    #
    # There is no stack to track, every block is a single context.
    #

    def load_ir(self, doc):
        assert not self._blocks
        try:
            blocks = doc['blocks']
            pairs  = []
            for d in blocks:
                b = BasicBlock(d['id'], _ir_instructions(d['id'], d.get('ops', ())))
                if b.ident in self._block_map:
                    raise DecompilationError(f'Duplicate block id {b.ident}')
                b.fallback = bool(d.get('fallback', True))
                self._blocks.append(b)
                self._block_map[b.ident] = b
                pairs.append((b, d))
            if not self._blocks:
                raise DecompilationError('No blocks')
            self._entry = self._block_map.get(doc.get('entry', self._blocks[0].ident))
            if self._entry is None:
                raise DecompilationError(f'Unknown entry block {doc["entry"]}')
            #
            for b, d in pairs:
                for ident in d.get('successors', ()):
                    b2 = self._block_map.get(ident)
                    if b2 is None:
                        raise DecompilationError(f'Unknown successor {ident} of {b}')
                    b.add_jump_to(b2)
                b.exit = bool(d['exit']) if 'exit' in d else _ir_is_exit(b)
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise DecompilationError(f'Malformed IR: {e!r}') from e
        #
        self._end = len(self._blocks)
        if not self._entry.fallback:
            raise NoFallbackFunction(f'Entry block {self._entry} is not part of the fallback function')
        for b in self.fallback_blocks():
            self._contexts[(b, ())] = None
            if b.exit:
                self._exit_contexts.add((b, ()))
        for b, b2 in self.fallback_edges():
            self._context_edges[((b, ()), (b2, ()))] = None
        self._check_fallback()

def _ir_instructions(ident, ops):
    res = []
    for i, op in enumerate(ops):
        name, _, value = op.strip().partition(' ')
        name = name.upper()
        if name not in instruction_map:
            raise DecompilationError(f'Unknown opcode {op!r} in block {ident}')
        pv = int(value, 0) if value.strip() else 0
        res.append(NamedEvmInstruction(i, name, pv if name.startswith('PUSH') else None))
    return res

def _ir_is_exit(b):
    last = b.last()
    if last is None:
        return not b.out_edges()
    if last.is_success():
        return True
    return not b.out_edges() and not last.is_failure() and not last.is_jump()
