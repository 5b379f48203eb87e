STACK_LIMIT = 1024

class StackUnderflow(Exception):
    pass

class StackOverflow(Exception):
    pass

# A stack of abstract words: ints are known values, anything else
# (None, NONZERO) is a partially or totally unknown one.
class Stack:

    def __init__(self, words=()):
        self._raw = list(words)

    def __repr__(self):
        return 'Stack[' + ', '.join(f'#{w:x}' if type(w) is int else repr(w) for w in self._raw) + ']'

    def __len__(self):
        return len(self._raw)

    def state(self):
        return tuple(self._raw)

    def get(self, diff):
        assert diff < 0
        idx = len(self._raw) + diff
        if idx < 0:
            raise StackUnderflow(diff)
        return self._raw[idx]

    def push(self, w):
        if len(self._raw) >= STACK_LIMIT:
            raise StackOverflow(len(self._raw))
        self._raw.append(w)

    def pop(self):
        if not self._raw:
            raise StackUnderflow(-1)
        return self._raw.pop()

    def dup(self, diff):
        self.push(self.get(diff))

    def swap(self, diff):
        assert diff < -1
        idx = len(self._raw) + diff
        if idx < 0:
            raise StackUnderflow(diff)
        r = self._raw
        r[idx], r[-1] = r[-1], r[idx]


def _same(a, b):
    return a is b or (type(a) is int and type(b) is int and a == b)

# Pointwise join of entry states of equal depth: words that differ become unknown
def join_states(states):
    assert states and all(len(s) == len(states[0]) for s in states), states
    return tuple(
        ws[0] if all(_same(w, ws[0]) for w in ws) else None
        for ws in zip(*states)
    )
