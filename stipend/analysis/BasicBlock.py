from stipend.helpers import Log

log = Log(__name__)

class BasicBlock:

    def __init__(self, ident, ens, end=None):
        self.ident             = ident
        self.ens               = list(ens)
        self.end               = end
        self.fallback          = False
        self.exit              = False
        self.unresolved_jump   = False
        self._in_edges         = []
        self._fallthrough_edge = None
        self._jump_edges       = []

    def __repr__(self):
        if type(self.ident) is int: return f'~{self.ident:x}'
        else:                       return f'~{self.ident}'

    def __iter__(self):
        return iter(self.ens)

    def __len__(self):
        return len(self.ens)

    def last(self):
        return self.ens[-1] if self.ens else None

    def in_edges(self):
        return iter(self._in_edges)

    def fallthrough_edge(self):
        return self._fallthrough_edge

    def jump_edges(self):
        return iter(self._jump_edges)

    def out_edges(self):
        res = []
        b2  = self._fallthrough_edge
        if  b2 is not None:         res.append(b2)
        for b2 in self._jump_edges: res.append(b2)
        return res

    def _accept_edge(self, src):
        if src not in self._in_edges:
            self._in_edges.append(src)
            log.debug('New edge', src, '->', self)

    def add_jump_to(self, b):
        if b in self._jump_edges: return None
        self._jump_edges.append(b)
        b._accept_edge(self) # pylint: disable=protected-access
        return b

    def set_fallthrough(self, b):
        if self._fallthrough_edge is b: return None
        assert self._fallthrough_edge is None, (self, self._fallthrough_edge, b)
        self._fallthrough_edge = b
        b._accept_edge(self) # pylint: disable=protected-access
        return b

    def is_jump_target(self):
        return bool(self.ens) and self.ens[0].is_jumpdest()

    def cost(self, table):
        return sum(table.cost(en.name()) for en in self.ens)

    def halts(self, table):
        return any(not table.is_valid(en.name()) for en in self.ens)
