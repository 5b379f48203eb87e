import enum
import math

from stipend.gas.CostTable import STIPEND

class Status(enum.Enum):
    FLAGGED                   = 'flagged'
    FALLBACK_WILL_FAIL_ANYWAY = 'fallback-will-fail-anyway'
    UNAFFECTED                = 'unaffected'


class Verdict:

    def __init__(self, contract_id, status, pre, post, deficit=None, delta=None):
        self.contract_id = contract_id
        self.status      = status
        self.pre         = pre
        self.post        = post
        self.deficit     = deficit
        self.delta       = delta

    def __repr__(self):
        s = f'Verdict({self.contract_id}, {self.status.name}, pre={self.pre}, post={self.post}'
        if self.flagged():
            s += f', deficit={self.deficit}, delta={self.delta}'
        return s + ')'

    def __eq__(self, other):
        return isinstance(other, Verdict) and self.as_dict() == other.as_dict()

    def flagged(self):
        return self.status is Status.FLAGGED

    def as_dict(self):
        return {
            'contract_id': self.contract_id,
            'status':      self.status.value,
            'pre':         None if self.pre  == math.inf else self.pre,
            'post':        None if self.post == math.inf else self.post,
            'deficit':     self.deficit,
            'delta':       self.delta,
        }

# m, n: minimum fallback cost before and after the repricing
def compare(contract_id, m, n, budget=STIPEND):
    if m > budget:
        return Verdict(contract_id, Status.FALLBACK_WILL_FAIL_ANYWAY, m, n)
    if n > budget:
        delta = n - m if n != math.inf else None
        dfct  = n - budget if n != math.inf else None
        return Verdict(contract_id, Status.FLAGGED, m, n, dfct, delta)
    return Verdict(contract_id, Status.UNAFFECTED, m, n)
