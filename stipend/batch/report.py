import json
import math

from collections import Counter

from stipend.cost.compare import Status

class Report:

    def __init__(self, results, budget):
        self.budget  = budget
        self.results = sorted(results, key=lambda r: r.contract_id)
        self.flagged = sorted(
            (r.verdict for r in self.results if r.ok() and r.verdict.flagged()),
            key=lambda v: (-(math.inf if v.deficit is None else v.deficit), v.contract_id),
        )
        self.failed  = [r for r in self.results if not r.ok()]
        self.counts  = Counter(r.verdict.status for r in self.results if r.ok())

    def __repr__(self):
        return f'Report({len(self.results)} contracts, {len(self.flagged)} flagged, {len(self.failed)} failed)'

    def summary(self):
        return {
            'budget':                    self.budget,
            'contracts':                 len(self.results),
            'flagged':                   self.counts[Status.FLAGGED],
            'unaffected':                self.counts[Status.UNAFFECTED],
            'fallback_will_fail_anyway': self.counts[Status.FALLBACK_WILL_FAIL_ANYWAY],
            'failed':                    len(self.failed),
        }

    def as_dict(self):
        hashes = {r.contract_id: r.code_hash for r in self.results}
        return {
            'flagged': [
                dict(v.as_dict(), code_hash=hashes.get(v.contract_id))
                for v in self.flagged
            ],
            'failed': [
                {'contract_id': r.contract_id, 'error': r.error_type, 'message': r.error}
                for r in self.failed
            ],
            'summary': self.summary(),
        }

def _fmt(x):
    if x is None or x == math.inf: return '-'
    return str(x)

def render_text(report):
    lines = []
    lines.append(f'Fallback functions within the {report.budget} gas stipend before EIP-1884 but not after: {len(report.flagged)}')
    if report.flagged:
        w = max(11, max(len(v.contract_id) for v in report.flagged))
        lines.append(f'  {"contract_id":{w}} {"pre":>6} {"post":>6} {"deficit":>8} {"delta":>6}')
        for v in report.flagged:
            lines.append(f'  {v.contract_id:{w}} {_fmt(v.pre):>6} {_fmt(v.post):>6} {_fmt(v.deficit):>8} {_fmt(v.delta):>6}')
    if report.failed:
        lines.append(f'Could not analyze: {len(report.failed)}')
        for r in report.failed:
            lines.append(f'  {r.contract_id} {r.error_type}: {r.error}')
    lines.append('Summary: ' + ', '.join(f'{k}={v}' for k, v in report.summary().items()))
    return '\n'.join(lines) + '\n'

def render_json(report):
    return json.dumps(report.as_dict(), indent=2) + '\n'
