import os
import json
import time

from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed

from stipend                     import config
from stipend.analysis            import Analysis
from stipend.assembly            import disassemble_hex, read_hex
from stipend.cost                import PathCostAnalyzer, compare
from stipend.gas                 import PRE_EIP1884, POST_EIP1884
from stipend.graph               import make_graph_file
from stipend.helpers             import Log, code_hash, AnalysisError, DecompilationError, NoFallbackFunction

from .report import Report

log = Log(__name__)

EXECUTORS = ('process', 'thread', 'serial')

SOURCE_SUFFIXES = ('.hex', '.json')

class ContractSource:

    def __init__(self, contract_id, kind, text, path=None):
        assert kind in ('hex', 'ir'), kind
        self.contract_id = contract_id
        self.kind        = kind
        self.text        = text
        self.path        = path

    def __repr__(self):
        return f'ContractSource({self.contract_id}, {self.kind})'


class ContractResult:

    def __init__(self, contract_id, code_hash=None, verdict=None, error_type=None, error=None, elapsed=0.0):
        self.contract_id = contract_id
        self.code_hash   = code_hash
        self.verdict     = verdict
        self.error_type  = error_type
        self.error       = error
        self.elapsed     = elapsed

    def __repr__(self):
        if self.ok(): return f'ContractResult({self.contract_id}, {self.verdict})'
        else:         return f'ContractResult({self.contract_id}, {self.error_type}: {self.error})'

    def ok(self):
        return self.error_type is None

# h_001dd42c...d282.runbin.hex -> h_001dd42c...d282
def source_id(path):
    return os.path.basename(path).partition('.')[0]

def load_source(path):
    with open(path, encoding='utf-8') as f:
        text = f.read()
    kind = 'ir' if path.endswith('.json') else 'hex'
    return ContractSource(source_id(path), kind, text, path)

def load_sources(paths):
    for p in paths:
        if os.path.isdir(p):
            for name in sorted(os.listdir(p)):
                full = os.path.join(p, name)
                if os.path.isfile(full) and name.endswith(SOURCE_SUFFIXES):
                    yield load_source(full)
        else:
            yield load_source(p)

def build_analysis(source, settings):
    a = Analysis(settings.max_states_per_block, timeout=settings.timeout)
    if source.kind == 'ir':
        try:
            doc = json.loads(source.text)
        except ValueError as e:
            raise DecompilationError(f'Not a JSON document: {e}') from e
        a.load_ir(doc)
    else:
        a.analyze(disassemble_hex(source.text))
    return a

def analyze_source(source, settings):
    t0   = time.monotonic()
    cid  = source.contract_id
    hsh  = None
    try:
        if source.kind == 'hex':
            hsh = code_hash(read_hex(source.text))
        a    = build_analysis(source, settings)
        pca  = PathCostAnalyzer(settings.cycle_policy)
        pre  = pca.min_cost(a, PRE_EIP1884)
        post = pca.min_cost(a, POST_EIP1884)
    except NoFallbackFunction as e:
        log.info('Skipping', cid, '-', e)
        return ContractResult(cid, hsh, error_type=type(e).__name__, error=str(e), elapsed=time.monotonic() - t0)
    except AnalysisError as e:
        log.warning('Could not analyze', cid, '-', type(e).__name__, e)
        return ContractResult(cid, hsh, error_type=type(e).__name__, error=str(e), elapsed=time.monotonic() - t0)
    #
    for b in a.unresolved_jumps():
        log.warning(cid, 'has an unresolved jump in fallback block', b, ', its cost is a lower bound of reachable code only')
    verdict = compare(cid, pre.cost, post.cost, settings.budget)
    log.info(cid, verdict)
    if settings.graphs:
        make_graph_file(a, post, settings.graphs_dir, cid)
    return ContractResult(cid, hsh, verdict=verdict, elapsed=time.monotonic() - t0)

def run_batch(sources, settings=None, executor=config.EXECUTOR, workers=config.WORKERS):
    if settings is None:
        settings = config.Settings()
    if executor not in EXECUTORS:
        raise ValueError(f'Unknown executor {executor!r}, expected one of {", ".join(EXECUTORS)}')
    sources = list(sources)
    log.info('Analyzing', len(sources), 'contracts with', executor, 'executor')
    #
    results = []
    if executor == 'serial' or len(sources) <= 1:
        for s in sources:
            results.append(analyze_source(s, settings))
    else:
        pool_class = ProcessPoolExecutor if executor == 'process' else ThreadPoolExecutor
        with pool_class(max_workers=workers) as pool:
            futures = [pool.submit(analyze_source, s, settings) for s in sources]
            for f in as_completed(futures):
                results.append(f.result())
    #
    return Report(results, settings.budget)
