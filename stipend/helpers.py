import logging
import subprocess

from Crypto.Hash import keccak

FF32  = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF
ONE31 = 0x8000000000000000000000000000000000000000000000000000000000000000
def u256(x): return x & FF32
def s256(x): return (x ^ ONE31) - ONE31

def _merge(args):
    return ' '.join(str(a) for a in args)

class _Log(logging.Logger):
    def debug(    self, *args, **kwargs): super().debug(    _merge(args), **kwargs)
    def info(     self, *args, **kwargs): super().info(     _merge(args), **kwargs)
    def warning(  self, *args, **kwargs): super().warning(  _merge(args), **kwargs)
    def error(    self, *args, **kwargs): super().error(    _merge(args), **kwargs)
    def exception(self, *args, **kwargs): super().exception(_merge(args), **kwargs)
    def findCaller(self, stack_info=False, stacklevel=1):
        return super().findCaller(stack_info, stacklevel+2)

logging.setLoggerClass(_Log)

def Log(name):
    return logging.getLogger(name)

log = Log(__name__)

def run_command_bg(*args, **kwargs):
    assert all(type(a) is str for a in args), args
    log.info("Running background '" + "' '".join(args) + "'", stacklevel=2)
    subprocess.Popen(args, **kwargs) # pylint: disable=consider-using-with

def code_hash(runbin):
    return keccak.new(digest_bits=256).update(runbin).hexdigest()


class AnalysisError(Exception):
    pass

class DecompilationError(AnalysisError):
    pass

class NoFallbackFunction(AnalysisError):
    pass

class CycleInFallbackGraph(AnalysisError):

    def __init__(self, back_edges):
        self.back_edges = back_edges
        super().__init__('back edges ' + ', '.join(f'{a}->{b}' for a, b in back_edges))

class AnalysisBudgetExceeded(AnalysisError):
    pass


# Topologically sort a directed graph using DFS, starting from node 0.
# Edges that close a cycle (their target is still on the DFS stack) are
# returned separately, so that the rest of the graph is a DAG.
# The guarantee is that:
#  res[j+1] is not a successor of res[j]
#  if the edges (i1, i2) in remove are deleted from the graph
# Notice how `res` is given in reverse
def topo_sort_dfs_rev(count, getSuccessors):
    res    = []
    remove = []
    opened = [False] * count
    closed = [False] * count
    todo   = list(range(count - 1, -1, -1))
    while todo:
        i = todo[-1]
        #
        if opened[i]:
            todo.pop()
            if not closed[i]: res.append(i)
            closed[i] = True
            continue
        #
        opened[i] = True
        #
        for i2 in getSuccessors(i):
            if closed[i2]: continue
            if opened[i2]: remove.append((i, i2))
            else:            todo.append(i2)
        #
    return res, remove

def topo_sort_dfs(count, getSuccessors):
    res, remove = topo_sort_dfs_rev(count, getSuccessors)
    res.reverse()
    return res, remove
