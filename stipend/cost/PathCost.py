import enum
import math

import networkx as nx

from stipend.helpers import Log, CycleInFallbackGraph, topo_sort_dfs

log = Log(__name__)

class CyclePolicy(enum.Enum):
    # back edges are dropped, loop bodies are traversed zero extra times
    UNROLL_NONE = 'none'
    # back edges are dropped, entering a loop header adds its cheapest single iteration
    UNROLL_ONCE = 'once'
    # any cycle raises CycleInFallbackGraph
    REJECT      = 'reject'


class PathCost:

    def __init__(self, table, cost, path, back_edges):
        self.table      = table
        self.cost       = cost
        self.path       = path
        self.back_edges = back_edges

    def __repr__(self):
        return f'PathCost({self.table.name}, {self.cost}, {self.path})'

    def reachable(self):
        return self.cost != math.inf


def _dominates(idom, d, n):
    while n != d:
        p = idom.get(n, n)
        if p == n:
            return False
        n = p
    return True

def _blocks(edges):
    return [(u[0], v[0]) for u, v in edges]


# Nodes of the graph are the (block, return addresses) contexts of the
# analysis, paths and back edges are reported as blocks.
class PathCostAnalyzer:

    def __init__(self, cycle_policy=CyclePolicy.UNROLL_NONE):
        self.cycle_policy = CyclePolicy(cycle_policy)

    def graph(self, analysis, table):
        g = nx.DiGraph()
        for node in analysis.contexts():
            b = node[0]
            if b.halts(table): continue
            g.add_node(node, cost=b.cost(table))
        for node, node2 in analysis.context_edges():
            if node in g and node2 in g:
                g.add_edge(node, node2)
        entry = analysis.get_entry_context()
        if entry in g:
            keep = {entry} | nx.descendants(g, entry)
            g.remove_nodes_from([n for n in g if n not in keep])
        return g

    # An edge closes a loop when its target dominates its source. Edges into
    # a cycle with several entries are not back edges and stay in the graph.
    def back_edges(self, g, entry):
        idom = nx.immediate_dominators(g, entry)
        return [(u, v) for u, v in g.edges() if _dominates(idom, v, u)]

    def retreating_edges(self, g, entry):
        nodes = [entry] + [n for n in g if n != entry]
        index = {n: i for i, n in enumerate(nodes)}
        _, remove = topo_sort_dfs(len(nodes), lambda i: [index[n2] for n2 in g.successors(nodes[i])])
        return [(nodes[i], nodes[i2]) for i, i2 in remove]

    # Cheapest header -> ... -> latch -> header round trip for each loop header
    def loop_costs(self, g, back, costs):
        res = {}
        for latch, header in back:
            try:
                d = nx.shortest_path_length(g, header, latch, weight=lambda u, v, _: costs[v])
            except nx.NetworkXNoPath:
                continue
            c = d + costs[header]
            res[header] = min(res.get(header, c), c)
        return res

    def min_cost(self, analysis, table):
        entry = analysis.get_entry_context()
        g     = self.graph(analysis, table)
        if entry not in g:
            log.debug('Entry block', entry[0], 'halts under', table.name)
            return PathCost(table, math.inf, [], [])
        #
        back = self.back_edges(g, entry)
        if self.cycle_policy is CyclePolicy.REJECT:
            if back:
                raise CycleInFallbackGraph(_blocks(back))
            if not nx.is_directed_acyclic_graph(g):
                raise CycleInFallbackGraph(_blocks(self.retreating_edges(g, entry)))
        elif back:
            log.info('Ignoring', len(back), 'back edges:', ', '.join(f'{a}->{b}' for a, b in _blocks(back)))
            g.remove_edges_from(back)
        #
        costs = nx.get_node_attributes(g, 'cost')
        if self.cycle_policy is CyclePolicy.UNROLL_ONCE:
            for header, c in self.loop_costs(g, back, dict(costs)).items():
                log.debug('One iteration of the loop at', header[0], 'costs', c)
                costs[header] += c
        #
        dist, paths = nx.single_source_dijkstra(g, entry, weight=lambda u, v, d: costs[v])
        exits       = [n for n in dist if analysis.is_exit_context(n)]
        if not exits:
            log.debug('No exit reachable under', table.name)
            return PathCost(table, math.inf, [], _blocks(back))
        #
        order = {b: i for i, b in enumerate(analysis)}
        best  = min(exits, key=lambda n: (dist[n], order[n[0]], n[1]))
        return PathCost(table, costs[entry] + dist[best], [n[0] for n in paths[best]], _blocks(back))
