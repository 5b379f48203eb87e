import os

from stipend.helpers import Log, run_command_bg

log = Log(__name__)

def _escape(s):
    return s.replace('\\', '\\\\').replace('"', '\\"')

def dot_graph(analysis, path_cost=None):
    table   = path_cost.table                 if path_cost is not None else None
    path    = path_cost.path                  if path_cost is not None else []
    back    = set(path_cost.back_edges)       if path_cost is not None else set()
    on_path = set(path)
    hot     = set(zip(path, path[1:]))
    #
    lines = [
        'digraph fallback {',
        '  node [shape=box fontname="monospace" fontsize=10];',
    ]
    if path_cost is not None:
        lines.append(f'  label="{_escape(table.name)} min cost {path_cost.cost}";')
    #
    for b in analysis.fallback_blocks():
        head = repr(b)
        if table is not None:
            head += f' cost={b.cost(table)}'
            if b.halts(table): head += ' HALTS'
        if b.exit:            head += ' EXIT'
        if b.unresolved_jump: head += ' ?JUMP'
        label = '\\l'.join(_escape(s) for s in [head] + [repr(en) for en in b]) + '\\l'
        attrs = [f'label="{label}"']
        if b in on_path: attrs.append('color=red penwidth=2')
        if b.exit:       attrs.append('peripheries=2')
        lines.append(f'  "{b!r}" [{" ".join(attrs)}];')
    #
    for b, b2 in analysis.fallback_edges():
        attrs = []
        if b2 is b.fallthrough_edge(): attrs.append('style=dashed')
        if (b, b2) in back:            attrs.append('style=dotted constraint=false')
        if (b, b2) in hot:             attrs.append('color=red penwidth=2')
        lines.append(f'  "{b!r}" -> "{b2!r}" [{" ".join(attrs)}];')
    lines.append('}')
    return '\n'.join(lines) + '\n'

def make_graph_file(analysis, path_cost, directory, name):
    os.makedirs(directory, exist_ok=True)
    prefix = os.path.join(directory, name)
    with open(prefix + '.dot', 'w', encoding='utf-8') as f:
        f.write(dot_graph(analysis, path_cost))
    #
    try:
        run_command_bg('dot', '-Tsvg', prefix + '.dot', '-o', prefix + '.svg')
    except OSError as e:
        log.warning('Could not run dot:', e)
    #
    log.info(f'Created graph {prefix}.*')
    return prefix + '.dot'
