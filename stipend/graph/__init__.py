from .graph import dot_graph, make_graph_file
