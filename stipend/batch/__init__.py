from .runner import EXECUTORS, ContractSource, ContractResult, analyze_source, build_analysis, load_source, load_sources, run_batch
from .report import Report, render_text, render_json
