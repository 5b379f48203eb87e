import sys

from .cli     import parse_args
from .batch   import load_sources, run_batch, render_text, render_json
from .helpers import Log

log = Log(__name__)

def main(argv=None):
    o = parse_args(argv)
    try:
        sources = list(load_sources(o.inputs))
    except OSError as e:
        log.error('Could not read input:', e)
        return 1
    report = run_batch(sources, o.settings, o.executor, o.workers)
    render = render_json if o.as_json else render_text
    o.output.write(render(report))
    o.output.flush()
    log.info(report)
    return 0

if __name__ == '__main__':
    sys.exit(main())
