import sys
import logging
import argparse

from stipend         import config
from stipend.batch   import EXECUTORS
from stipend.cost    import CyclePolicy
from stipend.helpers import Log

log = Log(__name__)

class Options:

    def __init__(self, inputs, output, as_json, executor, workers, settings):
        self.inputs   = inputs
        self.output   = output
        self.as_json  = as_json
        self.executor = executor
        self.workers  = workers
        self.settings = settings

def _timeout(s):
    t = float(s)
    return None if t <= 0 else t

def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog='stipend', description='Find contracts whose fallback function fits the 2300 gas stipend before EIP-1884 but not after.')
    parser.add_argument('--input',     '-i', type=str,                    nargs='+', required=True,       help='Bytecode files in hex (*.hex, typ *.runbin.hex), JSON IR files (*.json) or directories of them')
    parser.add_argument('--output',    '-o', type=argparse.FileType('w'), default=sys.stdout,             help='File to write the report to, [stdout]')
    parser.add_argument('--json',      '-J',                              action='store_true',            help='Write the report as JSON')
    parser.add_argument('--executor',  '-x', type=str,                    default=config.EXECUTOR,        choices=EXECUTORS, help=f'How to run contracts concurrently, [{config.EXECUTOR}]')
    parser.add_argument('--workers',   '-w', type=int,                    default=config.WORKERS,         help='Number of workers, [cpu count]')
    parser.add_argument('--cycles',    '-c', type=str,                    default=config.CYCLE_POLICY,    choices=[p.value for p in CyclePolicy], help=f'Loop handling: none = drop back edges, once = shortest simple path, reject = fail on loops, [{config.CYCLE_POLICY}]')
    parser.add_argument('--budget',    '-b', type=int,                    default=config.BUDGET,          help=f'Gas available to the fallback function, [{config.BUDGET}]')
    parser.add_argument('--timeout',   '-t', type=_timeout,               default=config.TIMEOUT,         help=f'Seconds of CFG exploration per contract, 0 disables, [{config.TIMEOUT}]')
    parser.add_argument('--graphs',    '-g',                              action='store_true',            help=f'Write a dot graph of each fallback function to {config.GRAPHS_DIR}/')
    parser.add_argument('--log',       '-l', type=argparse.FileType('w'), default=sys.stderr,             help='File to write log to, [stderr]')
    parser.add_argument('--log-level', '-L', type=str,                    default='info',                 help='Minimum log level, see https://docs.python.org/3/library/logging.html#levels, [Info]')
    args = parser.parse_args(argv)
    try:
        #
        fl = args.log
        ll = args.log_level.upper()
        try:
            ll = int(ll)
        except ValueError:
            pass
        logging.basicConfig(format='%(levelname)-7s %(name)-40s %(filename)20s:%(lineno)-4d | %(message)s', level=ll, stream=fl)
        #
        settings = config.Settings(
            budget       = args.budget,
            cycle_policy = args.cycles,
            timeout      = args.timeout,
            graphs       = args.graphs,
        )
        log.info('Output is', args.output.name)
        log.info('Cycle policy is', settings.cycle_policy)
        log.info('Graphs are', 'enabled' if settings.graphs else 'disabled')
        log.debug(settings)
        #
        return Options(args.input, args.output, args.json, args.executor, args.workers, settings)
        #
    except Exception as e: # pylint: disable=broad-except
        log.exception(e)
        print('\n' + parser.format_help(), file=sys.stderr)
        sys.exit(1)
