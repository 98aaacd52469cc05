from seqshrink import Volume, shrink
import os
from shutil import which
import shlex
import click
import subprocess
import signal
import sys
import time
import traceback


def validate_command(ctx, param, value):
    if value is None:
        return None
    parts = shlex.split(value)
    command = parts[0]

    if os.path.exists(command):
        command = os.path.abspath(command)
    else:
        what = which(command)
        if what is None:
            raise click.BadParameter('%s: command not found' % (command,))
        command = os.path.abspath(what)
    return [command] + parts[1:]


def signal_group(sp, signal):
    gid = os.getpgid(sp.pid)
    assert gid != os.getgid()
    os.killpg(gid, signal)


def interrupt_wait_and_kill(sp):
    if sp.returncode is None:
        # In case the subprocess forked. Python might hang if you don't close
        # all pipes.
        for pipe in [sp.stdout, sp.stderr, sp.stdin]:
            if pipe:
                pipe.close()
        try:
            signal_group(sp, signal.SIGINT)
            for _ in range(10):
                if sp.poll() is not None:
                    return
                time.sleep(0.1)
            signal_group(sp, signal.SIGKILL)
        except ProcessLookupError:
            return


def split_units(data, unit):
    if unit == 'line':
        return data.splitlines(keepends=True)
    return [bytes([b]) for b in data]


STRATEGIES = ['guided', 'delta', 'depth-first', 'breadth-first']


@click.command(
    help="""
seqshrink takes a test command and a file on which that command fails, and
searches for a smaller version of the file on which it fails in the same way
(the same exit status).

The file is treated as a sequence of lines (or of bytes with --unit=byte)
and shrunk with the chosen strategy. The original is kept in the backup
file and the file is overwritten with the smallest failing version found.
""".strip()
)
@click.option('--debug', default=False, is_flag=True, help=(
    'Emit (extremely verbose) debug output while shrinking'
))
@click.option(
    '--quiet', default=False, is_flag=True, help=(
        'Emit no output at all while shrinking'))
@click.option(
    '--backup', default='', help=(
        'Name of the backup file to create. Defaults to adding .bak to the '
        'name of the source file'))
@click.option(
    '--strategy', default='delta', type=click.Choice(STRATEGIES), help=(
        'Search strategy. delta finds examples where no single unit can be '
        'removed; guided is a cheaper greedy search.'))
@click.option(
    '--unit', default='line', type=click.Choice(['line', 'byte']))
@click.option(
    '--max-depth', default=20, type=click.INT, help=(
        'Depth bound for the depth-first and breadth-first strategies'))
@click.option(
    '--max-calls', default=None, type=click.INT, help=(
        'Stop after running the test command this many times'))
@click.option(
    '--timeout', default=1, type=click.FLOAT, help=(
        'Time out subprocesses after this many seconds. If set to <= 0 then '
        'no timeout will be used.'))
@click.option(
    '--shrink-timeout', default=0, type=click.FLOAT, help=(
        'Stop shrinking after this many seconds and keep the best example '
        'so far. If set to <= 0 then shrinking runs until it converges.'))
@click.argument('test', callback=validate_command)
@click.argument('filename', type=click.Path(
    exists=True, resolve_path=True, dir_okay=False, allow_dash=True
))
def shrinker(
    debug, quiet, backup, strategy, unit, max_depth, max_calls, timeout,
    shrink_timeout, test, filename
):
    if debug and quiet:
        raise click.UsageError('Cannot have both debug output and be quiet')

    if debug:
        def dump_trace(signum, frame):
            traceback.print_stack()
        signal.signal(signal.SIGQUIT, dump_trace)

    if not backup:
        backup = filename + os.extsep + 'bak'

    if timeout <= 0:
        timeout = None

    if filename == '-':
        initial = sys.stdin.buffer.read()
    else:
        with open(filename, 'rb') as o:
            initial = o.read()
        with open(backup, 'wb') as o:
            o.write(initial)

    def classify_data(string):
        if filename == '-':
            sp = subprocess.Popen(
                test, stdin=subprocess.PIPE,
                stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL,
                universal_newlines=False,
                preexec_fn=os.setsid,
            )
            try:
                sp.communicate(string, timeout=timeout)
            except subprocess.TimeoutExpired:
                return 'timeout'
            finally:
                interrupt_wait_and_kill(sp)
            return sp.returncode
        with open(filename, 'wb') as o:
            o.write(string)
        sp = subprocess.Popen(
            test, stdout=subprocess.DEVNULL, stdin=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL, universal_newlines=False,
            preexec_fn=os.setsid,
        )
        try:
            sp.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            return 'timeout'
        finally:
            interrupt_wait_and_kill(sp)
        return sp.returncode

    initial_label = classify_data(initial)
    if initial_label == 0:
        if filename != '-':
            with open(filename, 'wb') as o:
                o.write(initial)
        raise click.UsageError(
            'Test command succeeds on %s, so there is nothing to shrink' % (
                filename,))

    if debug:
        volume = Volume.debug
    elif quiet:
        volume = Volume.quiet
    else:
        volume = Volume.normal

    def criterion(units):
        return classify_data(b''.join(units)) == initial_label

    best = initial

    def record(units):
        nonlocal best
        best = b''.join(units)

    try:
        result = shrink(
            split_units(initial, unit), criterion, strategy=strategy,
            max_depth=max_depth, max_calls=max_calls,
            timeout=shrink_timeout if shrink_timeout > 0 else None,
            printer=click.echo, volume=volume, shrink_callback=record,
        )
        best = b''.join(result.minimal)
        if not quiet:
            click.echo('%s: %d bytes -> %d bytes in %d steps (%s)' % (
                strategy, len(initial), len(best), result.shrink_steps,
                'converged' if result.completed
                else 'stopped early: %s' % (result.stop_reason,)))
    finally:
        if filename != '-':
            with open(filename, 'wb') as o:
                o.write(best)
        else:
            sys.stdout.buffer.write(best)


if __name__ == '__main__':
    shrinker()
