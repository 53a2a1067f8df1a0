"""
Amplifier pipelines - Intcode programs chained over channels

run_chain: amplifiers run one after another, each fed [phase, signal]
pipeline:  programs run concurrently on threads, linked in a line
run_loop:  amplifiers run concurrently on threads with a feedback loop
"""

import itertools
import threading
from typing import Callable, List, Optional, Sequence, Tuple

from channel import Channel
from intcode import Program
from intcode_io import Input, Output


def run_chain(image: Sequence[int], phases: Sequence[int], signal: int = 0) -> int:
    """Pass a signal through one amplifier per phase, in order"""
    for phase in phases:
        inp = Channel("in")
        out = Channel("out")
        inp.send(phase)
        inp.send(signal)
        inp.close()
        Program(image).run(0, input=Input.channel(inp), output=Output.channel(out))
        out.close()
        signal = out.recv()
    return signal


class _Failures:
    """Amplifier errors in the order they were raised"""

    def __init__(self):
        self._lock = threading.Lock()
        self.errors: List[BaseException] = []

    def add(self, error: BaseException):
        with self._lock:
            self.errors.append(error)


class _Amplifier(threading.Thread):
    """One VM on its own thread; closes its output channel when done"""

    def __init__(self, name: str, program: Program, inp: Channel, out: Channel,
                 failures: _Failures):
        super().__init__(name=name, daemon=True)
        self.program = program
        self.inp = inp
        self.out = out
        self.failures = failures
        self.error: Optional[BaseException] = None

    def run(self):
        try:
            self.program.run(0, input=Input.channel(self.inp), output=Output.channel(self.out))
        except Exception as e:
            self.error = e
            # Before the close: downstream failures must come after this one
            self.failures.add(e)
        finally:
            # Downstream reader must not block forever on a dead writer
            self.out.close()


def _join(amps: Sequence[_Amplifier], failures: _Failures):
    for amp in amps:
        amp.start()
    for amp in amps:
        amp.join()
    if failures.errors:
        raise failures.errors[0]


def pipeline(programs: Sequence[Program], values: Sequence[int]) -> List[int]:
    """
    Run programs concurrently, each one's output feeding the next one's input.
    values are sent to the first program; returns what the last one wrote.
    """
    channels = [Channel(f"pipe{i}") for i in range(len(programs) + 1)]
    for v in values:
        channels[0].send(v)
    channels[0].close()

    failures = _Failures()
    _join([_Amplifier(f"stage{i}", prog, channels[i], channels[i + 1], failures)
           for i, prog in enumerate(programs)], failures)
    return channels[-1].drain()


def run_loop(image: Sequence[int], phases: Sequence[int], signal: int = 0) -> int:
    """
    Run one amplifier per phase concurrently, the last feeding the first.
    Returns the last signal sent back to the first amplifier.
    """
    if not phases:
        raise ValueError("run_loop needs at least one phase")

    channels = [Channel(f"amp{i}") for i in range(len(phases))]
    for ch, phase in zip(channels, phases):
        ch.send(phase)
    channels[0].send(signal)

    failures = _Failures()
    amps = []
    for i in range(len(phases)):
        out = channels[(i + 1) % len(phases)]
        amps.append(_Amplifier(f"amp{i}", Program(image), channels[i], out, failures))

    _join(amps, failures)

    remaining = channels[0].drain()
    if not remaining:
        raise ValueError("feedback loop produced no signal")
    return remaining[-1]


def best_phases(image: Sequence[int], phases: Sequence[int],
                runner: Callable[[Sequence[int], Sequence[int]], int] = run_chain
                ) -> Tuple[int, List[int]]:
    """Try every ordering of phases; return (highest signal, ordering)"""
    best: Optional[Tuple[int, List[int]]] = None
    for ordering in itertools.permutations(phases):
        signal = runner(image, ordering)
        if best is None or signal > best[0]:
            best = (signal, list(ordering))
    if best is None:
        raise ValueError("no phases given")
    return best
