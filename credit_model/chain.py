"""
Atomic units of execution.

Every contract and token registers itself with a ``Chain`` and keeps all of
its mutable state in a single ``storage`` object. ``Chain.atomic`` snapshots
every storage on entry and puts the snapshots back if the block raises, so a
failed operation leaves no observable effect. ``Chain.execute_batch`` is the
outer atomic unit: a caller-defined sequence of operations that runs back to
back and commits or reverts as a whole.
"""
import logging
import typing
from contextlib import contextmanager
from copy import deepcopy
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class Event:
    name: str
    args: typing.Dict[str, typing.Any] = field(default_factory=dict)


class Chain:

    def __init__(self):
        self._contracts = []
        self.events: typing.List[Event] = []
        self._depth = 0

    def register(self, contract):
        self._contracts.append(contract)
        return contract

    @property
    def in_atomic_unit(self) -> bool:
        return self._depth > 0

    def emit(self, name: str, **args):
        self.events.append(Event(name, args))

    def events_named(self, name: str) -> typing.List[Event]:
        return [e for e in self.events if e.name == name]

    def _snapshot(self):
        return [(contract, deepcopy(contract.storage)) for contract in self._contracts], len(self.events)

    def _restore(self, snapshot):
        storages, event_count = snapshot
        for contract, storage in storages:
            contract.storage = storage
        del self.events[event_count:]

    @contextmanager
    def atomic(self, name: str = 'tx'):
        snapshot = self._snapshot()
        self._depth += 1
        try:
            yield self
        except BaseException as e:
            self._restore(snapshot)
            logger.debug('%s reverted: %r', name, e)
            raise
        finally:
            self._depth -= 1

    def execute_batch(self, steps: typing.Iterable[typing.Callable[[], typing.Any]], name: str = 'batch') -> typing.List[typing.Any]:
        """
        Runs ``steps`` in order inside one atomic unit and returns their
        results. Nothing can be interleaved between two steps; if any step
        raises, all of them are reverted and the error propagates.
        """
        with self.atomic(name):
            results = [step() for step in steps]
        logger.info('%s committed %d steps', name, len(results))
        return results
