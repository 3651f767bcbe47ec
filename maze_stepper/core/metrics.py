from dataclasses import dataclass, asdict
from typing import Dict


@dataclass(frozen=True)
class MetricsSnapshot:
    steps: int = 0
    main_writes: int = 0
    aux_writes: int = 0
    pushes: int = 0
    pops: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


class MetricsCounter:
    """
    Operation counters shared by the active generator or solver.

    main_writes counts grid cell mutations; aux_writes counts stack/queue
    operations (every push and every pop).
    """
    __slots__ = ('steps', 'main_writes', 'aux_writes', 'pushes', 'pops')

    def __init__(self):
        self.reset()

    def reset(self):
        self.steps = 0
        self.main_writes = 0
        self.aux_writes = 0
        self.pushes = 0
        self.pops = 0

    def record_step(self):
        self.steps += 1

    def record_main_write(self, count: int = 1):
        self.main_writes += count

    def record_push(self):
        self.pushes += 1
        self.aux_writes += 1

    def record_pop(self):
        self.pops += 1
        self.aux_writes += 1

    def snapshot(self) -> MetricsSnapshot:
        return MetricsSnapshot(
            steps=self.steps,
            main_writes=self.main_writes,
            aux_writes=self.aux_writes,
            pushes=self.pushes,
            pops=self.pops,
        )
