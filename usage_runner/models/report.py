"""Resource usage report for a single child run."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from usage_runner.engine.memory import cpu_time_divisor, find_mem_tick_size

KB_PER_MB = 1024


@dataclass(frozen=True)
class UsageReport:
    """CPU, memory and I/O figures reported for the terminated children."""

    user_cpu_seconds: int
    system_cpu_seconds: int
    wall_seconds: float
    peak_memory_kb: int
    code_size_kb: int
    data_size_kb: int
    stack_size_kb: int
    fs_reads: int
    fs_writes: int

    @property
    def total_cpu_seconds(self) -> int:
        return self.user_cpu_seconds + self.system_cpu_seconds

    @property
    def peak_memory_mb(self) -> int:
        return self.peak_memory_kb // KB_PER_MB

    @property
    def peak_memory_gb(self) -> int:
        return self.peak_memory_kb // KB_PER_MB // KB_PER_MB

    @property
    def code_size_mb(self) -> int:
        return self.code_size_kb // KB_PER_MB

    @property
    def data_size_mb(self) -> int:
        return self.data_size_kb // KB_PER_MB

    @property
    def stack_size_mb(self) -> int:
        return self.stack_size_kb // KB_PER_MB

    @classmethod
    def from_rusage(
        cls,
        usage: Any,
        wall_seconds: float,
        ticks_per_second: int | None = None,
    ) -> "UsageReport":
        """
        Build a report from a ``resource.struct_rusage``.

        CPU times are truncated to whole seconds before any arithmetic, so the
        derived sizes use the same values that get printed.
        """
        user_seconds = int(usage.ru_utime)
        system_seconds = int(usage.ru_stime)
        total_time = cpu_time_divisor(user_seconds, system_seconds)
        return cls(
            user_cpu_seconds=user_seconds,
            system_cpu_seconds=system_seconds,
            wall_seconds=float(wall_seconds),
            peak_memory_kb=int(usage.ru_maxrss),
            code_size_kb=find_mem_tick_size(total_time, usage.ru_ixrss, ticks_per_second),
            data_size_kb=find_mem_tick_size(total_time, usage.ru_idrss, ticks_per_second),
            stack_size_kb=find_mem_tick_size(total_time, usage.ru_isrss, ticks_per_second),
            fs_reads=int(usage.ru_inblock),
            fs_writes=int(usage.ru_oublock),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
