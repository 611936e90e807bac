"""
sweep.py

Candidate expansion and bounded-parallel probing of a ScanSpec.
"""

from __future__ import annotations

from collections import deque
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from itertools import islice
from typing import Callable, Deque, Dict, Iterator, List, Optional, Tuple

from tqdm import tqdm

from printer_discovery.models import Endpoint, ProbeResult, ScanMode, ScanSpec
from printer_discovery.scanner.prober import probe
from printer_discovery.utils import app_logger, config


ProbeFn = Callable[[Endpoint, int], ProbeResult]


def expand_candidates(spec: ScanSpec) -> List[Endpoint]:
    """
    Expand a ScanSpec into its endpoints, in the order they are probed.

    Explicit lists keep the caller's order; range sweeps ascend by last octet.
    """
    if spec.mode is ScanMode.RANGE_SWEEP:
        return list(spec.sweep.endpoints())
    return list(spec.candidates)


@dataclass(frozen=True)
class SweepOutcome:
    """First reachable result of a sweep, plus every result observed before stopping."""
    found: Optional[ProbeResult]
    results: Tuple[ProbeResult, ...]


class Scanner:
    """
    Runs probes over a ScanSpec with at most ``concurrency`` in flight.
    """

    def __init__(
        self,
        concurrency: Optional[int] = None,
        probe_fn: Optional[ProbeFn] = None,
        show_progress: Optional[bool] = None,
    ) -> None:
        if concurrency is None:
            concurrency = config.get("scan.concurrency", 16)
        if isinstance(concurrency, bool) or not isinstance(concurrency, int) or concurrency < 1:
            raise ValueError(f"concurrency must be an integer >= 1, got {concurrency!r}")

        self.concurrency = concurrency
        self.probe_fn = probe_fn or probe
        self.show_progress = (
            config.get("scan.show_progress", False) if show_progress is None else show_progress
        )
        self.logger = app_logger

    @staticmethod
    def _check_timeout(timeout_ms: int) -> None:
        if isinstance(timeout_ms, bool) or not isinstance(timeout_ms, int) or timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be a positive integer, got {timeout_ms!r}")

    def scan(self, spec: ScanSpec, timeout_ms: int, ordered: bool = True) -> Iterator[ProbeResult]:
        """
        Probe every candidate of ``spec`` and yield one result per candidate.

        Args:
            spec: Target space to probe
            timeout_ms: Per-probe time bound
            ordered: Yield in candidate order; otherwise in completion order

        Returns:
            A lazy, single-use iterator of ProbeResult
        """
        self._check_timeout(timeout_ms)
        candidates = expand_candidates(spec)

        self.logger.info(
            f"Scanning {len(candidates)} candidate(s) [{spec}] "
            f"timeout={timeout_ms}ms concurrency={self.concurrency}"
        )

        if self.concurrency == 1 or len(candidates) <= 1:
            results = self._iter_sequential(candidates, timeout_ms)
        elif ordered:
            results = self._iter_ordered(candidates, timeout_ms)
        else:
            results = self._iter_completed(candidates, timeout_ms)

        return self._with_progress(results, len(candidates))

    def _with_progress(self, results: Iterator[ProbeResult], total: int) -> Iterator[ProbeResult]:
        reachable = 0
        with tqdm(
            total=total,
            desc="Probing",
            unit="host",
            disable=not self.show_progress,
            leave=False,
        ) as pbar:
            try:
                for result in results:
                    if result.reachable:
                        reachable += 1
                        pbar.set_postfix(reachable=reachable)
                    pbar.update(1)
                    yield result
            finally:
                results.close()

    def _iter_sequential(self, candidates: List[Endpoint], timeout_ms: int) -> Iterator[ProbeResult]:
        for endpoint in candidates:
            yield self.probe_fn(endpoint, timeout_ms)

    def _iter_ordered(self, candidates: List[Endpoint], timeout_ms: int) -> Iterator[ProbeResult]:
        # Queue a little past the worker count so a slow head does not idle the pool.
        max_pending = self.concurrency * 2
        remaining = iter(candidates)
        window: Deque[Future] = deque()
        pool = ThreadPoolExecutor(max_workers=self.concurrency, thread_name_prefix="pd-probe")

        try:
            for endpoint in islice(remaining, max_pending):
                window.append(pool.submit(self.probe_fn, endpoint, timeout_ms))

            while window:
                result = window.popleft().result()
                endpoint = next(remaining, None)
                if endpoint is not None:
                    window.append(pool.submit(self.probe_fn, endpoint, timeout_ms))
                yield result
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

    def _iter_completed(self, candidates: List[Endpoint], timeout_ms: int) -> Iterator[ProbeResult]:
        max_pending = self.concurrency * 2
        remaining = iter(candidates)
        pending = set()
        pool = ThreadPoolExecutor(max_workers=self.concurrency, thread_name_prefix="pd-probe")

        def submit_next() -> bool:
            endpoint = next(remaining, None)
            if endpoint is None:
                return False
            pending.add(pool.submit(self.probe_fn, endpoint, timeout_ms))
            return True

        try:
            while len(pending) < max_pending and submit_next():
                pass

            while pending:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for fut in done:
                    while len(pending) < max_pending and submit_next():
                        pass
                    yield fut.result()
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

    def first_reachable(self, spec: ScanSpec, timeout_ms: int) -> SweepOutcome:
        """
        Probe ``spec`` until one candidate is reachable.

        No new probes are issued after the first reachable result is seen.
        Probes already in flight are left to finish on their own and their
        results are dropped; this call does not wait for them.
        """
        self._check_timeout(timeout_ms)
        candidates = expand_candidates(spec)
        observed: List[ProbeResult] = []

        if self.concurrency == 1 or len(candidates) <= 1:
            for endpoint in candidates:
                result = self.probe_fn(endpoint, timeout_ms)
                observed.append(result)
                if result.reachable:
                    self.logger.info(f"Reachable endpoint found: {endpoint}")
                    return SweepOutcome(found=result, results=tuple(observed))
            return SweepOutcome(found=None, results=tuple(observed))

        remaining = enumerate(candidates)
        index_of: Dict[Future, int] = {}
        pending = set()
        found: Optional[ProbeResult] = None
        pool = ThreadPoolExecutor(max_workers=self.concurrency, thread_name_prefix="pd-probe")

        def submit_next() -> bool:
            item = next(remaining, None)
            if item is None:
                return False
            index, endpoint = item
            fut = pool.submit(self.probe_fn, endpoint, timeout_ms)
            index_of[fut] = index
            pending.add(fut)
            return True

        try:
            while len(pending) < self.concurrency and submit_next():
                pass

            while pending and found is None:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for fut in sorted(done, key=index_of.__getitem__):
                    result = fut.result()
                    observed.append(result)
                    if result.reachable:
                        found = result
                        break

                if found is None:
                    while len(pending) < self.concurrency and submit_next():
                        pass
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        if found is not None:
            self.logger.info(
                f"Reachable endpoint found: {found.endpoint} "
                f"({len(pending)} in-flight probe(s) abandoned)"
            )
        return SweepOutcome(found=found, results=tuple(observed))

    def find_first_reachable(self, spec: ScanSpec, timeout_ms: int) -> Optional[Endpoint]:
        """Return the first reachable endpoint of ``spec``, or None."""
        outcome = self.first_reachable(spec, timeout_ms)
        return outcome.found.endpoint if outcome.found else None


def scan(
    spec: ScanSpec,
    timeout_ms: int,
    concurrency: int = 1,
    ordered: bool = True,
    probe_fn: Optional[ProbeFn] = None,
    show_progress: bool = False,
) -> Iterator[ProbeResult]:
    """Probe every candidate of ``spec``; see Scanner.scan."""
    scanner = Scanner(concurrency=concurrency, probe_fn=probe_fn, show_progress=show_progress)
    return scanner.scan(spec, timeout_ms, ordered=ordered)


def find_first_reachable(
    spec: ScanSpec,
    timeout_ms: int,
    concurrency: int = 1,
    probe_fn: Optional[ProbeFn] = None,
) -> Optional[Endpoint]:
    """Return the first reachable endpoint of ``spec``; see Scanner.first_reachable."""
    scanner = Scanner(concurrency=concurrency, probe_fn=probe_fn, show_progress=False)
    return scanner.find_first_reachable(spec, timeout_ms)
