"""
Harness entry point: the equivalence flow and the benchmark flow.

    equivalence: patterns -> words -> transform -> verify
    benchmark:   patterns -> words -> transform -> augment words -> time before/after

Each flow has its own corpus size and dump-size bound. A failure in any stage
is wrapped in a FlowError naming the flow; the flows are independent, so one
failing does not stop the other from running.
"""

from typing import Callable, List, Optional, Sequence

from .benchmark import BenchmarkCoordinator
from .corpus import augment_for_benchmark
from .equivalence import EquivalenceVerifier
from .errors import FlowError, GenerationError, HarnessError
from .matcher_runner import MatcherRunner
from .models import BenchmarkEntry, EquivalenceReport, PatternPair
from .path_config import HarnessConfig
from .transformer import BatchTransformer

PatternSource = Callable[[], Sequence[str]]
WordGenerator = Callable[[Sequence[str], int, int], List[PatternPair]]

EQUIVALENCE_FLOW = "equivalence"
BENCHMARK_FLOW = "benchmark"


class Harness:
    def __init__(
        self,
        config: HarnessConfig,
        pattern_source: PatternSource,
        word_generator: WordGenerator,
        transformer: Optional[BatchTransformer] = None,
        verifier: Optional[EquivalenceVerifier] = None,
        coordinator: Optional[BenchmarkCoordinator] = None,
    ):
        self.config = config
        self.pattern_source = pattern_source
        self.word_generator = word_generator
        self.transformer = transformer or BatchTransformer(config.transformer_path, timeout=config.transformer_timeout)
        self.verifier = verifier or EquivalenceVerifier()
        self._coordinator = coordinator

    @property
    def coordinator(self) -> BenchmarkCoordinator:
        # Built lazily: the equivalence flow alone does not need a matcher.
        if self._coordinator is None:
            runner = MatcherRunner(self.config.matcher_cmd, time_unit=self.config.time_unit)
            self._coordinator = BenchmarkCoordinator(runner)
        return self._coordinator

    def prepare_environment(self, count_words: int, max_dump_size: int) -> List[PatternPair]:
        """Generate patterns and words, then transform the patterns."""
        patterns = list(self.pattern_source())
        try:
            pairs = self.word_generator(patterns, count_words, max_dump_size)
        except GenerationError as exc:
            raise GenerationError("failed to generate words", count_words=count_words) from exc
        self.transformer.transform(pairs)
        return pairs

    def equivalence_check(self) -> List[EquivalenceReport]:
        try:
            pairs = self.prepare_environment(
                self.config.equivalence_count_words, self.config.equivalence_max_dump_size
            )
            return self.verifier.verify_all(pairs)
        except (HarnessError, ValueError) as exc:
            raise FlowError(EQUIVALENCE_FLOW) from exc

    def benchmark_check(self) -> List[BenchmarkEntry]:
        try:
            pairs = self.prepare_environment(
                self.config.bench_count_words, self.config.bench_max_dump_size
            )
            pairs = augment_for_benchmark(pairs, self.config.marker)
            return self.coordinator.run_all(pairs)
        except (HarnessError, ValueError) as exc:
            raise FlowError(BENCHMARK_FLOW) from exc

    def start(self, run_equivalence: bool = True, run_benchmark: bool = True) -> List[FlowError]:
        """Run the requested flows and return the failures (empty on success)."""
        failures: List[FlowError] = []
        flows = []
        if run_equivalence:
            flows.append(self.equivalence_check)
        if run_benchmark:
            flows.append(self.benchmark_check)
        for flow in flows:
            try:
                flow()
            except FlowError as exc:
                failures.append(exc)
        return failures
