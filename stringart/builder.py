import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import lru_cache, partial
from typing import Callable, Iterator, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .errors import BuildCancelled, InvalidConfiguration, StringArtError
from .field import WHITE, check_bounds, validate_field
from .geometry import Hook, circle_layout, hooks
from .raster import line_indices

logger = logging.getLogger(__name__)


class Step(NamedTuple):
    index: int
    source: int
    target: int
    score: int
    saturated: bool


@dataclass
class StringArtResult:
    path: List[int]
    scores: List[int]
    hooks: List[Hook]
    field: np.ndarray

    @property
    def chords(self) -> List[Tuple[int, int]]:
        return list(zip(self.path[:-1], self.path[1:]))

    @property
    def saturated_steps(self) -> int:
        return sum(1 for s in self.scores if s == 0)


def select_next(scores: Sequence[int]) -> int:
    """
    Index of the strictly greatest score, lowest index on ties.

    The running best starts at (index 0, score 0), so when every candidate
    scores zero the answer is hook 0.
    """
    best, best_score = 0, 0
    for i, s in enumerate(scores):
        if s > best_score:
            best, best_score = i, s
    return best


class PathBuilder:
    """
    Greedy string path over a luminance field.

    Starting from hook 0, each iteration scores the chord from the current
    hook to every hook, moves to the darkest one and whitens the pixels under
    it. The field is copied on construction unless copy=False, in which case
    the caller's C-contiguous array is mutated in place.
    """

    def __init__(
        self,
        field: np.ndarray,
        hook_count: int,
        string_count: int,
        center: Optional[Tuple[int, int]] = None,
        radius: Optional[int] = None,
        workers: int = 1,
        copy: bool = True,
        cache_rows: int = 32,
    ):
        self.size = validate_field(field)
        if hook_count <= 0:
            raise InvalidConfiguration(f"hook count must be positive, got {hook_count}")
        if string_count < 0:
            raise InvalidConfiguration(f"string count must not be negative, got {string_count}")
        if workers < 1:
            raise InvalidConfiguration(f"workers must be at least 1, got {workers}")
        if cache_rows < 1:
            raise InvalidConfiguration(f"cache_rows must be at least 1, got {cache_rows}")

        default_center, default_radius = circle_layout(self.size)
        center = default_center if center is None else center
        radius = default_radius if radius is None else radius
        if radius <= 0:
            raise InvalidConfiguration(f"radius must be positive, got {radius}")

        self.hooks = hooks(hook_count, center, radius)
        for hook in self.hooks:
            check_bounds(field, hook.point)

        if copy:
            field = field.copy()
        elif not field.flags.c_contiguous:
            raise InvalidConfiguration("field must be C-contiguous to be mutated in place")
        self.field = field
        self._flat = field.reshape(-1)

        self.string_count = string_count
        self.workers = workers
        self.current = 0
        self.path = [0]
        self.scores: List[int] = []
        # chord indices from one hook to every hook, for the most recently used hooks
        self._row = lru_cache(maxsize=cache_rows)(self._build_row)
        self._executor: Optional[ThreadPoolExecutor] = None
        self._started = False

    @property
    def hook_count(self) -> int:
        return len(self.hooks)

    def _build_row(self, i: int) -> List[np.ndarray]:
        src = self.hooks[i].point
        return [line_indices(src, h.point, self.size) for h in self.hooks]

    def _line(self, i: int, j: int) -> np.ndarray:
        return self._row(i)[j]

    def chord_score(self, i: int, j: int) -> int:
        return int(np.sum(WHITE - self._flat[self._line(i, j)].astype(np.int64)))

    def score_candidates(self, current: int) -> List[int]:
        # read-only phase: nothing here writes to the field.
        # The row is built here so worker threads only read it.
        self._row(current)
        if self._executor is None:
            return [self.chord_score(current, i) for i in range(self.hook_count)]
        return list(self._executor.map(partial(self.chord_score, current), range(self.hook_count)))

    def consume_chord(self, i: int, j: int) -> None:
        self._flat[self._line(i, j)] = WHITE

    def steps(self, cancel=None) -> Iterator[Step]:
        """
        Runs the iterations one at a time. Each Step is yielded after its
        chord has been scored, chosen and consumed. `cancel` is any object
        with an is_set() method and is checked before every iteration.
        """
        if self._started:
            raise StringArtError("this builder has already run; create a new one")
        self._started = True

        logger.info(
            "Building path: %d hooks, %d strings, field %dx%d",
            self.hook_count, self.string_count, self.size, self.size,
        )
        if self.workers > 1:
            self._executor = ThreadPoolExecutor(max_workers=self.workers)
        warned = False
        try:
            for i in range(self.string_count):
                if cancel is not None and cancel.is_set():
                    raise BuildCancelled(f"cancelled after {i} of {self.string_count} strings")

                scores = self.score_candidates(self.current)
                nxt = select_next(scores)
                best = scores[nxt]
                self.consume_chord(self.current, nxt)

                saturated = best == 0
                if saturated and not warned:
                    logger.warning(
                        "String #%d: no dark pixels reachable from hook %d, falling back to hook %d",
                        i, self.current, nxt,
                    )
                    warned = True
                logger.debug("String #%d -> next hook: %d (score %d)", i, nxt, best)

                step = Step(i, self.current, nxt, best, saturated)
                self.path.append(nxt)
                self.scores.append(best)
                self.current = nxt
                yield step
        finally:
            if self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None

    def run(
        self,
        on_step: Optional[Callable[[Step], None]] = None,
        cancel=None,
    ) -> StringArtResult:
        for step in self.steps(cancel=cancel):
            if on_step is not None:
                on_step(step)
        result = self.result()
        logger.info(
            "Finished path of %d strings (%d saturated)",
            len(result.scores), result.saturated_steps,
        )
        return result

    def result(self) -> StringArtResult:
        return StringArtResult(
            path=list(self.path),
            scores=list(self.scores),
            hooks=list(self.hooks),
            field=self.field,
        )


def build_path(field: np.ndarray, hook_count: int, string_count: int, **kwargs) -> StringArtResult:
    return PathBuilder(field, hook_count, string_count, **kwargs).run()
