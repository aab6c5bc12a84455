"""Sequential per-event stage runner.

The engine owns the stage order and event hand-off: every stage sees each
event produced by the stage before it, one event at a time, and cancelled
events are dropped before they reach the next stage (or the output).
"""

from collections.abc import Iterable, Iterator, Sequence

import structlog

from jsonexpand.contracts import Event
from jsonexpand.plugins.base import BaseTransform

logger = structlog.get_logger(__name__)


class Pipeline:
    """An ordered chain of transforms.

    Usage:
        pipeline = Pipeline([JsonExpand({"source": "message"})])
        for event in pipeline.run(events):
            ...
        pipeline.close()
    """

    def __init__(self, transforms: Sequence[BaseTransform]) -> None:
        self._transforms = list(transforms)
        for transform in self._transforms:
            transform.register()

    @property
    def transforms(self) -> list[BaseTransform]:
        return list(self._transforms)

    def process(self, event: Event) -> list[Event]:
        """Run one event through every stage.

        Returns:
            The surviving events, in emission order
        """
        batch = [event]
        for transform in self._transforms:
            next_batch: list[Event] = []
            for item in batch:
                next_batch.extend(out for out in transform.process(item) if not out.cancelled)
            batch = next_batch
            if not batch:
                break
        return batch

    def run(self, events: Iterable[Event]) -> Iterator[Event]:
        """Stream events through the pipeline."""
        for event in events:
            yield from self.process(event)

    def close(self) -> None:
        """Close every stage, continuing past failures."""
        for transform in self._transforms:
            try:
                transform.close()
            except Exception:
                logger.exception("Transform close failed", plugin=transform.name)
