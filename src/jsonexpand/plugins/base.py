"""Base class for transform implementations.

Transforms MUST subclass BaseTransform: plugin discovery uses issubclass()
checks against it, and it carries the conditional and success-marking
behaviour every stage shares.

Lifecycle Contract (called by the pipeline engine):
    __init__(config) -> register() -> process(event)* -> close()

- __init__: Validate configuration. Invalid options raise PluginConfigError,
  which is fatal to pipeline startup.
- register: One-time setup after construction. Must not fail under valid
  configuration and performs no I/O by default.
- process: Called once per event, synchronously. Returns the events that
  continue downstream. Per-event problems are absorbed (tagging, logging);
  only programming errors raise.
- close: Pure resource teardown.

Instances are not safe to share between threads that call process()
concurrently; the engine runs stages sequentially per event.
"""

from abc import ABC, abstractmethod
from typing import Any

import structlog

from jsonexpand.contracts import Event
from jsonexpand.plugins.config_base import TransformConfig

logger = structlog.get_logger(__name__)


class BaseTransform(ABC):
    """Base class for all event transforms.

    Subclasses set `name`, parse their own config model (a TransformConfig
    subclass) in __init__, pass it to init_common_options(), and implement
    process(). Inside process(), call should_process() first and
    filter_matched() on every event the stage successfully produced:

        class Uppercase(BaseTransform):
            name = "uppercase"

            def __init__(self, config: dict[str, Any]) -> None:
                super().__init__(config)
                self.init_common_options(TransformConfig.from_dict(config))

            def process(self, event: Event) -> list[Event]:
                if not self.should_process(event):
                    return [event]
                event.set("message", str(event.get("message")).upper())
                self.filter_matched(event)
                return [event]
    """

    name: str
    plugin_version: str = "0.0.0"

    def __init__(self, config: dict[str, Any]) -> None:
        """Initialize with configuration.

        Args:
            config: Plugin configuration
        """
        self.config = config
        self._common = TransformConfig()

    def init_common_options(self, cfg: TransformConfig) -> None:
        """Adopt the shared conditional and success options from a parsed config."""
        self._common = cfg

    def register(self) -> None:  # noqa: B027 - optional hook
        """Called once before any events are processed."""
        pass

    @abstractmethod
    def process(self, event: Event) -> list[Event]:
        """Process a single event.

        Args:
            event: Input event. Stages may mutate it in place.

        Returns:
            Events to pass downstream, in order. Return the input event to
            pass it on; cancel() it to suppress it.
        """

    def close(self) -> None:  # noqa: B027 - optional override
        """Release resources. Called once when the pipeline shuts down."""
        pass

    # === Shared stage behaviour ===

    def should_process(self, event: Event) -> bool:
        """Evaluate the type / tags / exclude_tags conditions for this stage."""
        cfg = self._common
        if cfg.type and event.get("type") != cfg.type:
            return False

        event_tags = event.tags
        if cfg.tags and not all(tag in event_tags for tag in cfg.tags):
            return False

        if cfg.exclude_tags and any(tag in event_tags for tag in cfg.exclude_tags):
            return False

        return True

    def filter_matched(self, event: Event) -> None:
        """Apply add_field, remove_field, add_tag and remove_tag to an event.

        Called by a stage on each event it successfully produced.
        """
        cfg = self._common

        for raw_field, raw_values in cfg.add_field.items():
            field = event.sprintf(raw_field)
            values = raw_values if isinstance(raw_values, list) else [raw_values]
            for raw_value in values:
                value = event.sprintf(raw_value)
                existing = event.get(field)
                if event.has(field):
                    if not isinstance(existing, list):
                        existing = [existing]
                        event.set(field, existing)
                    existing.append(value)
                else:
                    event.set(field, value)
                logger.debug("Adding value to field", plugin=self.name, field=field, value=value)

        for raw_field in cfg.remove_field:
            field = event.sprintf(raw_field)
            logger.debug("Removing field", plugin=self.name, field=field)
            event.remove(field)

        for raw_tag in cfg.add_tag:
            tag = event.sprintf(raw_tag)
            logger.debug("Adding tag", plugin=self.name, tag=tag)
            event.tag(tag)

        for raw_tag in cfg.remove_tag:
            tag = event.sprintf(raw_tag)
            logger.debug("Removing tag", plugin=self.name, tag=tag)
            event.untag(tag)
