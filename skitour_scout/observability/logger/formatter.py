"""
formatter and adapter that carry the pipeline step on every record.
"""

import logging
from typing import Optional

from skitour_scout.observability.logger.pipeline_step import PipelineStep


class PipelineLogFormatter(logging.Formatter):
    """formatter that tolerates records logged without a pipeline step."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "pipeline_step"):
            record.pipeline_step = PipelineStep.UNKNOWN.value
        return super().format(record)


class PipelineLogAdapter(logging.LoggerAdapter):
    """
    logger adapter that injects the pipeline step into all log records.

    an optional prefix (e.g. "[weather]") is prepended to every message.
    """

    def __init__(
        self,
        logger: logging.Logger,
        pipeline_step: Optional[PipelineStep] = None,
        extra: Optional[dict] = None,
        prefix: Optional[str] = None,
    ):
        self.pipeline_step = pipeline_step or PipelineStep.UNKNOWN
        self._prefix = prefix

        extra = dict(extra or {})
        extra["pipeline_step"] = self.pipeline_step.value
        super().__init__(logger, extra)

    def with_prefix(self, prefix: str) -> "PipelineLogAdapter":
        """return a sibling adapter with its own prefix, leaving this one untouched."""
        return PipelineLogAdapter(self.logger, self.pipeline_step, dict(self.extra), prefix)

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        if self._prefix:
            msg = f"{self._prefix} {msg}"

        kwargs.setdefault("extra", {})
        kwargs["extra"].update(self.extra)
        return msg, kwargs
