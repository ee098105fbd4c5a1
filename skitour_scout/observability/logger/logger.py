"""
logger factory for the condition engine.

records go to stdout, a rotating file, or both. with LOG_SPLIT_BY_STEP=true
the file output is split into one file per pipeline step
(e.g. logs/weather.log, logs/hazard_bulletin.log).
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from skitour_scout.observability.logger.config import LoggerConfig, get_logger_config
from skitour_scout.observability.logger.formatter import PipelineLogAdapter, PipelineLogFormatter
from skitour_scout.observability.logger.pipeline_step import PipelineStep


_logging_initialized = False

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}


class PipelineStepFilter(logging.Filter):
    """only lets through records tagged with one pipeline step."""

    def __init__(self, pipeline_step: str):
        super().__init__()
        self.pipeline_step = pipeline_step

    def filter(self, record: logging.LogRecord) -> bool:
        return getattr(record, "pipeline_step", PipelineStep.UNKNOWN.value) == self.pipeline_step


def _rotating_handler(path: Path, config: LoggerConfig, formatter: logging.Formatter) -> RotatingFileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(path),
        maxBytes=config.log_file_max_bytes,
        backupCount=config.log_file_backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> None:
    """
    configure the root logger once per process.

    subsequent calls are no-ops.
    """
    global _logging_initialized

    if _logging_initialized:
        return

    config = get_logger_config()

    root_logger = logging.getLogger()
    root_logger.setLevel(_LEVELS.get(config.log_level, logging.INFO))
    root_logger.handlers.clear()

    formatter = PipelineLogFormatter(fmt=config.log_format, datefmt=config.log_date_format)

    if config.log_output in ("STDOUT", "BOTH"):
        stdout_handler = logging.StreamHandler()
        stdout_handler.setFormatter(formatter)
        root_logger.addHandler(stdout_handler)

    if config.log_output in ("FILE", "BOTH"):
        log_dir = Path(config.log_dir)
        if config.split_by_step:
            for step in PipelineStep:
                handler = _rotating_handler(log_dir / f"{step.value}.log", config, formatter)
                handler.addFilter(PipelineStepFilter(step.value))
                root_logger.addHandler(handler)
        else:
            root_logger.addHandler(_rotating_handler(log_dir / "skitour_scout.log", config, formatter))

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    _logging_initialized = True


def get_logger(
    name: str,
    pipeline_step: Optional[PipelineStep] = None
) -> PipelineLogAdapter:
    """
    get a logger tagged with a pipeline step.

    example:
        >>> logger = get_logger(__name__, PipelineStep.WEATHER)
        >>> logger.info("fetching forecast")
        # 2026-01-31 08:00:00 | INFO  | weather          | skitour_scout.agents.weather | fetching forecast
    """
    if not _logging_initialized:
        setup_logging()

    return PipelineLogAdapter(
        logger=logging.getLogger(name),
        pipeline_step=pipeline_step or PipelineStep.UNKNOWN,
    )


def get_request_logger(
    name: str,
    pipeline_step: Optional[PipelineStep] = None,
    request_id: Optional[str] = None
) -> PipelineLogAdapter:
    """get a step-tagged logger whose messages carry a request id prefix."""
    if not _logging_initialized:
        setup_logging()

    extra = {"request_id": request_id} if request_id else {}
    return PipelineLogAdapter(
        logger=logging.getLogger(name),
        pipeline_step=pipeline_step or PipelineStep.UNKNOWN,
        extra=extra,
        prefix=f"[{request_id}]" if request_id else None,
    )
