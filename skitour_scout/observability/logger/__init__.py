"""
step-tagged logging for the condition engine.

usage:
    >>> from skitour_scout.observability.logger import get_logger, PipelineStep, time_profile
    >>> logger = get_logger(__name__, PipelineStep.HAZARD_BULLETIN)
    >>> logger.info("bulletin parsed")

configuration (environment):
    - LOG_LEVEL: DEBUG, INFO, WARN, ERROR (default: INFO)
    - LOG_OUTPUT: STDOUT, FILE, BOTH (default: STDOUT)
    - LOG_DIR: directory for file output (default: logs)
    - LOG_SPLIT_BY_STEP: one file per pipeline step (default: false)
"""

from skitour_scout.observability.logger.config import LoggerConfig, get_logger_config
from skitour_scout.observability.logger.logger import (
    get_logger,
    get_request_logger,
    setup_logging,
)
from skitour_scout.observability.logger.pipeline_step import PipelineStep
from skitour_scout.observability.logger.decorators import time_profile

__all__ = [
    "get_logger",
    "get_request_logger",
    "setup_logging",
    "PipelineStep",
    "LoggerConfig",
    "get_logger_config",
    "time_profile",
]
