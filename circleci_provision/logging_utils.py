"""Logging utilities for circleci-provision."""

from __future__ import annotations

import json
import logging
import sys


class ProjectContextFilter(logging.Filter):
    """Tags every record with the project being provisioned."""

    def __init__(self, project: str):
        super().__init__()
        self.project = project

    def filter(self, record: logging.LogRecord) -> bool:
        record.project = self.project
        return True


class StructuredFormatter(logging.Formatter):
    """Formatter that can emit JSON lines when configured."""

    def __init__(self, json_mode: bool = False):
        super().__init__()
        self.json_mode = json_mode

    def format(self, record: logging.LogRecord) -> str:
        if self.json_mode and hasattr(record, "action_result"):
            return json.dumps(record.action_result.to_dict())
        if self.json_mode:
            payload = {"level": record.levelname, "message": record.getMessage()}
            if hasattr(record, "project"):
                payload["project"] = record.project
            return json.dumps(payload)
        return f"[{record.levelname:<7}] {record.getMessage()}"


def setup_logging(json_mode: bool = False, verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger("circleci-provision")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    # main() may run more than once per process (tests)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    for existing in list(logger.filters):
        logger.removeFilter(existing)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter(json_mode=json_mode))
    logger.addHandler(handler)
    return logger


def set_project_context(logger: logging.Logger, project: str) -> None:
    logger.addFilter(ProjectContextFilter(project))
