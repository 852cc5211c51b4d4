"""Translate provider event text into typed completion signals."""

import re

from ebdeploy.deploy.models import CompletionSignal, Operation

SUCCESS_PATTERNS: dict[Operation, re.Pattern[str]] = {
    Operation.CREATE: re.compile(r"Successfully launched environment", re.IGNORECASE),
    Operation.UPDATE: re.compile(r"Environment update completed successfully", re.IGNORECASE),
    Operation.TERMINATE: re.compile(r"terminateEnvironment completed successfully", re.IGNORECASE),
}

FAILURE_PATTERN = re.compile(r"Failed to deploy application", re.IGNORECASE)


def classify_event(operation: Operation, message: str) -> CompletionSignal:
    """Classify one event message for an in-flight operation.

    The fatal pattern wins over the success pattern when both match.
    """
    if FAILURE_PATTERN.search(message):
        return CompletionSignal.failed(message)
    if SUCCESS_PATTERNS[operation].search(message):
        return CompletionSignal.succeeded()
    return CompletionSignal.pending()
