"""Per-run publish pipeline.

Drives one batch through assembly, preview, confirmation and publishing::

    Start -> Loaded -> Assembled -> Previewed -> Skipped
                                             -> Empty
                                             -> AwaitingConfirmation
                                                  -> Approved -> Published
                                                              -> PublishFailed
                                                  -> Declined -> Cancelled

Every terminal state except ``PublishFailed`` is a clean exit;
``PublishFailed`` propagates :class:`PublishError`.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from enum import Enum
from typing import Callable, Optional, TextIO

from .config.models import AppConfig, SessionSettings
from .confirm import DEFAULT_PROMPT, ConfirmationGate, Decision
from .domain.assembler import Observations, assemble
from .errors import PublishError
from .preview import render
from .publisher import CloudWatchPublisher

logger = logging.getLogger(__name__)

SKIPPED_MESSAGE = "You have elected to not publish these metrics, exiting..."
CANCELLED_MESSAGE = "Operation cancelled."
EMPTY_MESSAGE = "No mapped metrics to publish, exiting..."

PublisherFactory = Callable[[SessionSettings], CloudWatchPublisher]


class PipelineState(str, Enum):
    """States a run passes through."""

    START = "start"
    LOADED = "loaded"
    ASSEMBLED = "assembled"
    PREVIEWED = "previewed"
    SKIPPED = "skipped"
    EMPTY = "empty"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    APPROVED = "approved"
    DECLINED = "declined"
    CANCELLED = "cancelled"
    PUBLISHED = "published"
    PUBLISH_FAILED = "publish_failed"


class PipelineOutcome(str, Enum):
    """Successful terminal states of a run."""

    PUBLISHED = "published"
    SKIPPED = "skipped"
    CANCELLED = "cancelled"
    EMPTY = "empty"


def _enter(state: PipelineState) -> PipelineState:
    logger.debug("pipeline.state", extra={"state": state.value})
    return state


def _say(stream: TextIO, message: str) -> None:
    stream.write(f"{message}\n")
    stream.flush()


def run_pipeline(
    config: AppConfig,
    observed: Observations,
    settings: SessionSettings,
    *,
    publisher_factory: PublisherFactory,
    gate: Optional[ConfirmationGate] = None,
    stream: Optional[TextIO] = None,
    now: Optional[datetime] = None,
) -> PipelineOutcome:
    """Run one batch from loaded inputs to its terminal state.

    Parameters
    ----------
    config: AppConfig
        Loaded configuration document (provides the metric mappings).
    observed: Observations
        Measurements for this cycle.
    settings: SessionSettings
        Resolved settings for the run.
    publisher_factory: PublisherFactory
        Builds the publisher; only called once submission is approved.
    gate: Optional[ConfirmationGate]
        Confirmation gate; defaults to one honouring
        ``settings.non_interactive`` on stdin/stdout.
    stream: Optional[TextIO]
        Destination for the preview and status messages (stdout by default).
    now: Optional[datetime]
        Batch timestamp override.

    Raises
    ------
    PublishError
        If the remote submission fails.
    """
    out = stream if stream is not None else sys.stdout
    _enter(PipelineState.START)
    _enter(PipelineState.LOADED)

    records = assemble(
        observed, config.metric_mappings, precision=settings.precision, now=now
    )
    _enter(PipelineState.ASSEMBLED)

    render(records, settings.precision, out)
    _enter(PipelineState.PREVIEWED)

    if settings.skip_publish:
        _enter(PipelineState.SKIPPED)
        _say(out, SKIPPED_MESSAGE)
        return PipelineOutcome.SKIPPED

    if not records:
        _enter(PipelineState.EMPTY)
        _say(out, EMPTY_MESSAGE)
        return PipelineOutcome.EMPTY

    if gate is None:
        gate = ConfirmationGate(
            output_stream=out, non_interactive=settings.non_interactive
        )
    _enter(PipelineState.AWAITING_CONFIRMATION)
    if gate.decide(DEFAULT_PROMPT) is not Decision.APPROVED:
        _enter(PipelineState.DECLINED)
        _enter(PipelineState.CANCELLED)
        _say(out, CANCELLED_MESSAGE)
        return PipelineOutcome.CANCELLED

    _enter(PipelineState.APPROVED)
    try:
        publisher_factory(settings).publish(records, settings, out)
    except PublishError:
        _enter(PipelineState.PUBLISH_FAILED)
        raise
    _enter(PipelineState.PUBLISHED)
    return PipelineOutcome.PUBLISHED
