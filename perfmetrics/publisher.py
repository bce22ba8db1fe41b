"""CloudWatch publisher.

Translates a batch of :class:`AssembledRecord` into a single
``PutMetricData`` request and submits it through a boto3 CloudWatch client.
Transport, credentials and retries belong to boto3/botocore; the publisher
makes exactly one call per batch and surfaces any failure as
:class:`PublishError`.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from typing import Any, Dict, List, Optional, TextIO

import boto3
from botocore.exceptions import BotoCoreError, ClientError, ProfileNotFound

from .config.models import SessionSettings
from .domain.models import AssembledRecord
from .errors import ConfigurationError, PublishError

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Metrics published successfully!"


def create_cloudwatch_client(settings: SessionSettings) -> Any:
    """Build a CloudWatch client for the resolved profile and region.

    Raises
    ------
    ConfigurationError
        If the profile does not exist or the session cannot be created.
    """
    try:
        session = boto3.Session(
            profile_name=settings.profile, region_name=settings.region
        )
        return session.client("cloudwatch")
    except ProfileNotFound as exc:
        raise ConfigurationError(
            f"AWS profile {settings.profile!r} not found: {exc}"
        ) from exc
    except BotoCoreError as exc:
        raise ConfigurationError(f"Error creating AWS config: {exc}") from exc


def _metric_datum(record: AssembledRecord) -> Dict[str, Any]:
    datum: Dict[str, Any] = {
        "MetricName": record.name,
        "Value": record.value,
        "Timestamp": record.timestamp,
        "Unit": record.unit,
    }
    if record.dimensions:
        datum["Dimensions"] = [
            {"Name": dim.name, "Value": dim.value} for dim in record.dimensions
        ]
    return datum


class CloudWatchPublisher:
    """Publishes assembled records to CloudWatch.

    Parameters
    ----------
    client: Any
        A boto3 CloudWatch client (or anything exposing ``put_metric_data``).
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    @staticmethod
    def build_request(
        records: Sequence[AssembledRecord], namespace: str
    ) -> Dict[str, Any]:
        """Return ``PutMetricData`` keyword arguments for the batch."""
        metric_data: List[Dict[str, Any]] = [_metric_datum(r) for r in records]
        return {"Namespace": namespace, "MetricData": metric_data}

    def publish(
        self,
        records: Sequence[AssembledRecord],
        settings: SessionSettings,
        stream: Optional[TextIO] = None,
    ) -> Dict[str, Any]:
        """Submit the batch in one call and report success on ``stream``.

        An empty batch is not sent.

        Returns
        -------
        Dict[str, Any]
            The raw service response (empty when nothing was sent).

        Raises
        ------
        PublishError
            If the service call fails.
        """
        if not records:
            logger.warning(
                "publisher.empty_batch", extra={"namespace": settings.namespace}
            )
            return {}

        request = self.build_request(records, settings.namespace)
        logger.info(
            "publisher.put_metric_data",
            extra={
                "namespace": settings.namespace,
                "count": len(records),
                "region": settings.region,
            },
        )
        try:
            response = self._client.put_metric_data(**request)
        except (ClientError, BotoCoreError) as exc:
            raise PublishError(
                f"Publishing {len(records)} metric(s) to namespace "
                f"{settings.namespace!r} failed: {exc}"
            ) from exc

        out = stream if stream is not None else sys.stdout
        out.write(f"{SUCCESS_MESSAGE}\n")
        out.flush()
        return response
