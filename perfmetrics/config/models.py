"""Config models and loader.

This module defines Pydantic models for the YAML configuration document and
for environment-based fallbacks, and resolves both into the immutable
:class:`SessionSettings` that the rest of the pipeline receives. Field aliases
follow the camelCase keys used in ``config.yml``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.rounding import (
    CURRENT_FORMAT_VERSION,
    DEFAULT_PRECISION,
    precision_for_format,
)
from ..errors import ConfigurationError, InputReadError
from .documents import read_yaml_document


class MetricDimension(BaseModel):
    """Name/value label attached to every record of a metric.

    Attributes
    ----------
    name: str
        Dimension name (e.g., "Goal").
    value: str
        Dimension value (e.g., "Fitness"). YAML numbers and booleans are
        kept as text; an empty value becomes "".
    """

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    name: str
    value: str

    @field_validator("value", mode="before")
    @classmethod
    def _scalar_as_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        return value


class MetricMapping(BaseModel):
    """Mapping from a data key to a remote metric.

    Attributes
    ----------
    remote_name: str
        Metric name reported to CloudWatch (YAML key ``name``).
    dimensions: Tuple[MetricDimension, ...]
        Dimensions in declaration order. Duplicate names are kept.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    remote_name: str = Field(..., alias="name", min_length=1)
    dimensions: Tuple[MetricDimension, ...] = Field(default_factory=tuple)

    @field_validator("dimensions", mode="before")
    @classmethod
    def _none_means_no_dimensions(cls, value: Any) -> Any:
        return () if value is None else value


class AppConfig(BaseModel):
    """Top-level configuration document.

    Attributes
    ----------
    region: Optional[str]
        AWS region to publish to. Falls back to ``--region``/``AWS_REGION``.
    profile: Optional[str]
        Shared-credentials profile. Falls back to ``--profile``/``AWS_PROFILE``.
    skip_publish: bool
        Render the preview but never submit (YAML key ``skipPublish``).
    metric_namespace: str
        CloudWatch namespace for the batch (YAML key ``metricNamespace``).
    format_version: int
        Data format version controlling value precision (YAML key
        ``formatVersion``); 1 is the legacy one-decimal format.
    metric_mappings: Dict[str, MetricMapping]
        Tracked metrics keyed by data key (YAML key ``metricMappings``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    region: Optional[str] = None
    profile: Optional[str] = None
    skip_publish: bool = Field(False, alias="skipPublish")
    metric_namespace: str = Field("", alias="metricNamespace")
    format_version: int = Field(CURRENT_FORMAT_VERSION, alias="formatVersion")
    metric_mappings: Dict[str, MetricMapping] = Field(
        default_factory=dict, alias="metricMappings"
    )

    @field_validator("skip_publish", mode="before")
    @classmethod
    def _none_means_false(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("metric_namespace", mode="before")
    @classmethod
    def _none_means_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("metric_mappings", mode="before")
    @classmethod
    def _none_means_no_mappings(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(key): mapping for key, mapping in value.items()}
        return value

    @field_validator("format_version")
    @classmethod
    def _known_format_version(cls, value: int) -> int:
        precision_for_format(value)
        return value

    @property
    def precision(self) -> int:
        """Decimal places used when rounding values for this config."""
        return precision_for_format(self.format_version)

    @staticmethod
    def load(path: Path) -> "AppConfig":
        """Load the configuration document from a YAML file.

        An empty file yields a default (empty) configuration.

        Raises
        ------
        InputReadError
            If the file is missing, is not YAML, or does not match the model.
        """
        data = read_yaml_document(path, "config")
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise InputReadError(
                f"Config file {path} must contain a mapping, "
                f"got {type(data).__name__}",
                path,
            )
        try:
            return AppConfig.model_validate(data)
        except ValidationError as exc:
            raise InputReadError(f"Invalid config file {path}: {exc}", path) from exc


class EnvSettings(BaseSettings):
    """Environment-driven settings and .env support.

    Attributes
    ----------
    AWS_REGION: Optional[str]
        Region fallback when neither the config nor ``--region`` sets one.
    AWS_PROFILE: Optional[str]
        Profile fallback when neither the config nor ``--profile`` sets one.
    PERFMETRICS_LOG_LEVEL: str
        Logging level name. Defaults to "WARNING".
    PERFMETRICS_NON_INTERACTIVE: bool
        Skip the confirmation prompt, as with ``--non-interactive``.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    AWS_REGION: Optional[str] = None
    AWS_PROFILE: Optional[str] = None
    PERFMETRICS_LOG_LEVEL: str = Field("WARNING")
    PERFMETRICS_NON_INTERACTIVE: bool = Field(False)


class SessionSettings(BaseModel):
    """Resolved, immutable settings for one run.

    Built once by :meth:`resolve` and passed explicitly to each stage.
    """

    model_config = ConfigDict(frozen=True)

    region: str
    profile: str
    namespace: str
    skip_publish: bool = False
    non_interactive: bool = False
    precision: int = Field(DEFAULT_PRECISION, ge=0)

    @classmethod
    def resolve(
        cls,
        config: AppConfig,
        *,
        cli_region: Optional[str] = None,
        cli_profile: Optional[str] = None,
        cli_skip_publish: bool = False,
        cli_non_interactive: bool = False,
        env: Optional[EnvSettings] = None,
    ) -> "SessionSettings":
        """Resolve session settings from the config, CLI flags and environment.

        Region and profile take the config value first, then the CLI flag,
        then the environment. Skip-publish is set when either the config or
        the flag asks for it.

        Raises
        ------
        ConfigurationError
            If region or profile is still empty after all fallbacks.
        """
        env = env if env is not None else load_env_settings()

        region = config.region or cli_region or env.AWS_REGION
        if not region:
            raise ConfigurationError("AWS_REGION environment variable not set")

        profile = config.profile or cli_profile or env.AWS_PROFILE
        if not profile:
            raise ConfigurationError("AWS_PROFILE environment variable not set")

        return cls(
            region=region,
            profile=profile,
            namespace=config.metric_namespace,
            skip_publish=config.skip_publish or cli_skip_publish,
            non_interactive=cli_non_interactive or env.PERFMETRICS_NON_INTERACTIVE,
            precision=config.precision,
        )


def load_env_settings() -> EnvSettings:
    """Read :class:`EnvSettings` from the process environment and ``.env``.

    Raises
    ------
    ConfigurationError
        If a variable holds a value of the wrong type.
    """
    try:
        return EnvSettings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid environment settings: {exc}") from exc
