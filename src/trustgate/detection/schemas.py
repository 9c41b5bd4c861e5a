"""Validation boundary between client telemetry JSON and the scorers.

The client collector posts camelCase JSON. Everything is validated here so
the scorers only ever see well-formed, typed records and can stay total.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from trustgate.detection.models import (
    BehavioralSignals,
    BrowserSignals,
    HoneypotFields,
    ProbeResult,
)


class TelemetryValidationError(ValueError):
    """Client telemetry failed schema validation."""

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        self.errors = errors
        super().__init__(f"invalid telemetry: {len(errors)} error(s)")


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class BehavioralPayload(_CamelModel):
    """Interaction summary as posted by the client."""

    mouse_movements: int = Field(ge=0)
    keystrokes: int = Field(ge=0)
    time_on_page: int = Field(ge=0, description="milliseconds")
    form_fill_time: int = Field(ge=0, description="milliseconds")
    clipboard_paste: bool = False
    rapid_submission: bool = False

    def to_signals(self) -> BehavioralSignals:
        return BehavioralSignals(
            mouse_movements=self.mouse_movements,
            keystrokes=self.keystrokes,
            time_on_page_ms=self.time_on_page,
            form_fill_time_ms=self.form_fill_time,
            clipboard_paste=self.clipboard_paste,
            rapid_submission=self.rapid_submission,
        )


class BrowserPayload(_CamelModel):
    """Environment fingerprint as posted by the client."""

    screen_width: int = Field(ge=0)
    screen_height: int = Field(ge=0)
    color_depth: int = Field(ge=0)
    pixel_ratio: float = Field(ge=0, allow_inf_nan=False)
    cookies_enabled: bool
    languages: str
    platform: str
    hardware_concurrency: int = Field(ge=0)
    device_memory: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    timezone: str
    timezone_offset: int
    webgl_vendor: str | None = None
    webgl_renderer: str | None = None
    canvas_hash: str
    audio_hash: str
    has_webdriver: bool = False
    has_automation: bool = False
    has_phantom: bool = False
    has_selenium: bool = False
    has_nightmare: bool = False
    has_casperjs: bool = Field(default=False, alias="hasCasperJS")
    touch_points: int = Field(ge=0)
    fonts_detected: int = Field(ge=0)
    plugin_count: int = Field(ge=0)
    has_notification_api: bool = Field(default=False, alias="hasNotificationAPI")
    has_battery_api: bool = Field(default=False, alias="hasBatteryAPI")
    do_not_track: str | None = None

    def to_signals(self) -> BrowserSignals:
        return BrowserSignals(
            screen_width=self.screen_width,
            screen_height=self.screen_height,
            color_depth=self.color_depth,
            pixel_ratio=self.pixel_ratio,
            cookies_enabled=self.cookies_enabled,
            languages=self.languages,
            platform=self.platform,
            hardware_concurrency=self.hardware_concurrency,
            device_memory=self.device_memory,
            timezone=self.timezone,
            timezone_offset=self.timezone_offset,
            webgl_vendor=self.webgl_vendor,
            webgl_renderer=self.webgl_renderer,
            canvas=ProbeResult.from_wire(self.canvas_hash, unavailable_sentinel="no-canvas"),
            audio=ProbeResult.from_wire(self.audio_hash, unavailable_sentinel="no-audio"),
            has_webdriver=self.has_webdriver,
            has_automation=self.has_automation,
            has_phantom=self.has_phantom,
            has_selenium=self.has_selenium,
            has_nightmare=self.has_nightmare,
            has_casperjs=self.has_casperjs,
            touch_points=self.touch_points,
            fonts_detected=self.fonts_detected,
            plugin_count=self.plugin_count,
            has_notification_api=self.has_notification_api,
            has_battery_api=self.has_battery_api,
            do_not_track=self.do_not_track,
        )


class HoneypotPayload(BaseModel):
    """Hidden form fields. Anything not posted stays ``None``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    website: str | None = None
    email_confirm: str | None = Field(
        default=None, validation_alias=AliasChoices("email_confirm", "emailConfirm")
    )
    form_timestamp: float | None = Field(
        default=None,
        allow_inf_nan=False,
        validation_alias=AliasChoices("_formTimestamp", "formTimestamp"),
    )
    form_token: str | None = Field(
        default=None, validation_alias=AliasChoices("_formToken", "formToken")
    )

    def to_fields(self) -> HoneypotFields:
        return HoneypotFields(
            website=self.website,
            email_confirm=self.email_confirm,
            form_timestamp=self.form_timestamp,
            form_token=self.form_token,
        )


class EvaluationRequest(BaseModel):
    """Body of an evaluation call. Every section is optional."""

    model_config = ConfigDict(extra="ignore")

    behavioral: BehavioralPayload | None = None
    browser: BrowserPayload | None = None
    honeypot: HoneypotPayload | None = None


@dataclass(frozen=True)
class EvaluationInputs:
    """Typed engine inputs produced by :func:`parse_evaluation_request`."""

    behavioral: BehavioralSignals | None = None
    browser: BrowserSignals | None = None
    honeypot: HoneypotFields | None = None


def parse_evaluation_request(data: Any) -> EvaluationInputs:  # noqa: ANN401
    """Validate a decoded JSON body and convert it to engine inputs.

    Raises:
        TelemetryValidationError: If the body does not match the schema.
    """
    try:
        body = EvaluationRequest.model_validate(data)
    except ValidationError as e:
        raise TelemetryValidationError(
            e.errors(include_url=False, include_context=False, include_input=False)
        ) from e

    return EvaluationInputs(
        behavioral=body.behavioral.to_signals() if body.behavioral else None,
        browser=body.browser.to_signals() if body.browser else None,
        honeypot=body.honeypot.to_fields() if body.honeypot else None,
    )
