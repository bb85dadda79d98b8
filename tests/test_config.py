"""Tests for configuration loading and error mapping."""

import json

import pytest

from shiftboard.config import DEFAULT_CONFIG, ScheduleConfig, config_from_dict, load_config
from shiftboard.errors import (
    DuplicateAssignment,
    Forbidden,
    NotFound,
    OutOfBusinessHours,
    ScheduleError,
    Unauthenticated,
    status_for,
)


def test_defaults():
    assert DEFAULT_CONFIG.business_span == (600, 1230)
    assert DEFAULT_CONFIG.assignment_granularity == 15
    assert DEFAULT_CONFIG.availability_granularity == 30
    assert DEFAULT_CONFIG.break_options == (30, 45, 60)


def test_load_yaml_config(tmp_path):
    path = tmp_path / "schedule.yaml"
    path.write_text(
        """
business_hours:
  start: "09:00"
  end: "21:00"
break_options: [30, 60]
templates:
  - start: "09:00"
    end: "13:00"
"""
    )
    cfg = load_config(path)
    assert cfg.business_span == (540, 1260)
    assert cfg.break_options == (30, 60)
    assert cfg.templates[0].label == "09:00-13:00"
    # Unspecified keys keep their defaults
    assert cfg.pixels_per_slot == 15


def test_load_json_config(tmp_path):
    path = tmp_path / "schedule.json"
    path.write_text(json.dumps({"granularity": {"assignment": 30}, "pixels_per_slot": 20}))
    cfg = load_config(path)
    assert cfg.assignment_granularity == 30
    assert cfg.pixels_per_slot == 20


def test_invalid_envelope_is_rejected():
    with pytest.raises(ValueError):
        ScheduleConfig(business_start_min=1230, business_end_min=600)
    with pytest.raises(ValueError):
        config_from_dict({"business_hours": {"start": "10:05"}})


def test_status_mapping():
    assert status_for(OutOfBusinessHours()) == 400
    assert status_for(DuplicateAssignment()) == 400
    assert status_for(NotFound()) == 404
    assert status_for(Forbidden()) == 403
    assert status_for(Unauthenticated()) == 401
    assert status_for(ScheduleError()) == 500


def test_error_message_defaults_to_docstring():
    assert NotFound().message == "The requested record does not exist."
    assert NotFound("Period 3 not found").message == "Period 3 not found"
