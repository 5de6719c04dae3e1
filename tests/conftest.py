"""
Shared fixtures: a clinic configuration and a record export on disk.
"""

import json

import pytest
import yaml

CONFIG_DATA = {
    "clinic_name": "Clinique Test",
    "timezone": "Europe/Paris",
    "upcoming_window_days": 7,
    "schedule": {
        "opening_time": "08:00",
        "closing_time": "12:00",
        "slot_duration": 30,
        "lunch_break_start": "10:00",
        "lunch_break_end": "10:30",
        "working_days": ["monday", "tuesday", "wednesday", "thursday", "friday"],
    },
    "protocols": [
        {
            "id": "vac-rage",
            "name": "Rage",
            "species": "Chien",
            "kind": "vaccination",
            "intervals": [{"offset_days": 365, "label": "Rappel annuel"}],
        },
        {
            "id": "vac-chppil",
            "name": "CHPPiL",
            "species": "Chien",
            "kind": "vaccination",
            "intervals": [
                {"offset_days": 21, "label": "Deuxième injection"},
                {"offset_days": 365, "label": "Rappel annuel"},
            ],
        },
        {
            "id": "ap-vermifuge",
            "name": "Vermifuge",
            "species": "Chat",
            "kind": "antiparasitic",
            "intervals": [{"offset_days": 90, "label": "Trimestriel"}],
        },
        {
            "id": "ap-old",
            "name": "Ancien collier",
            "species": "Chien",
            "kind": "antiparasitic",
            "is_active": False,
            "intervals": [{"offset_days": 60}, {"offset_days": 30}],
        },
    ],
}

RECORDS_DATA = {
    "appointments": [
        {"date": "2024-01-15", "time": "08:30"},
        {"date": "2024-01-16", "time": "09:00"},
        {"date": "2024-02-01", "time": "08:00"},
        {"date": "15/01/2024", "time": "08:00"},
    ],
    "care_events": [
        {
            "id": "v1",
            "protocol_name": "Rage",
            "kind": "vaccination",
            "species": "Chien",
            "date_given": "2023-01-10",
            "next_due_date": "2024-01-10",
            "status": "scheduled",
        },
        {
            "id": "v2",
            "protocol_name": "CHPPiL",
            "kind": "vaccination",
            "species": "Chien",
            "date_given": "2023-06-01",
            "next_due_date": "2024-01-18",
            "next_due_source": "manual",
            "status": "scheduled",
        },
        {
            "id": "a1",
            "protocol_name": "Vermifuge",
            "kind": "antiparasitic",
            "species": "Chat",
            "date_given": "2023-12-01",
            "next_due_date": "2024-03-01",
            "status": "scheduled",
        },
        {
            "id": "a2",
            "protocol_name": "Vermifuge",
            "kind": "antiparasitic",
            "species": "Chat",
            "date_given": "2023-09-01",
            "status": "completed",
        },
        {"id": "broken", "kind": "vaccination"},
    ],
}


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(CONFIG_DATA, allow_unicode=True), encoding="utf-8")
    return path


@pytest.fixture
def records_file(tmp_path):
    path = tmp_path / "records.json"
    path.write_text(json.dumps(RECORDS_DATA), encoding="utf-8")
    return path
