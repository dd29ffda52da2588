"""Shared fixtures: a sample ART calendar on disk and an offscreen Qt application."""

from __future__ import annotations

import copy
import json
import os
from unittest.mock import MagicMock

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication  # noqa: E402

from art_timer.data.store import ReminderStore  # noqa: E402
from art_timer.ui.reminder_scheduler import ReminderScheduler  # noqa: E402

SAMPLE_DOCUMENT = {
    "PI_1": {
        "startDate": "2025-01-06",
        "endDate": "2025-03-28",
        "PI_PlanningAndInnovation": [
            {
                "startDate": "2025-01-06",
                "endDate": "2025-01-10",
                "name": "Planning",
                "activities": [
                    {
                        "day": 1,
                        "name": "Vision",
                        "sessions": [
                            {
                                "name": "Business Context",
                                "startDate": "2025-01-06T09:00:00",
                                "endDate": "2025-01-06T10:30:00",
                                "alerts": [],
                            },
                            {
                                "name": "Team Breakouts",
                                "startDate": "2025-01-06T13:00:00",
                                "endDate": "2025-01-06T17:00:00",
                            },
                        ],
                    },
                    {
                        "day": "2",
                        "name": "Commitment",
                        "sessions": [
                            {
                                "name": "Team Breakouts",
                                "startDate": "2025-01-07T09:00:00",
                                "endDate": "2025-01-07T11:00:00",
                                "alerts": [],
                            },
                        ],
                    },
                ],
            },
            {
                "startDate": "2025-01-13",
                "endDate": "2025-01-17",
                "name": "Innovation",
                "activities": [],
            },
        ],
        "PI_Iterations": [
            {"startDate": "2025-01-20", "endDate": "2025-01-31", "name": "Iteration 1"},
            {"startDate": "2025-02-03", "endDate": "2025-02-14", "name": "Iteration 2"},
        ],
    }
}


@pytest.fixture(scope="session")
def qapp():
    """One QApplication for the whole run; QTimer needs an event dispatcher."""
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def document():
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def calendar_file(tmp_path, document):
    path = tmp_path / "inputParameters.json"
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def store(calendar_file):
    store = ReminderStore(str(calendar_file))
    store.load()
    return store


@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def scheduler(qapp, store, notifier):
    scheduler = ReminderScheduler(store, notifier=notifier, icon_path="icon.ico")
    yield scheduler
    scheduler.cancel_all()
