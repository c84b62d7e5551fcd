from __future__ import annotations
from typing import Any, Dict, List

import pytest

from cyberatlas.engine import Atlas
from cyberatlas.indices import build_indices
from cyberatlas.loader import incidents_from_records


def make_record(id: str, location: str, date: str = "2021-03-01", start_date: str = "",
                attack_type: str = "Ransomware", name: str = "") -> Dict[str, Any]:
    return {
        "id": id,
        "organization": "org",
        "status": "published",
        "event": {
            "date": date,
            "startDate": start_date,
            "name": name or f"Incident {id}",
            "description": "",
            "primaryLocation": location,
            "primaryCity": "",
            "eventTrustLevel": "high",
        },
        "attack": {
            "type": attack_type,
            "vector": "email",
            "impact": {"cia": "availability", "type": "disruption", "description": ""},
            "harms": {"groupName": "public"},
        },
        "source": {"name": "news", "url": "https://example.org"},
        "target_name_embed": [],
        "threat_actor_name_embed": [],
        "tags": ["demo"],
    }


@pytest.fixture
def records() -> List[Dict[str, Any]]:
    return [
        make_record("1", "US", "2020-01-01", attack_type="Phishing"),
        make_record("2", "fr", "2020-06-01", attack_type="Ransomware"),
        make_record("3", "US", "2021-02-10", attack_type="Ransomware"),
        make_record("4", "", "2021-05-05", attack_type="DDoS"),
        make_record("5", "ZZ", "2021-05-05", attack_type="DDoS"),
        make_record("6", "BR", "1999-12-31", attack_type="Malware"),
        make_record("7", "DE", "2022-07-07", start_date="2022-01-15", attack_type="Phishing"),
        make_record("8", "JP", "not a date", attack_type="Data Breach"),
    ]


@pytest.fixture
def incidents(records):
    return incidents_from_records(records)


@pytest.fixture
def atlas(incidents) -> Atlas:
    return Atlas(incidents=incidents, idx=build_indices(incidents))
