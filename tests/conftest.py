"""Shared fixtures for schedule tests."""
from datetime import datetime

import pytest
import pytz


SAMPLE_SCHEDULE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<schedule>
  <conference>
    <title>FOSDEM 2026</title>
    <start>2026-01-31</start>
    <end>2026-02-01</end>
  </conference>
  <day index="1" date="2026-01-31">
    <room name="Janson">
      <event id="101">
        <start>09:30</start>
        <duration>00:25</duration>
        <room>Janson</room>
        <slug>welcome</slug>
        <title>Welcome to FOSDEM 2026</title>
        <subtitle></subtitle>
      </event>
      <event id="102">
        <start>23:30</start>
        <duration>01:00</duration>
        <room>Janson</room>
        <slug>late-night</slug>
        <title>Late night keynote</title>
      </event>
    </room>
    <room name="K.1.105 (La Fontaine)">
      <event id="201">
        <start>10:00</start>
        <duration>00:50</duration>
        <room>K.1.105 (La Fontaine)</room>
        <slug>rust-kernel</slug>
        <title>Rust in the kernel</title>
        <subtitle>Two years later</subtitle>
      </event>
    </room>
  </day>
  <day index="2" date="2026-02-01">
    <room name="Janson">
      <event id="301">
        <start>17:00</start>
        <duration>0:30</duration>
        <room>Janson</room>
        <slug>closing</slug>
        <title>Closing FOSDEM 2026</title>
      </event>
    </room>
    <room name="janson">
      <event id="302">
        <start>12:00</start>
        <duration>bogus</duration>
        <slug>case-check</slug>
        <title>Lowercase room</title>
      </event>
    </room>
  </day>
</schedule>
"""


@pytest.fixture
def schedule_xml():
    """FOSDEM-style schedule with two days and three rooms."""
    return SAMPLE_SCHEDULE_XML


@pytest.fixture
def fixed_now():
    """Instant two weeks before the conference."""
    return datetime(2026, 1, 15, 12, 0, tzinfo=pytz.utc)
