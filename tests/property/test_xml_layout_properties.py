from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from logbridge.core.events import LogEvent
from logbridge.plugins.layouts import XmlLayout
from logbridge.plugins.layouts.xml import XML_NAMESPACE

pytestmark = pytest.mark.property

NS = {"log4j": XML_NAMESPACE}

# CR is left out of element text because parsers normalize line endings there
xml_text = st.text(alphabet=st.characters(exclude_characters="\r"), max_size=60)
xml_attr_text = st.text(max_size=30)


def _xml_safe(text: str) -> str:
    """Expected rendering: characters outside the XML 1.0 Char set become U+FFFD."""
    out = []
    for ch in text:
        cp = ord(ch)
        allowed = (
            ch in "\t\n\r"
            or 0x20 <= cp <= 0xD7FF
            or 0xE000 <= cp <= 0xFFFD
            or 0x10000 <= cp <= 0x10FFFF
        )
        out.append(ch if allowed else "\ufffd")
    return "".join(out)


@given(
    logger=xml_attr_text,
    message=xml_text,
    thread=xml_attr_text,
    prop_value=xml_attr_text,
)
@settings(max_examples=200)
def test_document_round_trips_text(
    logger: str, message: str, thread: str, prop_value: str
) -> None:
    layout = XmlLayout(complete=True, properties=True)
    event = LogEvent(
        logger_name=logger,
        level="WARN",
        message=message,
        thread_name=thread,
        context_map={"key": prop_value},
    )
    data = layout.header() + layout.to_bytes(event) + layout.footer()  # type: ignore[operator]
    root = ET.fromstring(data)
    parsed = root.find("log4j:event", NS)

    assert parsed is not None
    assert parsed.get("logger") == (_xml_safe(logger) or "root")
    assert parsed.get("thread") == _xml_safe(thread)
    assert "".join(parsed.find("log4j:message", NS).itertext()) == _xml_safe(message)
    assert parsed.find("log4j:properties/log4j:data", NS).get("value") == _xml_safe(
        prop_value
    )


@given(messages=st.lists(xml_text, max_size=5))
def test_any_number_of_events_forms_one_document(messages: list[str]) -> None:
    layout = XmlLayout(complete=True)
    body = b"".join(layout.to_bytes(LogEvent("svc", "INFO", m)) for m in messages)
    root = ET.fromstring(layout.header() + body + layout.footer())  # type: ignore[operator]
    assert len(root.findall("log4j:event", NS)) == len(messages)
