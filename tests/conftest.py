"""Shared pytest fixtures for Lockstep tests."""

from pathlib import Path

import pytest
from dotenv import load_dotenv
from hypothesis import settings

from lockstep.core.config import LockstepConfig, reload_config
from lockstep.core.models import InterfaceDocument
from lockstep.introspection.parser import parse_document

# Load environment variables from .env file
load_dotenv()

# Configure hypothesis for property-based testing
settings.register_profile("ci", max_examples=100, deadline=None)
settings.register_profile("dev", max_examples=20, deadline=None)
settings.load_profile("dev")

XML_DIR = Path(__file__).parent / "xml"

NODE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<node xmlns:doc="http://www.freedesktop.org/dbus/1.0/doc.dtd">
  <interface name="org.example.Node">
    <signal name="RemoveNode">
      <arg name="name" type="s"/>
      <arg name="path" type="o"/>
    </signal>
  </interface>
</node>
"""

OTHER_NODE_XML = """<node>
  <interface name="org.example.OtherNode">
    <signal name="RemoveNode">
      <arg name="id" type="u"/>
    </signal>
  </interface>
</node>
"""

NOTIFY_XML = """<node>
  <interface name="org.freedesktop.Notifications">
    <method name="Notify">
      <arg type="s" name="app_name" direction="in"/>
      <arg type="u" name="id" direction="out"/>
    </method>
  </interface>
</node>
"""

PROPERTY_XML = """<node>
  <interface name="org.freedesktop.GeoClue2.Manager">
    <property type="b" name="InUse" access="read"/>
  </interface>
</node>
"""


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch):
    """Keep LOCKSTEP_* variables from the host out of every test."""
    monkeypatch.delenv("LOCKSTEP_XML_PATH", raising=False)
    monkeypatch.delenv("LOCKSTEP_MATCH_STRATEGY", raising=False)
    reload_config()
    yield
    reload_config()


@pytest.fixture
def config() -> LockstepConfig:
    """Configuration that ignores any .env file."""
    return LockstepConfig(_env_file=None)


@pytest.fixture
def xml_dir() -> Path:
    """Directory of sample introspection documents."""
    return XML_DIR


@pytest.fixture
def node_document() -> InterfaceDocument:
    return parse_document(NODE_XML, "node.xml")


@pytest.fixture
def other_node_document() -> InterfaceDocument:
    return parse_document(OTHER_NODE_XML, "other_node.xml")


@pytest.fixture
def notify_document() -> InterfaceDocument:
    return parse_document(NOTIFY_XML, "notify.xml")


@pytest.fixture
def property_document() -> InterfaceDocument:
    return parse_document(PROPERTY_XML, "geoclue.xml")
