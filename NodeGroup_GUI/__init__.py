"""NodeGroup-GUI: node group management service and client cache."""

from NodeGroup_GUI.version import APP_VERSION

__version__ = APP_VERSION
