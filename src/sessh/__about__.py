"""Metadata for sessh package."""

from __future__ import annotations

__title__ = "sessh"
__package_name__ = "sessh"
__version__ = "0.1.0"
__description__ = "Typed Python client for sessh persistent SSH/tmux sessions"
__email__ = "maintainers@sessh.dev"
__author__ = "sessh contributors"
__github__ = "https://github.com/sessh/sessh-python"
__docs__ = "https://github.com/sessh/sessh-python#readme"
__tracker__ = "https://github.com/sessh/sessh-python/issues"
__changes__ = "https://github.com/sessh/sessh-python/blob/main/CHANGES"
__pypi__ = "https://pypi.org/project/sessh/"
__license__ = "MIT"
__copyright__ = "Copyright 2025- sessh contributors"
