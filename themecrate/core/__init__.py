"""Core functionality for themecrate."""

# Expose main classes and functions
# args
from themecrate.core.args import APP_DESC, APP_NAME, ArgsInit
# Catalog
from themecrate.core.catalog import CATALOG, Catalog, ThemeComponent
from themecrate.core.config import Configuration, get_config
# Detection
from themecrate.core.detectors import DETECTORS, DetectionContext, Detector, detect
from themecrate.core.identity import Identity, expand_path, resolve_home
# Materialization
from themecrate.core.materializer import (CreationReport, MaterializeError,
                                          materialize, render_manifest)
# Permissions
from themecrate.core.permissions import (IssueKind, PermissionIssue, audit,
                                         remediation_commands)
from themecrate.core.privilege import (ElevationError, detect_backend,
                                       relaunch_elevated)
# Interaction
from themecrate.core.session import Outcome, Session
from themecrate.core.state import (ApplicationState, InteractionMode, KeyPress,
                                   transition)
from themecrate.core.view import ScreenView, render_view

__all__ = [
    # Catalog
    "CATALOG",
    "Catalog",
    "ThemeComponent",
    # Detection
    "DETECTORS",
    "DetectionContext",
    "Detector",
    "detect",
    # Identity
    "Identity",
    "expand_path",
    "resolve_home",
    # Permissions
    "IssueKind",
    "PermissionIssue",
    "audit",
    "remediation_commands",
    # Materialization
    "CreationReport",
    "MaterializeError",
    "materialize",
    "render_manifest",
    # Privilege
    "ElevationError",
    "detect_backend",
    "relaunch_elevated",
    # Interaction
    "ApplicationState",
    "InteractionMode",
    "KeyPress",
    "transition",
    "Outcome",
    "Session",
    "ScreenView",
    "render_view",
    # Configuration
    "get_config",
    "Configuration",
    # args
    "ArgsInit",
    "APP_NAME",
    "APP_DESC"
]
