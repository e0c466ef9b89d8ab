"""Load display scenarios (desired state, capabilities, current state) from YAML."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from ..utils.exceptions import ScenarioError
from .capabilities import WindowCapability
from .models import CurrentDisplayState, DesiredDisplayState

logger = logging.getLogger(__name__)


@dataclass
class DisplayScenario:
    """Everything needed to run one display update outside a live session."""

    desired: DesiredDisplayState
    capabilities: Optional[WindowCapability] = None
    current: CurrentDisplayState = field(default_factory=CurrentDisplayState)
    base_dir: Optional[Path] = None


def load_scenario(path: Union[str, Path]) -> DisplayScenario:
    """Load a scenario file.

    The file holds a ``state`` mapping with DesiredDisplayState fields and
    optional ``capabilities`` (``lines``, ``text_fields``, ``image_fields``)
    and ``current`` mappings.

    Args:
        path: Scenario YAML file

    Returns:
        DisplayScenario with relative artwork paths resolved against the file

    Raises:
        ScenarioError: If the file cannot be read or does not describe a scenario
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ScenarioError(f"Cannot read scenario: {e}", str(path)) from e
    except yaml.YAMLError as e:
        raise ScenarioError(f"Invalid YAML: {e}", str(path)) from e

    if not isinstance(data, dict) or not isinstance(data.get("state"), dict):
        raise ScenarioError("Scenario must contain a 'state' mapping", str(path))

    try:
        desired = DesiredDisplayState.model_validate(data["state"])
        current = CurrentDisplayState.model_validate(data.get("current") or {})
    except ValidationError as e:
        raise ScenarioError(f"Invalid display state: {e}", str(path)) from e

    capabilities = None
    capability_data = data.get("capabilities")
    if capability_data is not None:
        if not isinstance(capability_data, dict):
            raise ScenarioError("'capabilities' must be a mapping", str(path))
        try:
            capabilities = WindowCapability.from_dict(capability_data)
        except (ValueError, TypeError) as e:
            raise ScenarioError(f"Invalid capabilities: {e}", str(path)) from e

    logger.debug(f"Loaded scenario {path} with capabilities {capabilities!r}")
    return DisplayScenario(
        desired=desired, capabilities=capabilities, current=current, base_dir=path.parent
    )
