"""
CacheProbe - Action references.

Targets handed to the action and fragment assertions come in two shapes:
a bare action name (one controller under test) or a qualified reference
naming controller, action and an optional suffix (several controllers
under test). Both normalize to :class:`QualifiedAction` before a cache
key is derived.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Union

_RESERVED = ("controller", "action", "action_suffix")


@dataclass(frozen=True)
class ActionName:
    """Bare action name, resolved against the current controller."""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class QualifiedAction:
    """
    Structured action reference.

    Attributes:
        action: Action name (defaults to the current action when omitted)
        controller: Controller name (defaults to the current controller)
        action_suffix: Distinguishes several fragments cached by one action
        params: Extra route parameters, e.g. ``(("id", 1),)``
    """
    action: Optional[str] = None
    controller: Optional[str] = None
    action_suffix: Optional[str] = None
    params: Tuple[Tuple[str, Any], ...] = ()

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "QualifiedAction":
        extras = sorted((k, v) for k, v in options.items() if k not in _RESERVED)
        action = options.get("action")
        controller = options.get("controller")
        return cls(
            action=str(action) if action is not None else None,
            controller=str(controller) if controller is not None else None,
            action_suffix=options.get("action_suffix"),
            params=tuple(extras),
        )

    def to_options(self) -> Dict[str, Any]:
        """Options suitable for URL generation."""
        options: Dict[str, Any] = dict(self.params)
        if self.controller is not None:
            options["controller"] = self.controller
        if self.action is not None:
            options["action"] = self.action
        if self.action_suffix is not None:
            options["action_suffix"] = self.action_suffix
        return options


ActionRef = Union[ActionName, QualifiedAction]
ActionTarget = Union[str, ActionName, QualifiedAction, Mapping[str, Any]]


def normalize_action(target: ActionTarget) -> QualifiedAction:
    """
    Normalize any action target to its qualified form.

    A bare name ``"show"`` is equivalent to ``{"action": "show"}``.
    """
    if isinstance(target, QualifiedAction):
        return target
    if isinstance(target, ActionName):
        return QualifiedAction(action=target.name)
    if isinstance(target, str):
        return QualifiedAction(action=target)
    if isinstance(target, Mapping):
        return QualifiedAction.from_mapping(target)
    raise TypeError(f"Cannot interpret {target!r} as an action reference")


def target_controller(target: Any) -> Optional[str]:
    """Controller named by a target, or None when the target names none."""
    if isinstance(target, QualifiedAction):
        return target.controller
    if isinstance(target, Mapping):
        controller = target.get("controller")
        return str(controller) if controller is not None else None
    return None
