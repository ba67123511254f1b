"""Click and periodic-update behaviours, plus pointer wiring on views."""

from __future__ import annotations

from typing import Dict, List

from .context import UnitContext
from .ir import Accessor, Block, ClassMember, Event, Method, Property, Statement

_MOUSE_ARGS = "global::System.Windows.Input.MouseEventArgs"
_BUTTON_ARGS = "global::System.Windows.Input.MouseButtonEventArgs"
_TASK = "global::System.Threading.Tasks.Task"

# Overridden pointer handlers, in emission order.
_POINTER_HANDLERS = (
    ("OnMouseEnter", _MOUSE_ARGS),
    ("OnMouseLeave", _MOUSE_ARGS),
    ("OnMouseLeftButtonDown", _BUTTON_ARGS),
    ("OnMouseLeftButtonUp", _BUTTON_ARGS),
)


def click_members() -> List[ClassMember]:
    return [
        Event("Click", "global::System.EventHandler?"),
        Property("IsPressed", "bool", getter=Accessor(), setter=Accessor(modifiers="private")),
        Method(
            "RaiseClick",
            body=["OnClick();", "Click?.Invoke(this, global::System.EventArgs.Empty);"],
        ),
        Method("OnClick", modifiers="partial"),
    ]


def periodic_members(context: UnitContext) -> List[ClassMember]:
    span = f"{context.descriptor.update_interval:g}"
    loop: List[Statement] = [
        "Start();",
        Block(
            "while (CanMonoBehaviour)",
            [
                "Update();",
                "LateUpdate();",
                f"await {_TASK}.Delay(global::System.TimeSpan.FromMilliseconds({span}));",
            ],
        ),
        "ExistMonoBehaviour();",
    ]
    return [
        Property("CanMonoBehaviour", "bool", initializer="true"),
        Method("_innerMonoLoop", return_type=_TASK, modifiers="private async", body=loop),
        Method("Awake", modifiers="partial"),
        Method("Start", modifiers="partial"),
        Method("Update", modifiers="partial"),
        Method("LateUpdate", modifiers="partial"),
        Method("ExistMonoBehaviour", modifiers="partial"),
    ]


def pointer_members(context: UnitContext) -> List[ClassMember]:
    """Pointer handler overrides driving hover state and clicks on a view."""
    descriptor = context.descriptor
    if not descriptor.flags.is_view_bound:
        return []
    handlers: Dict[str, List[Statement]] = {name: [] for name, _ in _POINTER_HANDLERS}

    if context.has_hover:
        handlers["OnMouseEnter"].append("IsHovered = true;")
        handlers["OnMouseLeave"].append("IsHovered = false;")

    model = context.linked_model
    if model is not None and any(member.can_hover for member in model.members):
        handlers["OnMouseEnter"].append(
            Block(f"if (DataContext is {model.qualified_name} viewModel)", ["viewModel.IsHovered = true;"])
        )
        handlers["OnMouseLeave"].append(
            Block(f"if (DataContext is {model.qualified_name} viewModel)", ["viewModel.IsHovered = false;"])
        )

    if descriptor.flags.is_clickable:
        handlers["OnMouseLeave"].append("IsPressed = false;")
        handlers["OnMouseLeftButtonDown"].append("IsPressed = true;")
        handlers["OnMouseLeftButtonUp"].append(Block("if (IsPressed)", ["IsPressed = false;", "RaiseClick();"]))

    members: List[ClassMember] = []
    for name, argument_type in _POINTER_HANDLERS:
        statements = handlers[name]
        if not statements:
            continue
        members.append(
            Method(
                name,
                modifiers="protected override",
                parameters=((argument_type, "e"),),
                body=[f"base.{name}(e);", *statements],
            )
        )
    return members


__all__ = ["click_members", "periodic_members", "pointer_members"]
