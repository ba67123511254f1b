"""Constructor overloads sharing one fixed prologue."""

from __future__ import annotations

from typing import Dict, List, Tuple

from ..constants import DYNAMIC_THEME
from ..descriptors import ConstructorHook
from .context import UnitContext
from .ir import Block, Constructor, Statement
from .proxy import proxy_interface_type


def prologue(context: UnitContext) -> List[Statement]:
    """Statements every overload runs before its hooks."""
    flags = context.descriptor.flags
    statements: List[Statement] = []
    if flags.is_proxy_target:
        statements.append(f"Proxy = this.CreateProxy<{proxy_interface_type(context.descriptor)}>();")
    if flags.is_theme_aware:
        statements.append(f"{DYNAMIC_THEME}.Awake(this);")
    if context.has_hover:
        for board in ("HoveredTransition", "NoHoveredTransition"):
            statements.append(Block(f"{board}.TransitionParams.Start += () =>", ["IsHoverChanging = true;"], ";"))
            statements.append(Block(f"{board}.TransitionParams.Completed += () =>", ["IsHoverChanging = false;"], ";"))
    return statements


def epilogue(context: UnitContext) -> List[Statement]:
    """Statements every overload runs after its hooks."""
    if not context.descriptor.flags.is_periodic_update:
        return []
    return ["Awake();", "_ = _innerMonoLoop();"]


def constructors(context: UnitContext) -> List[Constructor]:
    """One parameterless constructor plus one per distinct hook parameter signature.

    Nothing is emitted when there is neither a prologue, an epilogue nor a hook,
    so plain observable models keep their own constructors.
    """
    if not context.builds_constructors:
        return []
    descriptor = context.descriptor
    before = prologue(context)
    after = epilogue(context)
    if not before and not after and not descriptor.constructor_hooks:
        return []

    groups: Dict[Tuple[str, ...], List[ConstructorHook]] = {(): []}
    for hook in descriptor.constructor_hooks:
        groups.setdefault(hook.signature_key, []).append(hook)

    result: List[Constructor] = []
    for key, hooks in groups.items():
        parameters: Tuple[Tuple[str, str], ...] = ()
        if key:
            parameters = tuple((parameter.type, parameter.name) for parameter in hooks[0].parameters)
        arguments = ", ".join(name for _, name in parameters)
        calls = [f"{hook.name}({arguments});" for hook in hooks]
        result.append(
            Constructor(
                descriptor.name,
                modifiers=descriptor.accessibility,
                parameters=parameters,
                body=[*before, *calls, *after],
            )
        )
    return result


__all__ = ["constructors", "epilogue", "prologue"]
