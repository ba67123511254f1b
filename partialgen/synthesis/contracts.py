"""Change-notification and theme-lifecycle contract members."""

from __future__ import annotations

from typing import List

from ..constants import NAMESPACE_MODEL
from .context import SYSTEM_TYPE, UnitContext
from .ir import Accessor, ClassMember, Event, Method, Property

_THEME_PARAMETERS = ((f"{SYSTEM_TYPE}?", "oldTheme"), (SYSTEM_TYPE, "newTheme"))


def notification_members() -> List[ClassMember]:
    return [
        Event("PropertyChanged", f"{NAMESPACE_MODEL}PropertyChangedEventHandler?"),
        Method(
            "OnPropertyChanged",
            parameters=(("string", "propertyName"),),
            body=[
                f"PropertyChanged?.Invoke(this, new {NAMESPACE_MODEL}PropertyChangedEventArgs(propertyName));"
            ],
        ),
    ]


def theme_lifecycle_members(context: UnitContext) -> List[ClassMember]:
    changed_body = ["OnThemeChanged(oldTheme, newTheme);"]
    if context.has_hover:
        changed_body.append("UpdateHoverState();")
    return [
        Property("IsThemeChanging", "bool", getter=Accessor(), setter=Accessor(), initializer="false"),
        Property(
            "CurrentTheme",
            f"{SYSTEM_TYPE}?",
            getter=Accessor(),
            setter=Accessor(),
            initializer="null",
        ),
        Method(
            "RunThemeChanging",
            parameters=_THEME_PARAMETERS,
            body=["OnThemeChanging(oldTheme, newTheme);"],
        ),
        Method("RunThemeChanged", parameters=_THEME_PARAMETERS, body=changed_body),
        Method("OnThemeChanging", modifiers="partial", parameters=_THEME_PARAMETERS),
        Method("OnThemeChanged", modifiers="partial", parameters=_THEME_PARAMETERS),
    ]


__all__ = ["notification_members", "theme_lifecycle_members"]
