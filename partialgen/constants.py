"""Annotation names, runtime namespaces and section layout shared by the pipeline."""

from __future__ import annotations

# Annotation short names (namespace and ``Attribute`` suffix stripped).
ANNOTATION_OBSERVABLE = "Observable"
ANNOTATION_ISOLATED = "Isolated"
ANNOTATION_MODEL_ALIAS = "ModelAlias"
ANNOTATION_ASPECT = "AspectOriented"
ANNOTATION_THEME = "Theme"
ANNOTATION_HOVER = "Hover"
ANNOTATION_CLICK = "Click"
ANNOTATION_MONO = "MonoBehaviour"
ANNOTATION_MODEL_CONFIG = "ModelConfig"
ANNOTATION_CONTEXT_CONFIG = "DataContextConfig"
ANNOTATION_CONSTRUCTOR = "Constructor"

THEME_CAPABILITY = "IThemeAttribute"

# Runtime namespaces referenced by generated code. All references are emitted
# fully qualified so that generated units never depend on user usings.
NAMESPACE_RUNTIME = "global::MinimalisticWPF."
NAMESPACE_AOP = "global::MinimalisticWPF.AopInterfaces."
NAMESPACE_THEME = "global::MinimalisticWPF.Theme."
NAMESPACE_TRANSITION = "global::MinimalisticWPF.TransitionSystem."
NAMESPACE_MODEL = "global::System.ComponentModel."
NAMESPACE_WINDOWS = "global::System.Windows."

AOP_INTERFACE_NAMESPACE = "MinimalisticWPF.AopInterfaces"
PROXY_BASE_INTERFACE = "global::MinimalisticWPF.IProxy"
DYNAMIC_THEME = f"{NAMESPACE_RUNTIME}DynamicTheme"

# Extension-method namespaces pulled in by the imports section.
USING_TRANSITION = "global::MinimalisticWPF.TransitionSystem"
USING_PROXY = "global::MinimalisticWPF.AspectOriented"

DEFAULT_VISUAL_ROOT = "global::System.Windows.UIElement"
DEFAULT_MONO_SPAN = 17.0
GLOBAL_NAMESPACE_TOKEN = "Global"

# Toolkit types known to derive from the root visual type. The base-chain walk
# stops early when it meets one of these, since toolkit assemblies are rarely
# part of the declaration snapshot.
KNOWN_VISUAL_TYPES: tuple[str, ...] = (
    "UIElement",
    "FrameworkElement",
    "Control",
    "ContentControl",
    "UserControl",
    "Window",
    "Page",
    "Panel",
    "Grid",
    "StackPanel",
    "Canvas",
    "Border",
    "Decorator",
    "Shape",
    "TextBlock",
    "Image",
    "ItemsControl",
    "ButtonBase",
    "Button",
)

# Value types of common toolkit properties, used for view hover/theme targets
# declared on inherited members the snapshot does not describe.
KNOWN_PROPERTY_TYPES: dict[str, str] = {
    "Background": "global::System.Windows.Media.Brush",
    "Foreground": "global::System.Windows.Media.Brush",
    "BorderBrush": "global::System.Windows.Media.Brush",
    "Fill": "global::System.Windows.Media.Brush",
    "Stroke": "global::System.Windows.Media.Brush",
    "Opacity": "double",
    "Width": "double",
    "Height": "double",
    "FontSize": "double",
    "BorderThickness": "global::System.Windows.Thickness",
    "Margin": "global::System.Windows.Thickness",
    "Padding": "global::System.Windows.Thickness",
    "CornerRadius": "global::System.Windows.CornerRadius",
}

DEFAULT_THEME_VARIANTS: tuple[str, ...] = ("Dark", "Light")
DEFAULT_THEME_NAMESPACE = "MinimalisticWPF.Theme"

# Body sections of a generated class, in emission order.
SECTION_ORDER: tuple[str, ...] = (
    "constructors",
    "notification",
    "theme_lifecycle",
    "proxy",
    "members",
    "companions",
    "behaviours",
    "model_reader",
)


__all__ = [
    "ANNOTATION_ASPECT",
    "ANNOTATION_CLICK",
    "ANNOTATION_CONSTRUCTOR",
    "ANNOTATION_CONTEXT_CONFIG",
    "ANNOTATION_HOVER",
    "ANNOTATION_ISOLATED",
    "ANNOTATION_MODEL_ALIAS",
    "ANNOTATION_MODEL_CONFIG",
    "ANNOTATION_MONO",
    "ANNOTATION_OBSERVABLE",
    "ANNOTATION_THEME",
    "AOP_INTERFACE_NAMESPACE",
    "DEFAULT_MONO_SPAN",
    "DEFAULT_THEME_NAMESPACE",
    "DEFAULT_THEME_VARIANTS",
    "DEFAULT_VISUAL_ROOT",
    "DYNAMIC_THEME",
    "GLOBAL_NAMESPACE_TOKEN",
    "KNOWN_PROPERTY_TYPES",
    "KNOWN_VISUAL_TYPES",
    "NAMESPACE_AOP",
    "NAMESPACE_MODEL",
    "NAMESPACE_RUNTIME",
    "NAMESPACE_THEME",
    "NAMESPACE_TRANSITION",
    "NAMESPACE_WINDOWS",
    "PROXY_BASE_INTERFACE",
    "SECTION_ORDER",
    "THEME_CAPABILITY",
    "USING_PROXY",
    "USING_TRANSITION",
]
