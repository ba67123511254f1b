"""Tests for declaration classification."""

from __future__ import annotations

import pytest

from partialgen.classifier import Classifier, classify
from partialgen.config import AnalysisConfig
from partialgen.descriptors import LINK_MODEL_READER, LINK_VIEW_MODEL, ClassificationFlags
from partialgen.diagnostics import ClassificationError, Diagnostic
from tests._fixtures.snapshot_builder import (
    SnapshotBuilder,
    annotation,
    method,
    observable_field,
    prop,
    theme,
)


def test_card_is_only_an_observable_model(builder: SnapshotBuilder) -> None:
    card = builder.add("Card", members=[observable_field("_title", "string")])

    descriptor = classify(card, builder.query())

    assert descriptor.flags == ClassificationFlags(is_observable_model=True)
    assert [member.public_name for member in descriptor.members] == ["Title"]
    assert descriptor.model_link is None
    assert descriptor.display_name == "Demo.Card"


def test_member_theme_makes_declaration_theme_aware(builder: SnapshotBuilder) -> None:
    panel = builder.add(
        "Panel",
        annotations=[annotation("AspectOriented")],
        members=[observable_field("_background", "Brush", theme("Dark"), theme("Light"), canHover=True)],
    )

    flags = classify(panel, builder.query()).flags

    assert flags.is_theme_aware
    assert flags.is_observable_model
    assert flags.is_proxy_target
    assert not flags.is_view_bound


def test_known_toolkit_base_is_view_bound(builder: SnapshotBuilder) -> None:
    view = builder.add("CardView", base_type="UserControl")

    descriptor = classify(view, builder.query())

    assert descriptor.flags.is_view_bound
    assert descriptor.base_chain == ("UserControl",)


def test_base_chain_through_snapshot_reaches_root(builder: SnapshotBuilder) -> None:
    builder.add("BaseView", base_type="global::System.Windows.UIElement", members=[prop("Glow", "Color")])
    fancy = builder.add("Fancy", base_type="BaseView", annotations=[annotation("Hover", ["Glow"])])

    descriptor = classify(fancy, builder.query())

    assert descriptor.flags.is_view_bound
    assert descriptor.base_chain == ("BaseView", "global::System.Windows.UIElement")
    assert [(item.public_name, item.declared_type) for item in descriptor.view_members] == [("Glow", "Color")]


def test_base_walk_prefers_base_in_own_namespace(builder: SnapshotBuilder) -> None:
    builder.add("BaseView", namespace="Other", modifiers=(), members=[prop("Glow", "OtherColor")])
    builder.add(
        "BaseView",
        modifiers=(),
        base_type="global::System.Windows.UIElement",
        members=[prop("Glow", "Color")],
    )
    fancy = builder.add("Fancy", base_type="BaseView", annotations=[annotation("Hover", "Glow")])

    descriptor = classify(fancy, builder.query())

    assert descriptor.flags.is_view_bound
    assert [(item.public_name, item.declared_type) for item in descriptor.view_members] == [("Glow", "Color")]


def test_cyclic_base_chain_warns_and_is_not_a_view(builder: SnapshotBuilder) -> None:
    first = builder.add("First", base_type="Second")
    builder.add("Second", base_type="First")
    diagnostics: list[Diagnostic] = []

    descriptor = classify(first, builder.query(), diagnostics=diagnostics)

    assert not descriptor.flags.is_view_bound
    assert [item.code for item in diagnostics] == ["base-chain-cycle"]
    assert not diagnostics[0].is_error


def test_base_chain_walk_is_bounded(builder: SnapshotBuilder) -> None:
    first = builder.add("Level1", base_type="Level2")
    builder.add("Level2", base_type="Level3")
    builder.add("Level3", base_type="Level4")
    builder.add("Level4", base_type="UserControl")
    diagnostics: list[Diagnostic] = []

    descriptor = classify(first, builder.query(), AnalysisConfig(max_base_depth=2), diagnostics)

    assert not descriptor.flags.is_view_bound
    assert [item.code for item in diagnostics] == ["base-chain-depth"]


def test_view_members_collect_theme_then_hover_targets(builder: SnapshotBuilder) -> None:
    view = builder.add(
        "Tile",
        base_type="UserControl",
        annotations=[
            annotation("Hover", "Opacity", "nameof(Background)"),
            annotation("Theme", "nameof(Background)", "typeof(Dark)", "#1e1e1e"),
            annotation("Theme", "Background", "Light", "#ffffff"),
        ],
    )

    descriptor = classify(view, builder.query())
    background, opacity = descriptor.view_members

    assert descriptor.flags.is_theme_aware
    assert background.public_name == "Background"
    assert background.declared_type == "global::System.Windows.Media.Brush"
    assert background.can_hover is True
    assert [tag.name for tag in background.themes] == ["Dark", "Light"]
    assert background.themes[0].attribute_text == 'global::MinimalisticWPF.Theme.Dark("#1e1e1e")'
    assert opacity.public_name == "Opacity"
    assert opacity.declared_type == "double"
    assert opacity.can_hover is True
    assert opacity.themes == ()


def test_view_member_of_unknown_type_is_rejected(builder: SnapshotBuilder) -> None:
    view = builder.add("Tile", base_type="UserControl", annotations=[annotation("Hover", "Sparkle")])

    with pytest.raises(ClassificationError):
        classify(view, builder.query())


def test_model_and_context_config_cannot_be_combined(builder: SnapshotBuilder) -> None:
    view = builder.add(
        "Tile",
        base_type="UserControl",
        annotations=[annotation("ModelConfig", "Dto"), annotation("DataContextConfig", "TileModel")],
    )

    with pytest.raises(ClassificationError):
        classify(view, builder.query())


def test_context_config_requires_a_view(builder: SnapshotBuilder) -> None:
    declaration = builder.add("Helper", annotations=[annotation("DataContextConfig", "TileModel")])

    with pytest.raises(ClassificationError):
        classify(declaration, builder.query())


def test_links_hooks_and_behaviours(builder: SnapshotBuilder) -> None:
    user = builder.add(
        "User",
        annotations=[
            annotation("ModelConfig", "nameof(UserDto)", validation="Demo.Data"),
            annotation("Click"),
            annotation("MonoBehaviour", 33),
        ],
        members=[
            observable_field("_name", "string"),
            method("Init", annotations=[annotation("Constructor")]),
            method("Load", ("int", "id"), annotations=[annotation("Constructor")]),
            method("Save", accessibility="public"),
            prop("Age", "int"),
        ],
    )
    view = builder.add(
        "UserView",
        base_type="UserControl",
        annotations=[annotation("DataContextConfig", "User", "Demo")],
    )
    query = builder.query()

    model = classify(user, query)
    context = classify(view, query)

    assert model.flags.has_model_mapping
    assert model.flags.is_clickable
    assert model.flags.is_periodic_update
    assert model.update_interval == 33.0
    assert model.model_link is not None
    assert model.model_link.kind == LINK_MODEL_READER
    assert model.model_link.target_name == "UserDto"
    assert model.model_link.namespace == "Demo.Data"
    assert [hook.name for hook in model.constructor_hooks] == ["Init", "Load"]
    assert model.constructor_hooks[1].signature_key == ("int",)
    assert [item.name for item in model.public_methods] == ["Save"]
    assert [item.name for item in model.public_properties] == ["Age"]

    assert context.flags.is_context_config
    assert context.view_link is not None
    assert context.view_link.kind == LINK_VIEW_MODEL
    assert context.view_link.target_name == "User"
    assert context.view_link.namespace == "Demo"


@pytest.mark.parametrize("span", [0, -5, "fast"])
def test_invalid_periodic_interval_is_rejected(builder: SnapshotBuilder, span: object) -> None:
    declaration = builder.add("Ticker", annotations=[annotation("MonoBehaviour", span)])

    with pytest.raises(ClassificationError):
        classify(declaration, builder.query())


def test_classifier_memoises_base_walks(builder: SnapshotBuilder) -> None:
    view = builder.add("Tile", base_type="UserControl")
    classifier = Classifier(builder.query())

    assert classifier.walk_bases(view) is classifier.walk_bases(view)
