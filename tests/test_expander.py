"""Tests for hover x theme companion expansion."""

from __future__ import annotations

import pytest

from partialgen.descriptors import MemberDescriptor, ThemeVariantTag
from partialgen.diagnostics import ExpansionError
from partialgen.expander import CompanionKind, StorageScope, expand, expand_member


def _tag(name: str) -> ThemeVariantTag:
    return ThemeVariantTag(name=name, type_reference=f"global::MinimalisticWPF.Theme.{name}")


def _member(name: str = "Background", *, hover: bool = False, themes: tuple[str, ...] = (), isolated: bool = False) -> MemberDescriptor:
    return MemberDescriptor(
        storage_name=f"_{name.lower()}",
        public_name=name,
        declared_type="Brush",
        can_hover=hover,
        can_isolated_storage=isolated,
        themes=tuple(_tag(item) for item in themes),
    )


def test_panel_background_yields_four_companions_in_tag_order() -> None:
    companions = expand_member(_member(hover=True, themes=("Dark", "Light")))

    assert [item.name for item in companions] == [
        "DarkHoveredBackground",
        "DarkNoHoveredBackground",
        "LightHoveredBackground",
        "LightNoHoveredBackground",
    ]
    assert [item.kind for item in companions] == [
        CompanionKind.HOVERED,
        CompanionKind.NO_HOVERED,
        CompanionKind.HOVERED,
        CompanionKind.NO_HOVERED,
    ]
    assert all(item.storage is StorageScope.SHARED for item in companions)
    assert [item.persists for item in companions] == [False, True, False, True]


@pytest.mark.parametrize("count", [1, 2, 3, 5])
def test_hover_with_k_themes_yields_2k_companions(count: int) -> None:
    names = tuple(f"Variant{index}" for index in range(count))

    companions = expand_member(_member(hover=True, themes=names))

    assert len(companions) == 2 * count
    assert [item.theme.name for item in companions if item.theme] == [name for name in names for _ in (0, 1)]


def test_hover_without_themes_yields_instance_pair() -> None:
    companions = expand_member(_member("Opacity", hover=True))

    assert [item.name for item in companions] == ["HoveredOpacity", "NoHoveredOpacity"]
    assert all(item.storage is StorageScope.INSTANCE for item in companions)
    assert not any(item.persists for item in companions)


def test_theme_only_member_yields_one_companion_per_tag() -> None:
    companions = expand_member(_member(themes=("Dark", "Light"), isolated=True))

    assert [item.name for item in companions] == ["DarkBackground", "LightBackground"]
    assert all(item.kind is CompanionKind.THEMED for item in companions)
    assert all(item.storage is StorageScope.ISOLATED for item in companions)
    assert all(item.persists for item in companions)


def test_plain_member_yields_nothing() -> None:
    assert expand_member(_member()) == []


def test_expand_keeps_member_order() -> None:
    members = [_member("Foreground", themes=("Dark",)), _member("Opacity", hover=True)]

    assert [item.name for item in expand(members)] == ["DarkForeground", "HoveredOpacity", "NoHoveredOpacity"]


def test_empty_variant_name_halts_expansion() -> None:
    member = MemberDescriptor(
        storage_name="_background",
        public_name="Background",
        declared_type="Brush",
        can_hover=True,
        themes=(ThemeVariantTag(name="", type_reference="global::Themes.(Broken)"),),
    )

    with pytest.raises(ExpansionError) as excinfo:
        expand_member(member, declaration="Demo.Panel")

    assert excinfo.value.declaration == "Demo.Panel"
    assert excinfo.value.member == "Background"


def test_duplicate_variant_is_rejected() -> None:
    with pytest.raises(ExpansionError, match="more than once"):
        expand_member(_member(hover=True, themes=("Dark", "Dark")))
