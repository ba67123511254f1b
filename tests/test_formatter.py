"""Tests for the C# formatter."""

from __future__ import annotations

import textwrap

from partialgen.synthesis import CSharpFormatter, CompilationUnit
from partialgen.synthesis.ir import (
    Accessor,
    BindableProperty,
    Block,
    Constructor,
    Field,
    Interface,
    Method,
    MethodSignature,
    Property,
    PropertySignature,
    TypeHeader,
)


def _expected(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


def test_render_places_sections_in_fixed_order() -> None:
    unit = CompilationUnit(
        hint_name="Demo_Card.g.cs",
        namespace="Demo",
        imports=("global::MinimalisticWPF.TransitionSystem",),
        header=TypeHeader("Card", ("public", "partial"), ("global::System.ComponentModel.INotifyPropertyChanged",)),
    )
    unit.section("members").add(
        Field("_count", "int", initializer="1"),
        Method("OnCountChanging", modifiers="partial"),
        Method("OnCountChanged", modifiers="partial"),
        Property("Count", "int", getter=Accessor(expression="_count"), setter=None),
    )
    unit.section("constructors").add(Constructor("Card", body=["Init();"]))

    text = CSharpFormatter().render(unit)

    assert text == _expected(
        """
        // <auto-generated/>
        #nullable enable

        using global::MinimalisticWPF.TransitionSystem;

        namespace Demo
        {
            public partial class Card : global::System.ComponentModel.INotifyPropertyChanged
            {
                public Card()
                {
                    Init();
                }

                private int _count = 1;

                partial void OnCountChanging();
                partial void OnCountChanged();

                public int Count
                {
                    get => _count;
                }
            }
        }
        """
    )


def test_global_namespace_has_no_namespace_block() -> None:
    unit = CompilationUnit(hint_name="Global_Card.g.cs", header=TypeHeader("Card", ("partial",)))
    unit.section("members").add(Property("Name", "string"))

    text = CSharpFormatter().render(unit)

    assert "namespace" not in text
    assert text.endswith("partial class Card\n{\n    public string Name { get; set; }\n}\n")


def test_statement_blocks_nest_and_keep_terminators() -> None:
    body = [
        Block("if (ready)", ["Go();", Block("foreach (var x in xs)", ["Use(x);"])]),
        Block("Board.Start += () =>", ["IsBusy = true;"], ";"),
    ]

    lines = CSharpFormatter().member(Method("Run", body=body), 0)

    assert lines == [
        "public void Run()",
        "{",
        "    if (ready)",
        "    {",
        "        Go();",
        "        foreach (var x in xs)",
        "        {",
        "            Use(x);",
        "        }",
        "    }",
        "    Board.Start += () =>",
        "    {",
        "        IsBusy = true;",
        "    };",
        "}",
    ]


def test_auto_property_with_fluent_initializer_chain() -> None:
    prop = Property(
        "NoHoveredTransition",
        "Board",
        initializer="Transition.Create()",
        initializer_chain=(".SetProperty(x => x.A, 1)", ".SetProperty(x => x.B, 2)"),
    )

    lines = CSharpFormatter().member(prop, 0)

    assert lines == [
        "public Board NoHoveredTransition { get; set; } = Transition.Create()",
        "    .SetProperty(x => x.A, 1)",
        "    .SetProperty(x => x.B, 2);",
    ]


def test_property_attributes_and_private_setter() -> None:
    prop = Property(
        "IsPressed",
        "bool",
        getter=Accessor(),
        setter=Accessor(modifiers="private"),
        attributes=("global::MinimalisticWPF.Theme.Dark(\"#000\")",),
    )

    lines = CSharpFormatter().member(prop, 1)

    assert lines == [
        '    [global::MinimalisticWPF.Theme.Dark("#000")]',
        "    public bool IsPressed { get; private set; }",
    ]


def test_bindable_property_registration() -> None:
    prop = BindableProperty("Glow", "Brush", "global::Demo.Tile", callback="_innerRunGlowChanged")

    lines = CSharpFormatter().member(prop, 0)

    assert lines == [
        "public Brush Glow",
        "{",
        "    get => (Brush)GetValue(GlowProperty);",
        "    set => SetValue(GlowProperty, value);",
        "}",
        "public static readonly global::System.Windows.DependencyProperty GlowProperty =",
        "    global::System.Windows.DependencyProperty.Register(",
        "        nameof(Glow),",
        "        typeof(Brush),",
        "        typeof(global::Demo.Tile),",
        "        new global::System.Windows.PropertyMetadata(default(Brush), _innerRunGlowChanged));",
    ]


def test_interface_unit_rendering() -> None:
    unit = CompilationUnit(
        hint_name="IAopCardInDemo.g.cs",
        namespace="MinimalisticWPF.AopInterfaces",
        interface=Interface(
            "IAopCardInDemo",
            bases=("global::MinimalisticWPF.IProxy",),
            members=[
                PropertySignature("Title", "string"),
                PropertySignature("Id", "int", has_setter=False),
                MethodSignature("Save", "void", (("int", "id"),)),
            ],
        ),
    )

    text = CSharpFormatter().render(unit)

    assert text == _expected(
        """
        // <auto-generated/>
        #nullable enable

        namespace MinimalisticWPF.AopInterfaces
        {
            public interface IAopCardInDemo : global::MinimalisticWPF.IProxy
            {
                string Title { get; set; }
                int Id { get; }
                void Save(int id);
            }
        }
        """
    )
