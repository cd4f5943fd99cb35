from crm_app.services.style_compiler import (
    THEME_BUNDLES,
    compile_rule,
    compile_stylesheet,
    component_from_selector,
    component_selector,
    declarations,
)


class TestComponentSelector:
    """Selectors target the ``data-component`` marker attribute."""

    def test_plain_name(self):
        assert component_selector("deal-card") == '[data-component="deal-card"]'

    def test_quotes_and_backslashes_are_escaped(self):
        selector = component_selector('odd"name\\x')
        assert selector == '[data-component="odd\\"name\\\\x"]'

    def test_selector_identifies_original_name(self):
        """Escaped names, including control characters, map back exactly."""
        for name in ("deal-card", 'a"b', "back\\slash", "new\nline", "tab\there"):
            assert component_from_selector(component_selector(name)) == name

    def test_foreign_selector_is_rejected(self):
        assert component_from_selector(".deal-card") is None
        assert component_from_selector('[data-role="deal-card"]') is None


class TestDeclarations:
    def test_theme_bundle_comes_first(self):
        result = declarations(
            {"theme": "dark", "colors": {"background": "#10b981"}}
        )
        assert result[:3] == list(THEME_BUNDLES["dark"])
        assert result[3] == ("background-color", "#10b981")

    def test_field_order_is_fixed(self):
        result = declarations(
            {
                "borderRadius": "8px",
                "fontSize": "18px",
                "layout": {"flexDirection": "column"},
                "spacing": {"gap": 4},
                "colors": {"text": "#fff"},
            }
        )
        assert [name for name, _ in result] == [
            "color",
            "gap",
            "flex-direction",
            "font-size",
            "border-radius",
        ]
        assert ("gap", "4px") in result

    def test_extra_keys_become_custom_properties(self):
        result = declarations({"colors": {"glow": "#0ff", "accent": "red"}})
        assert result == [("--accent", "red"), ("--glow", "#0ff")]

    def test_unknown_theme_expands_to_nothing(self):
        assert declarations({"theme": "sparkly"}) == []

    def test_injection_characters_are_stripped(self):
        result = declarations(
            {"colors": {"background": "red; } body { display: none"}}
        )
        value = result[0][1]
        for char in ";{}":
            assert char not in value

    def test_important_suffix_is_not_doubled(self):
        result = declarations({"fontSize": "18px !important"})
        assert result == [("font-size", "18px")]

    def test_invalid_category_does_not_drop_the_rest(self):
        result = declarations({"theme": "bold", "colors": "green"})
        assert result == list(THEME_BUNDLES["bold"])


class TestCompileRule:
    def test_minimal_theme_block(self):
        css = compile_rule("metric-card", {"theme": "minimal"})
        assert css == (
            '[data-component="metric-card"] {\n'
            "  box-shadow: none !important;\n"
            "  border: 1px solid #e5e5e5 !important;\n"
            "}\n"
        )

    def test_empty_modifications_still_produce_a_block(self):
        assert compile_rule("sidebar", {}) == '[data-component="sidebar"] {\n}\n'

    def test_every_declaration_is_important(self):
        css = compile_rule(
            "deal-card",
            {"theme": "neon", "colors": {"background": "#10b981", "glow": "#0ff"}},
        )
        body = [line for line in css.splitlines() if line.startswith("  ")]
        assert body
        assert all(line.endswith(" !important;") for line in body)
        assert "  --glow: #0ff !important;" in body


class TestCompileStylesheet:
    def test_empty_input(self):
        assert compile_stylesheet({}) == ""

    def test_components_sorted_and_output_stable(self):
        styles = {
            "sidebar": {"theme": "dark"},
            "deal-card": {"fontSize": "18px"},
        }
        first = compile_stylesheet(styles)
        second = compile_stylesheet(dict(reversed(list(styles.items()))))
        assert first == second
        assert first.index('"deal-card"') < first.index('"sidebar"')
