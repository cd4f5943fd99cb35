import pytest
from pydantic import ValidationError

from crm_app.schemas.ai import TicketClassificationRequest
from crm_app.schemas.crm import DealCreate
from crm_app.schemas.customization import Modifications, WizardGenerateRequest


class TestModifications:
    def test_aliases_round_to_camel_case(self):
        mods = Modifications.model_validate(
            {"fontSize": "18px", "borderRadius": 8, "layout": {"flexDirection": "row"}}
        )
        assert mods.font_size == "18px"
        assert mods.border_radius == "8px"
        assert mods.to_payload() == {
            "fontSize": "18px",
            "borderRadius": "8px",
            "layout": {"flexDirection": "row"},
        }

    def test_legacy_length_mapping_collapses(self):
        mods = Modifications.model_validate({"fontSize": {"base": "14px", "lg": "16px"}})
        assert mods.font_size == "16px"

    def test_extra_category_keys_are_kept(self):
        mods = Modifications.model_validate({"colors": {"background": "#000", "glow": "#0ff"}})
        assert mods.colors.custom_properties() == {"glow": "#0ff"}
        assert mods.to_payload()["colors"] == {"background": "#000", "glow": "#0ff"}

    def test_lenient_drops_only_invalid_categories(self):
        mods = Modifications.lenient(
            {"theme": " NEON ", "colors": ["red"], "spacing": {"padding": 12}}
        )
        assert mods.theme == "neon"
        assert mods.colors is None
        assert mods.spacing.padding == "12px"

    def test_numeric_colour_keeps_its_category(self):
        mods = Modifications.lenient({"colors": {"background": 0, "text": "#fff"}})
        assert mods.colors.background == "0"
        assert mods.colors.text == "#fff"

    def test_non_scalar_colour_is_dropped_not_the_category(self):
        mods = Modifications.lenient(
            {"colors": {"background": ["red"], "border": True, "text": "#fff"}}
        )
        assert mods.colors.background is None
        assert mods.colors.border is None
        assert mods.colors.text == "#fff"

    def test_layout_keywords_are_coerced(self):
        mods = Modifications.model_validate({"layout": {"display": 1, "flexDirection": "row"}})
        assert mods.layout.display == "1"
        assert mods.layout.flex_direction == "row"

    def test_lenient_with_non_mapping(self):
        assert Modifications.lenient("blue").to_payload() == {}
        assert Modifications.lenient(None).to_payload() == {}

    def test_strict_validation_rejects_bad_category(self):
        with pytest.raises(ValidationError):
            Modifications.model_validate({"colors": "green"})


class TestRequestSchemas:
    def test_wizard_request_requires_text(self):
        with pytest.raises(ValidationError):
            WizardGenerateRequest(user_request="")

    def test_wizard_request_length_cap(self):
        with pytest.raises(ValidationError):
            WizardGenerateRequest(user_request="x" * 2001)

    def test_ticket_classification_needs_something_to_classify(self):
        with pytest.raises(ValidationError):
            TicketClassificationRequest()
        assert TicketClassificationRequest(description="Refund please").title is None

    def test_deal_probability_bounds(self):
        with pytest.raises(ValidationError):
            DealCreate(title="Big", value=10, probability=101)
        with pytest.raises(ValidationError):
            DealCreate(title="Big", value=-1)
