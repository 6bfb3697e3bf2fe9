"""Unit tests for app.services.prompt_builder.build_prompt."""

import pytest

from app.models.schemas import (
    CustomItem,
    CustomRemodelRequest,
    InpaintingRemodelRequest,
    MaterialSelections,
    StyleRemodelRequest,
)
from app.services.prompt_builder import OBJECTIVE, build_prompt


BASE = {"base64_image_data": "AAA", "mime_type": "image/jpeg"}


class TestCommonSections:
    """Every prompt carries the objective and the room context."""

    @pytest.mark.parametrize("room_type", ["living room", "Kitchen & Dining", "baño"])
    def test_room_type_is_verbatim(self, room_type):
        prompt = build_prompt(StyleRemodelRequest(remodel_mode="style", room_type=room_type, **BASE))
        assert f'"{room_type}"' in prompt

    def test_objective_and_framing_constraints(self):
        prompt = build_prompt(StyleRemodelRequest(remodel_mode="style", **BASE))
        assert OBJECTIVE in prompt
        assert "camera angle" in prompt

    def test_missing_room_type_does_not_print_none(self):
        prompt = build_prompt(StyleRemodelRequest(remodel_mode="style", **BASE))
        assert "None" not in prompt
        assert "Infer the type of room" in prompt

    def test_unknown_request_type_still_builds(self):
        prompt = build_prompt(object())
        assert OBJECTIVE in prompt


class TestStylePrompt:
    """Style directives list each selection that was given."""

    def test_all_style_fields(self):
        request = StyleRemodelRequest(
            remodel_mode="style",
            room_type="bedroom",
            remodeling_type="full renovation",
            decor_style="scandinavian",
            materials=MaterialSelections(wall="white plaster", floor="oak", ceiling="wood slats"),
            lighting="warm ambient",
            **BASE,
        )

        prompt = build_prompt(request)

        assert "Remodeling type: full renovation" in prompt
        assert "Decor style: scandinavian" in prompt
        assert "Wall material: white plaster" in prompt
        assert "Floor material: oak" in prompt
        assert "Ceiling material: wood slats" in prompt
        assert "Lighting: warm ambient" in prompt

    def test_partial_materials_are_omitted(self):
        request = StyleRemodelRequest(
            remodel_mode="style",
            materials=MaterialSelections(floor="terrazzo"),
            **BASE,
        )

        prompt = build_prompt(request)

        assert "Floor material: terrazzo" in prompt
        assert "Wall material" not in prompt
        assert "Ceiling material" not in prompt

    def test_blank_values_are_omitted(self):
        request = StyleRemodelRequest(remodel_mode="style", decor_style="   ", lighting="", **BASE)

        prompt = build_prompt(request)

        assert "Decor style" not in prompt
        assert "Lighting" not in prompt


class TestCustomPrompt:
    """Custom prompts reference every attached item."""

    def test_items_and_instruction(self):
        request = CustomRemodelRequest(
            remodel_mode="custom",
            custom_items=[
                CustomItem(data_url="data:image/png;base64,X", mime_type="image/png", category="sofa", name="Blue Velvet"),
                CustomItem(data_url="data:image/png;base64,Y", mime_type="image/png", category="lamp", name="Arc"),
            ],
            custom_prompt="place the sofa facing the TV",
            **BASE,
        )

        prompt = build_prompt(request)

        assert "2 user-provided item(s)" in prompt
        assert 'Category: sofa. Name: "Blue Velvet".' in prompt
        assert 'Category: lamp. Name: "Arc".' in prompt
        assert "place the sofa facing the TV" in prompt

    def test_without_instruction(self):
        request = CustomRemodelRequest(
            remodel_mode="custom",
            custom_items=[CustomItem(data_url="X", mime_type="image/png")],
            **BASE,
        )

        prompt = build_prompt(request)

        assert "User instruction" not in prompt


class TestInpaintingPrompt:
    """Inpainting prompts are scoped to the masked region."""

    def test_instruction_is_scoped_to_mask(self):
        request = InpaintingRemodelRequest(
            remodel_mode="inpainting",
            mask_base64_data="data:image/png;base64,BBB",
            inpainting_prompt="remove the sofa",
            **BASE,
        )

        prompt = build_prompt(request)

        assert "masked region: remove the sofa" in prompt
        assert "ONLY the region marked in white" in prompt

    def test_missing_instruction_falls_back(self):
        request = InpaintingRemodelRequest(
            remodel_mode="inpainting",
            mask_base64_data="BBB",
            **BASE,
        )

        prompt = build_prompt(request)

        assert "blends naturally" in prompt
