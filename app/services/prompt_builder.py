"""리모델 요청을 Gemini 지시문(prompt)으로 변환

요청 필드 중 비어 있는 값은 문장에서 생략한다. 어떤 조합의 입력에도 예외를 던지지 않는다.
"""
from typing import List, Optional

from ..models.schemas import (
    CustomRemodelRequest,
    InpaintingRemodelRequest,
    StyleRemodelRequest,
)


OBJECTIVE = (
    "**PRIMARY OBJECTIVE:** Perform an interior redesign on the provided image while maintaining "
    "100% fidelity to the original architectural structure and camera framing."
)

STRUCTURE_RULES = """**ROOM STRUCTURE (ABSOLUTELY FORBIDDEN TO CHANGE):**
1. NEVER modify walls, windows, doors positions - keep EXACTLY as original
2. NEVER change ceiling height, floor boundaries, or room dimensions
3. NEVER add or remove architectural elements (columns, beams, moldings)
4. Keep the SAME camera angle, framing and field of view as the original photo"""

FINAL_CHECK = """**FINAL CHECK:**
1. Room structure unchanged? (walls, windows, doors in same positions)
2. Camera angle and viewpoint identical to original photo?
3. Result photorealistic and suitable for real living?

If YES to all → Generate the image now. You MUST return an image."""


def _clean(value: Optional[str]) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _room_context(room_type: Optional[str]) -> str:
    room = _clean(room_type)
    if room:
        return (
            f'**ROOM CONTEXT:** The user has identified this room as a "{room}". '
            "All design choices MUST be appropriate for this type of space."
        )
    return (
        "**ROOM CONTEXT:** Infer the type of room from the photo. "
        "All design choices MUST be appropriate for that type of space."
    )


def _style_directives(request: StyleRemodelRequest) -> List[str]:
    lines = []

    remodeling_type = _clean(request.remodeling_type)
    if remodeling_type:
        lines.append(f"- Remodeling type: {remodeling_type}")

    decor_style = _clean(request.decor_style)
    if decor_style:
        lines.append(f"- Decor style: {decor_style}. Furniture, textiles and decor MUST reflect this style.")

    materials = request.materials
    if materials is not None:
        for surface in ("wall", "floor", "ceiling"):
            material = _clean(getattr(materials, surface, None))
            if material:
                lines.append(f"- {surface.capitalize()} material: {material}")

    lighting = _clean(request.lighting)
    if lighting:
        lines.append(f"- Lighting: {lighting}")

    if not lines:
        lines.append("- Apply a tasteful, cohesive redesign that suits the room.")
    return lines


def _custom_directives(request: CustomRemodelRequest) -> List[str]:
    lines = []

    items = request.custom_items or []
    if items:
        lines.append(
            f"- Integrate the {len(items)} user-provided item(s) attached before this text into the room, "
            "matching their appearance as closely as possible:"
        )
        for item in items:
            lines.append(f'  * Category: {_clean(item.category)}. Name: "{_clean(item.name)}".')
        lines.append("- Scale, place and light each item realistically within the existing space.")

    instruction = _clean(request.custom_prompt)
    if instruction:
        lines.append(f"- User instruction: {instruction}")

    if not lines:
        lines.append("- Refresh the room while keeping its overall character.")
    return lines


def _inpainting_directives(request: InpaintingRemodelRequest) -> List[str]:
    lines = [
        "- The second image is a mask. Modify ONLY the region marked in white; "
        "every pixel outside the mask MUST stay identical to the original photo.",
    ]

    instruction = _clean(request.inpainting_prompt)
    if instruction:
        lines.append(f"- Change to apply inside the masked region: {instruction}")
    else:
        lines.append("- Redesign the masked region so it blends naturally with the rest of the room.")
    return lines


def build_prompt(request) -> str:
    """리모델 요청 → 최종 지시문"""
    if isinstance(request, StyleRemodelRequest):
        directives = _style_directives(request)
    elif isinstance(request, CustomRemodelRequest):
        directives = _custom_directives(request)
    elif isinstance(request, InpaintingRemodelRequest):
        directives = _inpainting_directives(request)
    else:
        directives = []

    user_request = "\n".join(directives) if directives else "- Apply a tasteful redesign."

    return "\n\n".join([
        OBJECTIVE,
        _room_context(getattr(request, "room_type", None)),
        STRUCTURE_RULES,
        f"**USER REQUEST:**\n{user_request}",
        FINAL_CHECK,
    ])
