"""요청 part 조립 및 응답 이미지 추출

Part 순서:
    원본 이미지 → (마스크 | 아이템 이미지 + 아이템 설명 반복) → 최종 prompt
마지막 텍스트가 앞서 첨부된 모든 이미지에 대한 지시가 되도록 prompt 는 항상 맨 뒤에 둔다.
"""
from typing import List

from ..models.parts import (
    ComposedRequest,
    ContentPart,
    GenerationResult,
    ImagePart,
    ResultImagePart,
    ResultTextPart,
    TextPart,
)
from ..models.schemas import CustomItem, CustomRemodelRequest, InpaintingRemodelRequest
from ..utils.errors import MalformedRequest, NoImageReturned
from .prompt_builder import build_prompt

# 마스크는 원래 인코딩과 관계없이 PNG 로 전송
MASK_MIME_TYPE = "image/png"


def strip_data_url(payload: str) -> str:
    """'data:<mime>;base64,' 헤더 제거. 헤더가 없으면 그대로 반환"""
    value = payload.strip()
    if value.startswith("data:"):
        header, separator, data = value.partition(",")
        if not separator:
            raise MalformedRequest("Data URL is missing its ',' separator.")
        return data
    return value


def describe_custom_item(item: CustomItem) -> str:
    return f'This is a user-provided item. Category: {item.category}. Name: "{item.name}".'


def _custom_item_parts(item: CustomItem, index: int) -> List[ContentPart]:
    data = strip_data_url(item.data_url)
    if not data or not item.mime_type:
        raise MalformedRequest(f"Custom item {index + 1} is missing image data or mime type.")
    return [
        ImagePart(data=data, mime_type=item.mime_type),
        TextPart(text=describe_custom_item(item)),
    ]


def compose(request) -> ComposedRequest:
    """리모델 요청 → 순서가 고정된 ContentPart 목록 + prompt"""
    base_data = strip_data_url(request.base64_image_data)
    if not base_data:
        raise MalformedRequest("base64ImageData is empty.")

    parts: List[ContentPart] = [ImagePart(data=base_data, mime_type=request.mime_type)]

    if isinstance(request, InpaintingRemodelRequest) and request.mask_base64_data:
        mask_data = strip_data_url(request.mask_base64_data)
        if not mask_data:
            raise MalformedRequest("maskBase64Data is empty.")
        parts.append(ImagePart(data=mask_data, mime_type=MASK_MIME_TYPE))
    elif isinstance(request, CustomRemodelRequest):
        for index, item in enumerate(request.custom_items):
            parts.extend(_custom_item_parts(item, index))

    prompt_text = build_prompt(request)
    parts.append(TextPart(text=prompt_text))

    return ComposedRequest(prompt_text=prompt_text, parts=parts)


def extract_image(result: GenerationResult) -> bytes:
    """첫 번째 이미지 part 의 bytes 반환. 없으면 NoImageReturned"""
    for part in result.parts:
        if isinstance(part, ResultImagePart):
            return part.data

    texts = [part.text for part in result.parts if isinstance(part, ResultTextPart)]
    raise NoImageReturned(
        "The image model did not return an image.",
        details={"text": " ".join(texts)[:500]} if texts else None,
    )
