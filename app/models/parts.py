"""Gemini 요청/응답을 구성하는 멀티모달 part 타입"""
from pydantic import BaseModel, Field
from typing import Annotated, List, Literal, Union


class ImagePart(BaseModel):
    """요청 이미지 part (data 는 data-URL 헤더가 제거된 base64)"""
    kind: Literal["image"] = "image"
    data: str
    mime_type: str


class TextPart(BaseModel):
    kind: Literal["text"] = "text"
    text: str


ContentPart = Annotated[Union[ImagePart, TextPart], Field(discriminator="kind")]


class ComposedRequest(BaseModel):
    """순서가 보장된 요청 part 목록. 마지막 part 는 항상 prompt_text"""
    prompt_text: str
    parts: List[ContentPart]

    @property
    def image_count(self) -> int:
        return sum(1 for part in self.parts if isinstance(part, ImagePart))


class ResultImagePart(BaseModel):
    """응답 이미지 part (raw bytes)"""
    kind: Literal["image"] = "image"
    data: bytes
    mime_type: str = "image/png"


class ResultTextPart(BaseModel):
    kind: Literal["text"] = "text"
    text: str


ResultPart = Annotated[Union[ResultImagePart, ResultTextPart], Field(discriminator="kind")]


class GenerationResult(BaseModel):
    """모델 응답 part 목록 (이미지/텍스트 혼재, 순서 유지)"""
    parts: List[ResultPart] = []
