from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from ..utils.errors import MalformedRequest, format_validation_errors


class _CamelModel(BaseModel):
    """프론트엔드는 camelCase 필드명으로 전송"""

    model_config = ConfigDict(populate_by_name=True)


class MaterialSelections(_CamelModel):
    """표면별 마감재 선택"""
    wall: Optional[str] = None
    floor: Optional[str] = None
    ceiling: Optional[str] = None


class CustomItem(_CamelModel):
    """사용자가 첨부한 참고 아이템 (가구, 소품 등)"""
    data_url: str = Field(..., alias="dataUrl", min_length=1)
    mime_type: str = Field(..., alias="mimeType", min_length=1)
    category: str = ""
    name: str = ""


class _RemodelRequestBase(_CamelModel):
    """모든 모드 공통 필드"""
    base64_image_data: str = Field(..., alias="base64ImageData", min_length=1)
    mime_type: str = Field(..., alias="mimeType", min_length=1)
    room_type: Optional[str] = Field(None, alias="roomType")
    lighting: Optional[str] = None
    user_id: Optional[str] = Field(None, alias="userId")


class StyleRemodelRequest(_RemodelRequestBase):
    """스타일 모드: 리모델링 타입, 데코 스타일, 마감재, 조명"""
    remodel_mode: Literal["style"] = Field(..., alias="remodelMode")
    remodeling_type: Optional[str] = Field(None, alias="remodelingType")
    decor_style: Optional[str] = Field(None, alias="decorStyle")
    materials: Optional[MaterialSelections] = None


class InpaintingRemodelRequest(_RemodelRequestBase):
    """인페인팅 모드: 마스크 영역만 수정"""
    remodel_mode: Literal["inpainting"] = Field(..., alias="remodelMode")
    mask_base64_data: str = Field(..., alias="maskBase64Data", min_length=1)
    inpainting_prompt: Optional[str] = Field(None, alias="inpaintingPrompt")


class CustomRemodelRequest(_RemodelRequestBase):
    """커스텀 모드: 사용자 아이템 이미지를 공간에 배치"""
    remodel_mode: Literal["custom"] = Field(..., alias="remodelMode")
    custom_items: List[CustomItem] = Field(..., alias="customItems", min_length=1)
    custom_prompt: Optional[str] = Field(None, alias="customPrompt")


RemodelRequest = Annotated[
    Union[StyleRemodelRequest, InpaintingRemodelRequest, CustomRemodelRequest],
    Field(discriminator="remodel_mode"),
]

_remodel_request_adapter = TypeAdapter(RemodelRequest)


def parse_remodel_request(payload: Dict[str, Any]):
    """JSON body → remodelMode 별 요청 모델 (필수 필드 누락 시 MalformedRequest)"""
    try:
        return _remodel_request_adapter.validate_python(payload)
    except ValidationError as e:
        raise MalformedRequest(format_validation_errors(e.errors())) from e


class RemodelResponse(_CamelModel):
    """리모델 응답 (생성된 이미지 base64)"""
    image_data: str = Field(..., alias="imageData")


class ErrorResponse(BaseModel):
    """에러 응답"""
    error: str
    code: str
