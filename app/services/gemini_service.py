import asyncio
import time
from typing import Any, List, Optional

from google import genai
from google.genai import types

from ..models.parts import (
    ComposedRequest,
    GenerationResult,
    ImagePart,
    ResultImagePart,
    ResultTextPart,
)
from ..utils.errors import GenerationFailed
from ..utils.images import decode_base64, image_part_label
from ..utils.logger import logger


class GeminiImageGenerator:
    """Google Gemini 이미지 생성 어댑터

    ComposedRequest 의 part 순서를 그대로 유지해서 전송하고,
    응답 part(이미지/텍스트)를 GenerationResult 로 변환한다.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        timeout_seconds: float = 60,
        client: Optional[Any] = None,
    ):
        if client is None:
            if not api_key:
                raise ValueError("GEMINI_API_KEY가 설정되지 않았습니다.")
            client = genai.Client(api_key=api_key)

        self.client = client
        self.model = model
        self.timeout_seconds = timeout_seconds

        logger.info(f"GeminiImageGenerator initialized (model={model}, timeout={timeout_seconds}s)")

    @staticmethod
    def to_sdk_parts(composed: ComposedRequest) -> List[types.Part]:
        """ContentPart → google.genai Part (이미지는 base64 디코딩)"""
        sdk_parts = []
        for index, part in enumerate(composed.parts):
            if isinstance(part, ImagePart):
                raw = decode_base64(part.data, image_part_label(index))
                sdk_parts.append(types.Part.from_bytes(data=raw, mime_type=part.mime_type))
            else:
                sdk_parts.append(types.Part.from_text(text=part.text))
        return sdk_parts

    @staticmethod
    def parse_response(response: Any) -> GenerationResult:
        """SDK 응답 → GenerationResult (첫 번째 candidate 의 part 순서 유지)"""
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return GenerationResult(parts=[])

        content = getattr(candidates[0], "content", None)
        sdk_parts = getattr(content, "parts", None) or []

        parts = []
        for part in sdk_parts:
            inline_data = getattr(part, "inline_data", None)
            if inline_data is not None and inline_data.data:
                parts.append(ResultImagePart(
                    data=inline_data.data,
                    mime_type=inline_data.mime_type or "image/png",
                ))
            elif getattr(part, "text", None):
                parts.append(ResultTextPart(text=part.text))

        if not parts:
            logger.warning(f"Gemini returned no usable parts (finish_reason={getattr(candidates[0], 'finish_reason', None)})")
        return GenerationResult(parts=parts)

    async def generate(self, composed: ComposedRequest) -> GenerationResult:
        """이미지 생성 요청 (IMAGE + TEXT 응답 modality)"""
        contents = types.Content(role="user", parts=self.to_sdk_parts(composed))
        config = types.GenerateContentConfig(
            response_modalities=[types.Modality.IMAGE, types.Modality.TEXT],
        )

        logger.info(
            f"Generating image with {self.model}: {len(composed.parts)} parts, "
            f"{composed.image_count} images, prompt {len(composed.prompt_text)} chars"
        )
        start = time.time()

        try:
            # SDK 호출은 동기 → 스레드에서 실행
            response = await asyncio.wait_for(
                asyncio.to_thread(
                    self.client.models.generate_content,
                    model=self.model,
                    contents=contents,
                    config=config,
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Gemini timed out after {self.timeout_seconds}s")
            raise GenerationFailed("Image generation timed out.") from e
        except Exception as e:
            logger.error(f"Gemini image generation failed: {type(e).__name__}: {str(e)}", exc_info=True)
            raise GenerationFailed("Failed to generate image on the server.") from e

        logger.info(f"Gemini responded in {time.time() - start:.2f}s")
        return self.parse_response(response)
