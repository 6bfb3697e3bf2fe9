"""base64 이미지 payload 디코딩/검증"""
import base64
import binascii
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from .errors import MalformedRequest

# Pillow 기본 설치로 열 수 있는 포맷만 내용까지 검증 (HEIC/AVIF 등은 디코딩만)
PILLOW_MIME_TYPES = {
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/webp",
    "image/gif",
    "image/bmp",
}


def decode_base64(data: str, label: str = "image") -> bytes:
    """data-URL 헤더가 제거된 base64 → bytes"""
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedRequest(f"{label} is not valid base64 data.") from e


def verify_image(raw: bytes, label: str = "image") -> str:
    """Pillow 로 열리는 이미지인지 확인하고 포맷명(PNG, JPEG 등) 반환"""
    try:
        with Image.open(BytesIO(raw)) as image:
            image_format = image.format or "UNKNOWN"
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise MalformedRequest(f"{label} could not be read as an image.") from e
    return image_format


def image_part_label(index: int) -> str:
    return "base64ImageData" if index == 0 else f"image part {index + 1}"


def verify_image_parts(parts) -> int:
    """요청 이미지 part 전부 디코딩, Pillow 지원 포맷은 내용까지 검증. 검증한 part 수 반환"""
    verified = 0
    for index, part in enumerate(parts):
        if part.kind != "image":
            continue
        label = image_part_label(index)
        raw = decode_base64(part.data, label)
        if part.mime_type.lower() in PILLOW_MIME_TYPES:
            verify_image(raw, label)
            verified += 1
    return verified
