import io
import typing as T

from PIL import Image, UnidentifiedImageError


def get_image_size(content: bytes) -> T.Optional[T.Tuple[int, int]]:
    """Return (width, height) if content is a decodable image, else None."""
    try:
        with Image.open(io.BytesIO(content)) as image:
            return image.size
    except (UnidentifiedImageError, OSError, ValueError):
        return None


def image_metadata(content: bytes) -> T.Dict[str, str]:
    size = get_image_size(content)
    if size is None:
        return {}
    width, height = size
    return {"image-width": str(width), "image-height": str(height)}
