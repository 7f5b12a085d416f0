import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Annotated

from pydantic import AnyUrl, TypeAdapter, UrlConstraints, ValidationError

from .errors import CodeGenerationFailed, InvalidURL, NotFound


logger = logging.getLogger("url_shortener")

CODE_LEN_DEFAULT = 8
MAX_RETRIES = 8

absolute_url = TypeAdapter(Annotated[AnyUrl, UrlConstraints(host_required=True)])


@dataclass(frozen=True)
class ShortLink:
    code: str
    target: str
    short_url: str


def generate_code(length: int = CODE_LEN_DEFAULT) -> str:
    return str(uuid.uuid4())[:length]


def is_url(value: str) -> bool:
    """True when ``value`` has both a scheme and a host, e.g. ``https://example.com``."""
    # the URL parser silently drops surrounding spaces and embedded tabs or newlines
    if value != value.strip() or any(ord(ch) < 0x20 or ord(ch) == 0x7f for ch in value):
        return False
    try:
        absolute_url.validate_python(value)
    except ValidationError:
        return False
    return True


class Shortener:
    """In-memory registry of short codes.

    Every read and write of the registry goes through ``self._lock``, since
    FastAPI serves sync endpoints from a thread pool.
    """

    def __init__(self, code_length: int = CODE_LEN_DEFAULT, max_retries: int = MAX_RETRIES):
        self.code_length = code_length
        self.max_retries = max_retries
        self._links: dict[str, str] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._links)

    def __contains__(self, code: object) -> bool:
        with self._lock:
            return code in self._links

    def create(self, target_url: str, host: str = "") -> ShortLink:
        if not is_url(target_url):
            logger.info("shorten_invalid url=%s", target_url)
            raise InvalidURL()

        with self._lock:
            for _ in range(self.max_retries):
                code = generate_code(self.code_length)
                if code in self._links:
                    logger.warning("code_collision code=%s", code)
                    continue
                self._links[code] = target_url
                break
            else:
                logger.error("shorten_failed url=%s", target_url)
                raise CodeGenerationFailed()

        logger.info("shorten_created code=%s url=%s total=%d", code, target_url, len(self))
        return ShortLink(code=code, target=target_url, short_url=f"{host}/{code}")

    def resolve(self, code: str) -> str:
        with self._lock:
            target = self._links.get(code)

        if target is None:
            logger.info("redirect_not_found code=%s", code)
            raise NotFound()

        logger.info("redirect code=%s to=%s", code, target)
        return target
