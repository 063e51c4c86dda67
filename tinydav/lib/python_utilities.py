from typing import Optional
from typing import Union


def to_wire(text: Union[str, bytes, None]) -> Optional[bytes]:
    """
    Request bodies go out as they were given; only str is encoded.
    File content must not be touched, so no line ending conversion.
    """
    if text is None:
        return None
    if isinstance(text, str):
        text = bytes(text, "utf-8")
    return text


def to_normal_str(text: Union[str, bytes, None]) -> Optional[str]:
    """
    Make sure we return a normal string, no matter if we got bytes
    or str.  Undecodable bytes are replaced, this is for logging.
    """
    if text is None:
        return text
    if not isinstance(text, str):
        text = text.decode("utf-8", errors="replace")
    return text


def to_unicode(text):
    if text and isinstance(text, bytes):
        return text.decode("utf-8")
    return text
