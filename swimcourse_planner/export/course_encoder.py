"""Share links: CourseData JSON as unpadded base64url."""

import base64
import binascii
import json
import logging

from swimcourse_planner.model.course_data import CourseData

logger = logging.getLogger(__name__)


def encode_course_data(course: CourseData) -> str:
    """Encode a course into a URL-safe share code."""
    payload = json.dumps(course.to_dict(), separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=")


def decode_course_data(code: str) -> CourseData:
    """Decode a share code produced by encode_course_data.

    Raises:
        ValueError: If the code is not base64url, not JSON or not a course.
    """
    padded = code.strip() + "=" * (-len(code.strip()) % 4)
    try:
        payload = base64.b64decode(padded, altchars=b"-_", validate=True)
        data = json.loads(payload.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValueError(f"Malformed share code: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Share code does not contain a course object, got {type(data).__name__}")
    try:
        course = CourseData.from_dict(data)
    except (KeyError, TypeError) as e:
        raise ValueError(f"Share code does not contain a valid course: {e}") from e
    logger.info(f"Decoded share code for {course!r}")
    return course
