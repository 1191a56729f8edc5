from decimal import Decimal

from wtforms.validators import InputRequired, StopValidation

IMAGE_SIGNATURES = (
    b'\xff\xd8\xff',
    b'\x89PNG\r\n\x1a\n',
    b'GIF87a',
    b'GIF89a',
)


def strip(value):
    return value.strip() if isinstance(value, str) else value


def none_if_empty(value):
    return value or None


class Filled(InputRequired):
    """``InputRequired`` that also treats whitespace-only input as missing."""

    def __call__(self, form, field):
        if field.raw_data and isinstance(field.raw_data[0], str) and not field.raw_data[0].strip():
            field.errors[:] = []
            raise StopValidation(self.message)
        super().__call__(form, field)


class Parsed:
    """Stop the chain with ``message`` when the field could not coerce its input.

    Replaces the field's generic coercion error with a domain message.
    NaN and infinite decimals count as unparsed.
    """

    def __init__(self, message):
        self.message = message

    def __call__(self, form, field):
        data = field.data
        if data is None or field.process_errors or (isinstance(data, Decimal) and not data.is_finite()):
            field.errors[:] = []
            raise StopValidation(self.message)


class ImageContent:
    """Reject uploads whose leading bytes are not a JPEG, PNG, GIF or WebP image."""

    def __init__(self, message):
        self.message = message

    def __call__(self, form, field):
        upload = field.data
        if not upload or not getattr(upload, 'filename', None):
            return
        head = upload.stream.read(16)
        upload.stream.seek(0)
        if head.startswith(IMAGE_SIGNATURES):
            return
        if head[:4] == b'RIFF' and head[8:12] == b'WEBP':
            return
        raise StopValidation(self.message)
