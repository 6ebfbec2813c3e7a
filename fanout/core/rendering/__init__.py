from .rendered_request import RenderedRequest as RenderedRequest
from .template_renderer import (
    Payload as Payload,
    parse_request as parse_request,
    render as render,
    substitute as substitute,
)
