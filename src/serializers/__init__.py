"""
Serializers between post records and stored text.

Currently this subpackage exposes :class:`PostXmlSerializer` from
:mod:`src.serializers.post_xml` together with the timestamp helpers it uses.
"""

from .dates import format_round_trip, parse_general, parse_round_trip
from .post_xml import PostXmlSerializer, read_attribute_text, read_child_text

__all__ = [
    "PostXmlSerializer",
    "read_child_text",
    "read_attribute_text",
    "format_round_trip",
    "parse_general",
    "parse_round_trip",
]
