"""WebDAV XML elements and the multistatus encoder."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from http import HTTPStatus

from lxml import etree

from ..webdav import DEFAULT_CONTENT_TYPE, ResourceDescriptor
from .xml_utils import set_escaped_text

# WebDAV namespace
NAMESPACE = "DAV:"
NS = {"D": NAMESPACE}

# Common XML names
MULTISTATUS = "{DAV:}multistatus"
RESPONSE = "{DAV:}response"
HREF = "{DAV:}href"
PROPSTAT = "{DAV:}propstat"
PROP = "{DAV:}prop"
STATUS = "{DAV:}status"
RESOURCE_TYPE = "{DAV:}resourcetype"
GET_CONTENT_LENGTH = "{DAV:}getcontentlength"
GET_CONTENT_TYPE = "{DAV:}getcontenttype"
GET_LAST_MODIFIED = "{DAV:}getlastmodified"
GET_ETAG = "{DAV:}getetag"
COLLECTION = "{DAV:}collection"

HTTP_DATE_FORMAT = "%a, %d %b %Y %H:%M:%S GMT"


def new_element(tag: str) -> etree._Element:
    """Create a detached element bound to the ``D:`` prefix."""
    return etree.Element(tag, nsmap=NS)


def format_http_date(dt: datetime) -> str:
    """Format a datetime as an RFC 1123 HTTP date."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(UTC)
    return dt.strftime(HTTP_DATE_FORMAT)


@dataclass
class Status:
    """HTTP status for WebDAV responses."""

    code: int
    text: str = ""

    def to_string(self) -> str:
        """Marshal status to text."""
        text = self.text if self.text else HTTPStatus(self.code).phrase
        return f"HTTP/1.1 {self.code} {text}"


@dataclass
class Prop:
    """WebDAV prop element."""

    raw: list[etree._Element] = field(default_factory=list)

    def to_xml(self) -> etree._Element:
        """Convert to XML element."""
        prop = new_element(PROP)
        for elem in self.raw:
            prop.append(elem)
        return prop


@dataclass
class PropStat:
    """WebDAV propstat element."""

    prop: Prop
    status: Status

    def to_xml(self) -> etree._Element:
        """Convert to XML element."""
        propstat = new_element(PROPSTAT)
        propstat.append(self.prop.to_xml())

        status_el = etree.SubElement(propstat, STATUS)
        status_el.text = self.status.to_string()
        return propstat


@dataclass
class Response:
    """WebDAV response element."""

    hrefs: list[str] = field(default_factory=list)
    propstats: list[PropStat] = field(default_factory=list)

    def to_xml(self) -> etree._Element:
        """Convert to XML element."""
        resp = new_element(RESPONSE)

        for href in self.hrefs:
            href_el = etree.SubElement(resp, HREF)
            set_escaped_text(href_el, href)

        for propstat in self.propstats:
            resp.append(propstat.to_xml())

        return resp


@dataclass
class ResourceType:
    """WebDAV resourcetype property."""

    types: list[str] = field(default_factory=list)

    def to_xml(self) -> etree._Element:
        """Convert to XML element."""
        rt = new_element(RESOURCE_TYPE)
        for t in self.types:
            etree.SubElement(rt, t)
        return rt


@dataclass
class GetContentLength:
    """WebDAV getcontentlength property."""

    length: int

    def to_xml(self) -> etree._Element:
        """Convert to XML element."""
        elem = new_element(GET_CONTENT_LENGTH)
        elem.text = str(self.length)
        return elem


@dataclass
class GetContentType:
    """WebDAV getcontenttype property."""

    content_type: str

    def to_xml(self) -> etree._Element:
        """Convert to XML element."""
        elem = new_element(GET_CONTENT_TYPE)
        elem.text = self.content_type
        return elem


@dataclass
class GetLastModified:
    """WebDAV getlastmodified property."""

    last_modified: datetime

    def to_xml(self) -> etree._Element:
        """Convert to XML element."""
        elem = new_element(GET_LAST_MODIFIED)
        elem.text = format_http_date(self.last_modified)
        return elem


@dataclass
class GetETag:
    """WebDAV getetag property."""

    etag: str

    def to_xml(self) -> etree._Element:
        """Convert to XML element."""
        elem = new_element(GET_ETAG)
        # ETags should be quoted
        elem.text = f'"{self.etag}"' if not self.etag.startswith('"') else self.etag
        return elem


def response_from_descriptor(desc: ResourceDescriptor) -> Response:
    """Build the propstat response for one resource."""
    props: list[etree._Element] = []

    if desc.is_collection:
        props.append(ResourceType(types=[COLLECTION]).to_xml())
    else:
        props.append(ResourceType(types=[]).to_xml())

    if desc.has_file_props():
        props.append(GetContentLength(length=desc.size or 0).to_xml())
        if desc.last_modified is not None:
            props.append(GetLastModified(last_modified=desc.last_modified).to_xml())
        if desc.etag:
            props.append(GetETag(etag=desc.etag).to_xml())
        props.append(
            GetContentType(content_type=desc.content_type or DEFAULT_CONTENT_TYPE).to_xml()
        )

    return Response(
        hrefs=[desc.path],
        propstats=[PropStat(prop=Prop(raw=props), status=Status(code=200))],
    )


@dataclass
class MultiStatus:
    """WebDAV multistatus response.

    Append-only: responses are serialized in the order they were added, so
    the requested resource must be added first.
    """

    responses: list[Response] = field(default_factory=list)

    def add(self, desc: ResourceDescriptor) -> None:
        """Append the response for a resource descriptor."""
        self.responses.append(response_from_descriptor(desc))

    def to_xml(self) -> etree._Element:
        """Convert to XML element."""
        root = new_element(MULTISTATUS)
        for resp in self.responses:
            root.append(resp.to_xml())
        return root

    def to_bytes(self) -> bytes:
        """Serialize to a UTF-8 document with an XML declaration."""
        return etree.tostring(
            self.to_xml(), encoding="utf-8", xml_declaration=True, pretty_print=True
        )
