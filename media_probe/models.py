"""Data models used throughout the discovery pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class MediaType(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    IMAGE = "image"
    UNKNOWN = "unknown"


class CandidateSource(str, Enum):
    NETWORK_RESPONSE = "network-response"
    NETWORK_RESPONSE_EXT = "network-response-ext"
    DOM_SCAN = "dom-scan"


@dataclass(frozen=True)
class CandidateResource:
    """Raw media observation from a network response or the DOM."""

    url: str
    declared_type: MediaType
    content_type: Optional[str]
    source: CandidateSource


@dataclass(frozen=True)
class MediaResource:
    """Deduplicated media resource returned to callers."""

    url: str
    type: MediaType
    content_type: Optional[str]
    source: CandidateSource
    title: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "type": self.type.value,
            "contentType": self.content_type,
            "source": self.source.value,
            "title": self.title,
        }


@dataclass
class FormatInfo:
    """A stream format listed in an embedded player response."""

    kind: str
    itag: Optional[int]
    mime_type: Optional[str]
    codecs: Optional[str]
    bitrate: Optional[int]
    width: Optional[int]
    height: Optional[int]
    url: Optional[str]
    needs_cipher: bool = False
    cipher: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "itag": self.itag,
            "mimeType": self.mime_type,
            "codecs": self.codecs,
            "bitrate": self.bitrate,
            "width": self.width,
            "height": self.height,
            "url": self.url,
            "needsCipher": self.needs_cipher,
            "cipher": dict(self.cipher),
        }


@dataclass
class ExtractionResult:
    """Title and ranked media discovered on one page."""

    url: str
    title: str
    results: List[MediaResource]
    partial: bool = False
    formats: List[FormatInfo] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "partial": self.partial,
            "results": [resource.to_dict() for resource in self.results],
            "formats": [fmt.to_dict() for fmt in self.formats],
        }
