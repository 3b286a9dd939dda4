"""
Metadata service for story-build.

Turns a content URL into IP and NFT metadata documents and pins both to IPFS.
"""

import hashlib
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from story_build.chain import checksum
from story_build.errors import ValidationError
from story_build.license_terms import to_non_negative_int
from story_build.pinata import PinataClient, ipfs_uri
from story_build.url_parser import ParsedContent, get_supported_platforms, parse_content_url

logger = logging.getLogger(__name__)


def metadata_hash(document: Dict[str, Any]) -> str:
    """0x-prefixed sha256 of the JSON document as uploaded."""
    return "0x" + hashlib.sha256(json.dumps(document).encode("utf-8")).hexdigest()


def _creators(
    content: ParsedContent,
    creator_address: str,
    additional_creators: Optional[List[Dict[str, Any]]],
) -> List[Dict[str, Any]]:
    extra = []
    for entry in additional_creators or []:
        try:
            extra.append({
                "name": str(entry["name"]),
                "address": checksum(entry["address"], "creator address"),
                "contributionPercent": to_non_negative_int(
                    entry["contribution_percent"], "contribution_percent"
                ),
            })
        except KeyError as e:
            raise ValidationError(f"Additional creator is missing {e}") from None

    primary_share = 100 - sum(c["contributionPercent"] for c in extra)
    if extra and primary_share <= 0:
        raise ValidationError("Additional creators' contribution_percent must total less than 100")

    return [{
        "name": content.creator or "Content Creator",
        "address": creator_address,
        "contributionPercent": primary_share,
    }] + extra


def generate_metadata(
    content: ParsedContent,
    creator_address: str,
    additional_creators: Optional[List[Dict[str, Any]]] = None,
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Build (ip_metadata, nft_metadata) for parsed content.

    The primary creator gets whatever share the additional creators leave.
    """
    ip_metadata = {
        "title": content.title,
        "description": content.description,
        "creators": _creators(content, creator_address, additional_creators),
        "image": content.image_url,
        "mediaUrl": content.media_url,
        "mediaType": content.media_type,
        "attributes": content.attributes,
    }
    nft_metadata = {
        "name": content.title,
        "description": content.description,
        "image": content.image_url,
        "animation_url": content.media_url,
        "external_url": content.original_url,
        "attributes": content.attributes,
    }
    return ip_metadata, nft_metadata


def parse_url(url: str) -> Dict[str, Any]:
    content = parse_content_url(url)
    return {
        "status": "success",
        "content": content.to_dict(),
        "supported_platforms": get_supported_platforms(),
    }


def build_content(
    content_url: Optional[str] = None,
    title: Optional[str] = None,
    description: Optional[str] = None,
    image_url: Optional[str] = None,
    media_url: Optional[str] = None,
    creator_name: Optional[str] = None,
    attributes: Optional[List[Dict[str, str]]] = None,
) -> ParsedContent:
    """
    Describe the content to register, from a URL, explicit fields, or both.

    Explicit fields win over parsed ones. Caller attributes come first, then
    the parsed platform attributes.

    Raises:
        ValidationError: no URL and no title/description, or an unparseable URL
    """
    if content_url:
        content = parse_content_url(content_url)
    else:
        if not title:
            raise ValidationError("title is required when no content_url is given")
        if not description:
            raise ValidationError("description is required when no content_url is given")
        content = ParsedContent(
            title=title, description=description, platform="Direct Upload", original_url=""
        )

    content.title = title or content.title
    content.description = description or content.description
    content.image_url = image_url or content.image_url
    content.media_url = media_url or content.media_url
    content.creator = creator_name or content.creator
    content.attributes = list(attributes or []) + content.attributes
    return content


def pin_metadata(
    content: ParsedContent,
    creator_address: str,
    pinata: PinataClient,
    additional_creators: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Dict[str, Any]]:
    """
    Generate both metadata documents and pin them.

    Returns:
        {"ip_metadata": {...}, "nft_metadata": {...}}, each with uri,
        gateway_url, hash and document
    """
    ip_metadata, nft_metadata = generate_metadata(content, creator_address, additional_creators)
    slug = content.platform.lower().replace(" ", "-")

    pinned = {}
    for kind, document in (("ip", ip_metadata), ("nft", nft_metadata)):
        cid = pinata.upload_json(document, f"{kind}-metadata-{slug}")
        pinned[f"{kind}_metadata"] = {
            "uri": ipfs_uri(cid),
            "gateway_url": pinata.gateway_url(cid),
            "hash": metadata_hash(document),
            "document": document,
        }
    return pinned


def prepare_ip_metadata(
    url: str,
    creator_address: str,
    pinata: PinataClient,
    title: Optional[str] = None,
    description: Optional[str] = None,
    additional_creators: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Parse a content URL, generate metadata, and pin both documents.

    Returns the CIDs, URIs and hashes needed to register the IP asset.
    """
    creator_address = checksum(creator_address, "creator_address")
    content = build_content(url, title=title, description=description)
    pinned = pin_metadata(content, creator_address, pinata, additional_creators)

    return {
        "status": "success",
        "message": f"Metadata for '{content.title}' pinned to IPFS",
        "content": content.to_dict(),
        **pinned,
    }
