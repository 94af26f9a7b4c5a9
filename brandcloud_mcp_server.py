#!/usr/bin/env python3
"""
BrandCloud MCP Server
Connects MCP clients (Claude Desktop, Cursor, ...) to the BrandCloud REST API.

Setup:
  1. pip install -e .
  2. Get an API key from your BrandCloud instance settings
  3. Set BRANDCLOUD_DOMAIN and BRANDCLOUD_API_KEY env vars
  4. Run over stdio (default) or streamable HTTP:
       brandcloud-mcp
       brandcloud-mcp --transport streamable-http   # listens on HOST:PORT

In streamable HTTP mode each caller may send its own key in the
``x-brandcloud-api-key`` header; it takes precedence over BRANDCLOUD_API_KEY.
"""

import argparse
import base64
import json
import logging
import os
import re
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Mapping, NamedTuple, Optional, Sequence, Tuple, Union
from urllib.parse import quote

import httpx
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import ImageContent, TextContent
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

logger = logging.getLogger("brandcloud_mcp")

# httpx logs every request URL at INFO, and the URL carries the API key
for _noisy in ("httpx", "httpcore"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)

# ─── Configuration ───────────────────────────────────────────────────────────

PROVIDER_HOST = "brandcloud.pro"
API_KEY_HEADER = "x-brandcloud-api-key"
API_KEY_PARAM = "apiKey"
DEFAULT_PORT = 3001
REQUEST_TIMEOUT = 30.0
TEMP_DIR_NAME = "brandcloud-mcp-images"

_TRUE_VALUES = {"1", "true", "yes", "on"}


class BrandCloudConfig(BaseModel):
    """Process-wide settings, built once at startup and read-only afterwards."""
    model_config = ConfigDict(frozen=True)

    default_domain: str = ""
    api_key: Optional[str] = None
    provider_host: str = PROVIDER_HOST
    timeout: float = Field(default=REQUEST_TIMEOUT, gt=0)
    omit_falsy_fields: bool = False
    host: str = "127.0.0.1"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BrandCloudConfig":
        env = os.environ if environ is None else environ
        return cls(
            default_domain=env.get("BRANDCLOUD_DOMAIN", ""),
            api_key=env.get("BRANDCLOUD_API_KEY") or None,
            timeout=float(env.get("BRANDCLOUD_TIMEOUT", REQUEST_TIMEOUT)),
            omit_falsy_fields=env.get("BRANDCLOUD_OMIT_FALSY_FIELDS", "").strip().lower() in _TRUE_VALUES,
            host=env.get("HOST", "127.0.0.1"),
            port=int(env.get("PORT", DEFAULT_PORT)),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )

    def resolve_domain(self, domain: Optional[str]) -> str:
        """Return the tenant domain for a call, falling back to the default."""
        resolved = domain or self.default_domain
        if not resolved:
            raise ValueError(
                "No BrandCloud domain given and BRANDCLOUD_DOMAIN is not set. "
                "Pass 'domain' (e.g. 'acme' for acme.brandcloud.pro)."
            )
        return resolved


CONFIG = BrandCloudConfig.from_env()

mcp = FastMCP("brandcloud_mcp", host=CONFIG.host, port=CONFIG.port)

# ─── Errors ──────────────────────────────────────────────────────────────────


class BrandCloudError(Exception):
    """Base class for failures talking to BrandCloud."""


class BrandCloudTransportError(BrandCloudError):
    """The request could not be completed or the reply was not JSON."""


class BrandCloudDownloadError(BrandCloudError):
    """A binary download returned a non-success status."""


# ─── Credentials ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TransportContext:
    """Inbound HTTP headers, only available in streamable HTTP mode.

    Keys are lower-cased; values may be a single string or a list when the
    header was repeated.
    """
    headers: Mapping[str, Union[str, Sequence[str]]]

    def header(self, name: str) -> Optional[str]:
        value = self.headers.get(name.lower())
        if isinstance(value, (list, tuple)):
            return value[0] if value else None
        return value


def transport_context(ctx: Optional[Context]) -> Optional[TransportContext]:
    """Extract the inbound request headers from a FastMCP context, if any.

    Over stdio there is no HTTP request behind the call, so this returns None.
    """
    if ctx is None:
        return None
    try:
        request = ctx.request_context.request
    except (AttributeError, ValueError):
        return None
    headers = getattr(request, "headers", None)
    if headers is None:
        return None
    return TransportContext(
        headers={key.lower(): list(headers.getlist(key)) for key in headers.keys()}
    )


def resolve_credential(
    transport: Optional[TransportContext], config: BrandCloudConfig
) -> Optional[str]:
    """Pick the API key for one outbound call: request header first, then env."""
    if transport is not None:
        header_key = transport.header(API_KEY_HEADER)
        if header_key:
            return header_key
    return config.api_key


# ─── Request Building ────────────────────────────────────────────────────────

QueryPairs = List[Tuple[str, str]]


@dataclass(frozen=True)
class ApiRequest:
    """One logical BrandCloud operation, before domain and credential are applied."""
    method: str
    path: Tuple[Union[str, int], ...]
    query: Tuple[Tuple[str, str], ...] = ()
    body: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class PreparedRequest:
    method: str
    url: str
    headers: Dict[str, str]
    content: Optional[bytes] = None


class BodyField(NamedTuple):
    """Maps an input attribute to its remote JSON name.

    ``truthy_guarded`` marks fields that are skipped when falsy under the
    legacy omission policy (BRANDCLOUD_OMIT_FALSY_FIELDS).
    """
    attr: str
    remote: str
    truthy_guarded: bool = False


def base_url(domain: str, config: BrandCloudConfig) -> str:
    return f"https://{domain}.{config.provider_host}/api/v2"


def build_body(
    params: BaseModel, fields: Sequence[BodyField], omit_falsy: bool = False
) -> Dict[str, Any]:
    """Assemble a JSON body from ``params``, leaving out unset fields."""
    body: Dict[str, Any] = {}
    for field in fields:
        value = getattr(params, field.attr)
        if value is None:
            continue
        if omit_falsy and field.truthy_guarded and not value:
            continue
        body[field.remote] = value
    return body


def build_url(
    domain: str,
    path: Sequence[Union[str, int]],
    query: Sequence[Tuple[str, str]],
    credential: Optional[str],
    config: BrandCloudConfig,
) -> str:
    """Build the full URL; the credential always leads the query string."""
    segments = "/".join(quote(str(segment), safe="!'()*") for segment in path)
    pairs: QueryPairs = []
    if credential:
        pairs.append((API_KEY_PARAM, credential))
    pairs.extend(query)
    url = f"{base_url(domain, config)}/{segments}"
    if pairs:
        url = f"{url}?{httpx.QueryParams(pairs)}"
    return url


def build_request(
    config: BrandCloudConfig,
    domain: str,
    credential: Optional[str],
    api_request: ApiRequest,
) -> PreparedRequest:
    headers = {"Accept": "application/json"}
    content = None
    if api_request.body is not None:
        headers["Content-Type"] = "application/json"
        content = json.dumps(api_request.body, separators=(",", ":")).encode("utf-8")
    return PreparedRequest(
        method=api_request.method,
        url=build_url(domain, api_request.path, api_request.query, credential, config),
        headers=headers,
        content=content,
    )


def _redact(url: str) -> str:
    """Hide the API key before a URL reaches the logs."""
    return re.sub(rf"({API_KEY_PARAM}=)[^&]*", r"\1***", url)


# ─── HTTP Client ─────────────────────────────────────────────────────────────


def _new_http_client(config: BrandCloudConfig) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=config.timeout)


async def _send(prepared: PreparedRequest, config: BrandCloudConfig) -> httpx.Response:
    try:
        async with _new_http_client(config) as client:
            response = await client.request(
                prepared.method,
                prepared.url,
                headers=prepared.headers,
                content=prepared.content,
            )
    except httpx.TimeoutException as e:
        raise BrandCloudTransportError(
            f"Request to BrandCloud timed out after {config.timeout:g}s."
        ) from e
    except httpx.HTTPError as e:
        raise BrandCloudTransportError(
            f"Request to BrandCloud failed: {type(e).__name__}: {e}"
        ) from e
    logger.info(
        "%s %s -> %s", prepared.method, _redact(prepared.url), response.status_code
    )
    return response


async def invoke(
    prepared: PreparedRequest,
    config: BrandCloudConfig,
    trash_entity: Optional[str] = None,
) -> Any:
    """Perform one call and return the upstream JSON as is.

    Status codes are not inspected: an error body from BrandCloud is returned
    to the caller like any other payload. The only exception is a bulk delete
    (``trash_entity`` set) answered with 200, which BrandCloud sends without a
    body.
    """
    response = await _send(prepared, config)
    if trash_entity and response.status_code == 200:
        return {"success": True, "message": f"{trash_entity} moved to trash successfully"}
    try:
        return response.json()
    except ValueError as e:
        raise BrandCloudTransportError(
            f"BrandCloud returned a non-JSON response (HTTP {response.status_code}): "
            f"{response.text[:500]}"
        ) from e


async def _forward(
    ctx: Optional[Context],
    domain: Optional[str],
    api_request: ApiRequest,
    trash_entity: Optional[str] = None,
) -> str:
    """Shared body of every JSON tool: credential, URL, one call, stringify."""
    config = CONFIG
    credential = resolve_credential(transport_context(ctx), config)
    if not credential:
        logger.warning("No BrandCloud API key available; sending request without one")
    prepared = build_request(config, config.resolve_domain(domain), credential, api_request)
    result = await invoke(prepared, config, trash_entity=trash_entity)
    return json.dumps(result, indent=2, ensure_ascii=False)


# ─── File Retrieval ──────────────────────────────────────────────────────────

ImageSize = Literal["original", "medium", "small"]

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9.-]")


def sanitize_filename(name: str) -> str:
    """Replace every character outside [A-Za-z0-9.-] with an underscore."""
    return _UNSAFE_FILENAME_CHARS.sub("_", name)


def download_dir(save_to_workspace: bool) -> Path:
    if save_to_workspace:
        return Path.cwd() / "downloads"
    return Path(tempfile.gettempdir()) / TEMP_DIR_NAME


def download_query(size: str) -> QueryPairs:
    if size == "original":
        return []
    return [("size", size)]


@dataclass(frozen=True)
class DownloadedFile:
    file_id: int
    file_name: str
    safe_name: str
    path: Path
    size: str
    data: bytes
    ext: str
    file_type: Any
    resolution: Any
    download_url: str

    @property
    def mime_type(self) -> str:
        return f"image/{self.ext}"

    def summary(self) -> Dict[str, Any]:
        return {
            "fileId": self.file_id,
            "fileName": self.file_name,
            "savedAs": self.safe_name,
            "path": str(self.path),
            "size": self.size,
            "sizeBytes": len(self.data),
            "type": self.file_type,
            "ext": self.ext,
            "resolution": self.resolution,
            "downloadUrl": self.download_url,
            "message": "Image retrieved successfully from BrandCloud",
        }


async def retrieve_file_image(
    config: BrandCloudConfig,
    credential: Optional[str],
    domain: str,
    file_id: int,
    size: str = "medium",
    save_to_workspace: bool = False,
) -> DownloadedFile:
    """Fetch file metadata, download the binary and save it to disk.

    The metadata call must finish first: the filename and extension come from it.

    Raises:
        BrandCloudTransportError: if either call fails at the network level or
            the metadata reply is not JSON.
        BrandCloudDownloadError: if the download returns a non-success status.
    """
    metadata_request = build_request(
        config, domain, credential, ApiRequest("GET", ("file", file_id))
    )
    metadata = await invoke(metadata_request, config)
    if not isinstance(metadata, dict):
        metadata = {}

    download_url = build_url(
        domain, ("file", file_id, "download"), download_query(size), credential, config
    )
    response = await _send(PreparedRequest("GET", download_url, {}), config)
    if not response.is_success:
        raise BrandCloudDownloadError(f"Failed to download file: {response.reason_phrase}")

    ext = metadata.get("ext") or "jpg"
    file_name = metadata.get("name") or f"file-{file_id}.{ext}"
    safe_name = sanitize_filename(file_name)

    target_dir = download_dir(save_to_workspace)
    target_dir.mkdir(parents=True, exist_ok=True)
    save_path = target_dir / safe_name
    data = response.content
    save_path.write_bytes(data)
    logger.info("Saved file %s (%d bytes) to %s", file_id, len(data), save_path)

    resolutions = metadata.get("resolution") or {}
    if not isinstance(resolutions, dict):
        resolutions = {}
    return DownloadedFile(
        file_id=file_id,
        file_name=file_name,
        safe_name=safe_name,
        path=save_path,
        size=size,
        data=data,
        ext=ext,
        file_type=metadata.get("type"),
        resolution=resolutions.get(size) or resolutions.get("original"),
        download_url=download_url,
    )


# ─── Input Models ────────────────────────────────────────────────────────────

# Tools take flat camelCase arguments; these models validate them and feed
# the body builders below.


class ToolInput(BaseModel):
    """Common base: camelCase or snake_case names, unknown keys rejected."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    domain: Optional[str] = None


class ListDocumentsInput(ToolInput):
    root_id: Optional[int] = None
    bc_id: Optional[int] = None
    contains_elements: Optional[List[str]] = None
    contains_file_exts: Optional[List[str]] = None


class GetDocumentInput(ToolInput):
    document_id: int


class CreateDocumentInput(ToolInput):
    name: str
    bc_folder_id: int
    rank: int = 1
    allow_comments: Optional[bool] = None
    preview_url: Optional[str] = None
    preview_meta_data: Optional[str] = None
    image_file_id: Optional[int] = None
    files_ids: Optional[List[int]] = None
    icon_text: Optional[str] = None
    icon_bg_color: Optional[str] = None
    icon_text_color: Optional[str] = None


class UpdateDocumentInput(ToolInput):
    """Only the fields given are changed."""

    document_id: int
    name: Optional[str] = None
    bc_folder_id: Optional[int] = None
    rank: Optional[int] = None
    allow_comments: Optional[bool] = None
    preview_url: Optional[str] = None
    preview_meta_data: Optional[str] = None
    image_file_id: Optional[int] = None
    icon_text: Optional[str] = None
    icon_bg_color: Optional[str] = None
    icon_text_color: Optional[str] = None


class DeleteDocumentsInput(ToolInput):
    document_ids: List[int]


class PublishRevisionInput(ToolInput):
    document_id: int
    revision_id: int


class ListFoldersInput(ToolInput):
    root_id: Optional[int] = None
    bc_id: Optional[int] = None


class GetFolderInput(ToolInput):
    folder_id: int


class CreateFolderInput(ToolInput):
    name: str
    parent_bc_folder_id: int
    rank: int = 1
    link: Optional[str] = None
    preview_url: Optional[str] = None
    preview_meta_data: Optional[str] = None
    image_file_id: Optional[int] = None
    header_file_id: Optional[int] = None
    icon_text: Optional[str] = None
    icon_bg_color: Optional[str] = None
    icon_text_color: Optional[str] = None


class UpdateFolderInput(ToolInput):
    """Only the fields given are changed."""

    folder_id: int
    name: Optional[str] = None
    parent_bc_folder_id: Optional[int] = None
    rank: Optional[int] = None
    link: Optional[str] = None
    preview_url: Optional[str] = None
    preview_meta_data: Optional[str] = None
    image_file_id: Optional[int] = None
    header_file_id: Optional[int] = None
    icon_text: Optional[str] = None
    icon_bg_color: Optional[str] = None
    icon_text_color: Optional[str] = None


class DeleteFoldersInput(ToolInput):
    folder_ids: List[int]


# Element payloads are forwarded verbatim, so they keep BrandCloud's own keys.


class _ElementData(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class PageData(_ElementData):
    header: str = Field(..., description="Document header")
    show_stock: Optional[bool] = Field(default=None, alias="showStock", description="Show stock column")
    eshop: Optional[bool] = Field(default=None, description="Show eshop on page?")


class HeaderData(_ElementData):
    header: str = Field(..., description="Header text")


class TextData(_ElementData):
    html: str = Field(..., description="HTML content for the text block")


class ColorData(_ElementData):
    name: str = Field(..., description="Color name")
    text_color: Optional[str] = Field(default=None, description="Text color in HEX")
    r: int = Field(..., ge=0, le=255, description="Red value 0-255")
    g: int = Field(..., ge=0, le=255, description="Green value 0-255")
    b: int = Field(..., ge=0, le=255, description="Blue value 0-255")


class ColorRowData(_ElementData):
    name: str = Field(..., description="Color row value title (e.g., 'RAL')")
    value: str = Field(..., description="Color row value (e.g., 'RAL 1234')")


class EmbedData(_ElementData):
    url: str = Field(..., description="URL of embed (e.g., YouTube video)")
    height: Optional[int] = Field(default=None, description="Height of embed in px")


ElementType = Literal["page", "header", "text", "color", "color-row", "embed"]
ElementData = Union[PageData, HeaderData, TextData, ColorData, ColorRowData, EmbedData]


class ElementRefInput(ToolInput):
    document_id: int
    revision_id: int


class ListElementsInput(ElementRefInput):
    pass


class GetElementInput(ElementRefInput):
    element_id: int


class CreateElementInput(ElementRefInput):
    parent_element_id: Optional[int] = None
    rank: int = 1
    type: ElementType
    data: ElementData


class UpdateElementInput(ElementRefInput):
    element_id: int
    parent_element_id: Optional[int] = None
    rank: Optional[int] = None
    type: ElementType
    data: ElementData


class DeleteElementInput(ElementRefInput):
    element_id: int


FileOrder = Literal["uploaded", "name", "size"]
SortDirection = Literal["asc", "desc"]


class ListFilesInput(ToolInput):
    query: Optional[str] = None
    limit: int = 100
    offset: int = 0
    order: FileOrder = "uploaded"
    dir: SortDirection = "desc"


class SearchInput(ToolInput):
    query: str


class GetFileImageInput(ToolInput):
    file_id: int
    size: ImageSize = "medium"
    save_to_workspace: bool = False


# ─── Operation Requests ──────────────────────────────────────────────────────

_DOCUMENT_FIELDS = (
    BodyField("allow_comments", "allow_comments"),
    BodyField("preview_url", "preview__url", truthy_guarded=True),
    BodyField("preview_meta_data", "preview__meta_data", truthy_guarded=True),
    BodyField("image_file_id", "image__file_id", truthy_guarded=True),
    BodyField("icon_text", "icon_text", truthy_guarded=True),
    BodyField("icon_bg_color", "icon_bg_color", truthy_guarded=True),
    BodyField("icon_text_color", "icon_text_color", truthy_guarded=True),
)

_CREATE_DOCUMENT_FIELDS = (
    BodyField("name", "name"),
    BodyField("bc_folder_id", "bc_folder_id"),
    BodyField("rank", "rank"),
) + _DOCUMENT_FIELDS + (BodyField("files_ids", "files_ids"),)

_UPDATE_DOCUMENT_FIELDS = (
    BodyField("name", "name", truthy_guarded=True),
    BodyField("bc_folder_id", "bc_folder_id", truthy_guarded=True),
    BodyField("rank", "rank"),
) + _DOCUMENT_FIELDS

_FOLDER_FIELDS = (
    BodyField("link", "link", truthy_guarded=True),
    BodyField("preview_url", "preview__url", truthy_guarded=True),
    BodyField("preview_meta_data", "preview__meta_data", truthy_guarded=True),
    BodyField("image_file_id", "image__file_id", truthy_guarded=True),
    BodyField("header_file_id", "header__file_id", truthy_guarded=True),
    BodyField("icon_text", "icon_text", truthy_guarded=True),
    BodyField("icon_bg_color", "icon_bg_color", truthy_guarded=True),
    BodyField("icon_text_color", "icon_text_color", truthy_guarded=True),
)

_CREATE_FOLDER_FIELDS = (
    BodyField("name", "name"),
    BodyField("parent_bc_folder_id", "parent__bc_folder_id"),
    BodyField("rank", "rank"),
) + _FOLDER_FIELDS

_UPDATE_FOLDER_FIELDS = (
    BodyField("name", "name", truthy_guarded=True),
    BodyField("parent_bc_folder_id", "parent__bc_folder_id", truthy_guarded=True),
    BodyField("rank", "rank"),
) + _FOLDER_FIELDS


def _optional_pairs(**filters: Any) -> QueryPairs:
    """Query pairs for the given filters; lists become repeated pairs."""
    pairs: QueryPairs = []
    for name, value in filters.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((name, str(item)) for item in value)
        else:
            pairs.append((name, str(value)))
    return pairs


def _element_path(params: ElementRefInput, *rest: Union[str, int]) -> Tuple[Union[str, int], ...]:
    return ("document", params.document_id, "revision", params.revision_id, "element") + rest


def _element_body(
    params: Union[CreateElementInput, UpdateElementInput]
) -> Dict[str, Any]:
    body: Dict[str, Any] = {}
    if params.rank is not None:
        body["rank"] = params.rank
    body["type"] = params.type
    body["data"] = params.data.model_dump(by_alias=True, exclude_none=True)
    if params.parent_element_id is not None:
        body["parent__bc_document_data_rev_id"] = params.parent_element_id
    return body


def list_documents_request(params: ListDocumentsInput) -> ApiRequest:
    query = _optional_pairs(
        rootId=params.root_id,
        bcId=params.bc_id,
        containsElements=params.contains_elements,
        containsFileExts=params.contains_file_exts,
    )
    return ApiRequest("GET", ("document",), tuple(query))


def create_document_request(
    params: CreateDocumentInput, omit_falsy: bool = False
) -> ApiRequest:
    return ApiRequest(
        "POST", ("document",), body=build_body(params, _CREATE_DOCUMENT_FIELDS, omit_falsy)
    )


def update_document_request(
    params: UpdateDocumentInput, omit_falsy: bool = False
) -> ApiRequest:
    return ApiRequest(
        "PUT",
        ("document", params.document_id),
        body=build_body(params, _UPDATE_DOCUMENT_FIELDS, omit_falsy),
    )


def list_folders_request(params: ListFoldersInput) -> ApiRequest:
    query = _optional_pairs(rootId=params.root_id, bcId=params.bc_id)
    return ApiRequest("GET", ("folder",), tuple(query))


def create_folder_request(params: CreateFolderInput, omit_falsy: bool = False) -> ApiRequest:
    return ApiRequest(
        "POST", ("folder",), body=build_body(params, _CREATE_FOLDER_FIELDS, omit_falsy)
    )


def update_folder_request(params: UpdateFolderInput, omit_falsy: bool = False) -> ApiRequest:
    return ApiRequest(
        "PUT",
        ("folder", params.folder_id),
        body=build_body(params, _UPDATE_FOLDER_FIELDS, omit_falsy),
    )


def list_files_request(params: ListFilesInput) -> ApiRequest:
    query: QueryPairs = []
    if params.query:
        query.append(("q", params.query))
    query.extend(
        [
            ("limit", str(params.limit)),
            ("offset", str(params.offset)),
            ("order", params.order),
            ("dir", params.dir),
        ]
    )
    return ApiRequest("GET", ("file",), tuple(query))


# ─── Tool Parameters ─────────────────────────────────────────────────────────

Domain = Annotated[
    Optional[str],
    Field(
        description="BrandCloud instance domain name (e.g. 'acme' for acme.brandcloud.pro). "
        "Defaults to BRANDCLOUD_DOMAIN."
    ),
]
DocumentId = Annotated[int, Field(description="Document ID")]
RevisionId = Annotated[int, Field(description="Document revision ID")]
ParentElementId = Annotated[Optional[int], Field(description="Parent element ID (for nested elements)")]
ElementDataParam = Annotated[ElementData, Field(description="Element data based on type")]
PreviewUrl = Annotated[Optional[str], Field(description="Preview image URL")]
PreviewMetaData = Annotated[Optional[str], Field(description="Metadata JSON for preview")]
AllowComments = Annotated[Optional[bool], Field(description="Allow comments on this document")]
RootId = Annotated[Optional[int], Field(description="List items below this folder ID")]
BcId = Annotated[Optional[int], Field(description="BrandCloud domain ID to filter by")]


# ─── Document Tools ──────────────────────────────────────────────────────────


@mcp.tool(
    name="list-documents",
    annotations={
        "title": "List BrandCloud Documents",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def list_documents(
    ctx: Context,
    domain: Domain = None,
    rootId: RootId = None,
    bcId: BcId = None,
    containsElements: Annotated[
        Optional[List[str]], Field(description="Filter documents containing these elements")
    ] = None,
    containsFileExts: Annotated[
        Optional[List[str]], Field(description="Filter documents containing these file extensions")
    ] = None,
) -> str:
    """List documents in BrandCloud.

    Returns all documents or filters them by folder, domain, contained
    elements or contained file extensions.

    Returns:
        str: The BrandCloud JSON response, pretty-printed.
    """
    params = ListDocumentsInput(
        domain=domain,
        root_id=rootId,
        bc_id=bcId,
        contains_elements=containsElements,
        contains_file_exts=containsFileExts,
    )
    return await _forward(ctx, params.domain, list_documents_request(params))


@mcp.tool(
    name="get-document",
    annotations={
        "title": "Get BrandCloud Document Details",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def get_document(
    ctx: Context,
    documentId: Annotated[int, Field(description="The ID of the document to retrieve")],
    domain: Domain = None,
) -> str:
    """Get a document with all of its elements, pages and content.

    Returns:
        str: The BrandCloud JSON response, pretty-printed.
    """
    params = GetDocumentInput(domain=domain, document_id=documentId)
    return await _forward(ctx, params.domain, ApiRequest("GET", ("document", params.document_id)))


@mcp.tool(
    name="create-document",
    annotations={
        "title": "Create BrandCloud Document",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def create_document(
    ctx: Context,
    name: Annotated[str, Field(description="Document name (same as page 1 header)")],
    bcFolderId: Annotated[int, Field(description="Folder ID where the document will be created")],
    domain: Domain = None,
    rank: Annotated[int, Field(description="Display order of the document")] = 1,
    allowComments: AllowComments = None,
    previewUrl: PreviewUrl = None,
    previewMetaData: PreviewMetaData = None,
    imageFileId: Annotated[Optional[int], Field(description="File ID for document icon image")] = None,
    filesIds: Annotated[Optional[List[int]], Field(description="File IDs to create document with")] = None,
    iconText: Annotated[Optional[str], Field(description="Text over image/bg on document icon")] = None,
    iconBgColor: Annotated[Optional[str], Field(description="Document icon background color")] = None,
    iconTextColor: Annotated[Optional[str], Field(description="Document icon text color")] = None,
) -> str:
    """Create a new document in BrandCloud within a specified folder.

    Returns:
        str: The created document as returned by BrandCloud.
    """
    params = CreateDocumentInput(
        domain=domain,
        name=name,
        bc_folder_id=bcFolderId,
        rank=rank,
        allow_comments=allowComments,
        preview_url=previewUrl,
        preview_meta_data=previewMetaData,
        image_file_id=imageFileId,
        files_ids=filesIds,
        icon_text=iconText,
        icon_bg_color=iconBgColor,
        icon_text_color=iconTextColor,
    )
    return await _forward(
        ctx, params.domain, create_document_request(params, CONFIG.omit_falsy_fields)
    )


@mcp.tool(
    name="update-document",
    annotations={
        "title": "Update BrandCloud Document",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def update_document(
    ctx: Context,
    documentId: Annotated[int, Field(description="The ID of the document to update")],
    domain: Domain = None,
    name: Annotated[Optional[str], Field(description="New document name")] = None,
    bcFolderId: Annotated[Optional[int], Field(description="Move to this folder ID")] = None,
    rank: Annotated[Optional[int], Field(description="New display order")] = None,
    allowComments: AllowComments = None,
    previewUrl: PreviewUrl = None,
    previewMetaData: PreviewMetaData = None,
    imageFileId: Annotated[Optional[int], Field(description="File ID for document icon image")] = None,
    iconText: Annotated[Optional[str], Field(description="Text over image/bg on document icon")] = None,
    iconBgColor: Annotated[Optional[str], Field(description="Document icon background color")] = None,
    iconTextColor: Annotated[Optional[str], Field(description="Document icon text color")] = None,
) -> str:
    """Update a document's name, folder, rank or icon settings.

    Only the fields given are sent.

    Returns:
        str: The BrandCloud JSON response, pretty-printed.
    """
    params = UpdateDocumentInput(
        domain=domain,
        document_id=documentId,
        name=name,
        bc_folder_id=bcFolderId,
        rank=rank,
        allow_comments=allowComments,
        preview_url=previewUrl,
        preview_meta_data=previewMetaData,
        image_file_id=imageFileId,
        icon_text=iconText,
        icon_bg_color=iconBgColor,
        icon_text_color=iconTextColor,
    )
    return await _forward(
        ctx, params.domain, update_document_request(params, CONFIG.omit_falsy_fields)
    )


@mcp.tool(
    name="delete-documents",
    annotations={
        "title": "Delete BrandCloud Documents",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def delete_documents(
    ctx: Context,
    documentIds: Annotated[List[int], Field(description="Array of document IDs to move to trash")],
    domain: Domain = None,
) -> str:
    """Move documents to trash (soft delete). They can be restored later.

    Returns:
        str: A success envelope, or BrandCloud's error JSON.
    """
    params = DeleteDocumentsInput(domain=domain, document_ids=documentIds)
    request = ApiRequest("DELETE", ("document",), body={"ids": params.document_ids})
    return await _forward(ctx, params.domain, request, trash_entity="Documents")


@mcp.tool(
    name="publish-document-revision",
    annotations={
        "title": "Publish Document Revision",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def publish_document_revision(
    ctx: Context,
    documentId: DocumentId,
    revisionId: Annotated[int, Field(description="Document revision ID to publish")],
    domain: Domain = None,
) -> str:
    """Publish a document revision so users can see it.

    Element changes only take effect once their revision is published.

    Returns:
        str: The BrandCloud JSON response, pretty-printed.
    """
    params = PublishRevisionInput(domain=domain, document_id=documentId, revision_id=revisionId)
    request = ApiRequest(
        "POST", ("document", params.document_id, "revision", params.revision_id)
    )
    return await _forward(ctx, params.domain, request)


# ─── Folder Tools ────────────────────────────────────────────────────────────


@mcp.tool(
    name="list-folders",
    annotations={
        "title": "List BrandCloud Folders",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def list_folders(
    ctx: Context,
    domain: Domain = None,
    rootId: RootId = None,
    bcId: BcId = None,
) -> str:
    """List the folder tree from a parent folder, or from the root.

    Returns:
        str: The folder tree JSON, pretty-printed.
    """
    params = ListFoldersInput(domain=domain, root_id=rootId, bc_id=bcId)
    return await _forward(ctx, params.domain, list_folders_request(params))


@mcp.tool(
    name="get-folder",
    annotations={
        "title": "Get BrandCloud Folder Details",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def get_folder(
    ctx: Context,
    folderId: Annotated[int, Field(description="The ID of the folder to retrieve")],
    domain: Domain = None,
) -> str:
    """Get a single folder by ID."""
    params = GetFolderInput(domain=domain, folder_id=folderId)
    return await _forward(ctx, params.domain, ApiRequest("GET", ("folder", params.folder_id)))


@mcp.tool(
    name="create-folder",
    annotations={
        "title": "Create BrandCloud Folder",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def create_folder(
    ctx: Context,
    name: Annotated[str, Field(description="Folder name")],
    parentBcFolderId: Annotated[int, Field(description="Parent folder ID")],
    domain: Domain = None,
    rank: Annotated[int, Field(description="Display order of the folder")] = 1,
    link: Annotated[Optional[str], Field(description="External link URL for the folder")] = None,
    previewUrl: PreviewUrl = None,
    previewMetaData: PreviewMetaData = None,
    imageFileId: Annotated[Optional[int], Field(description="File ID for folder icon image")] = None,
    headerFileId: Annotated[Optional[int], Field(description="File ID for folder header image")] = None,
    iconText: Annotated[Optional[str], Field(description="Text over image/bg on folder icon")] = None,
    iconBgColor: Annotated[Optional[str], Field(description="Folder icon background color")] = None,
    iconTextColor: Annotated[Optional[str], Field(description="Folder icon text color")] = None,
) -> str:
    """Create a new folder inside a parent folder.

    Returns:
        str: The created folder as returned by BrandCloud.
    """
    params = CreateFolderInput(
        domain=domain,
        name=name,
        parent_bc_folder_id=parentBcFolderId,
        rank=rank,
        link=link,
        preview_url=previewUrl,
        preview_meta_data=previewMetaData,
        image_file_id=imageFileId,
        header_file_id=headerFileId,
        icon_text=iconText,
        icon_bg_color=iconBgColor,
        icon_text_color=iconTextColor,
    )
    return await _forward(
        ctx, params.domain, create_folder_request(params, CONFIG.omit_falsy_fields)
    )


@mcp.tool(
    name="update-folder",
    annotations={
        "title": "Update BrandCloud Folder",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def update_folder(
    ctx: Context,
    folderId: Annotated[int, Field(description="The ID of the folder to update")],
    domain: Domain = None,
    name: Annotated[Optional[str], Field(description="New folder name")] = None,
    parentBcFolderId: Annotated[Optional[int], Field(description="Move to this parent folder ID")] = None,
    rank: Annotated[Optional[int], Field(description="New display order")] = None,
    link: Annotated[Optional[str], Field(description="External link URL")] = None,
    previewUrl: PreviewUrl = None,
    previewMetaData: PreviewMetaData = None,
    imageFileId: Annotated[Optional[int], Field(description="File ID for folder icon image")] = None,
    headerFileId: Annotated[Optional[int], Field(description="File ID for folder header image")] = None,
    iconText: Annotated[Optional[str], Field(description="Text over image/bg on folder icon")] = None,
    iconBgColor: Annotated[Optional[str], Field(description="Folder icon background color")] = None,
    iconTextColor: Annotated[Optional[str], Field(description="Folder icon text color")] = None,
) -> str:
    """Update a folder's name, parent, rank or icon settings.

    Only the fields given are sent.

    Returns:
        str: The BrandCloud JSON response, pretty-printed.
    """
    params = UpdateFolderInput(
        domain=domain,
        folder_id=folderId,
        name=name,
        parent_bc_folder_id=parentBcFolderId,
        rank=rank,
        link=link,
        preview_url=previewUrl,
        preview_meta_data=previewMetaData,
        image_file_id=imageFileId,
        header_file_id=headerFileId,
        icon_text=iconText,
        icon_bg_color=iconBgColor,
        icon_text_color=iconTextColor,
    )
    return await _forward(
        ctx, params.domain, update_folder_request(params, CONFIG.omit_falsy_fields)
    )


@mcp.tool(
    name="delete-folders",
    annotations={
        "title": "Delete BrandCloud Folders",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def delete_folders(
    ctx: Context,
    folderIds: Annotated[List[int], Field(description="Array of folder IDs to move to trash")],
    domain: Domain = None,
) -> str:
    """Move folders and their contents to trash (soft delete).

    Returns:
        str: A success envelope, or BrandCloud's error JSON.
    """
    params = DeleteFoldersInput(domain=domain, folder_ids=folderIds)
    request = ApiRequest("DELETE", ("folder",), body={"ids": params.folder_ids})
    return await _forward(ctx, params.domain, request, trash_entity="Folders")


# ─── Element Tools ───────────────────────────────────────────────────────────


@mcp.tool(
    name="list-elements",
    annotations={
        "title": "List Document Elements",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def list_elements(
    ctx: Context,
    documentId: DocumentId,
    revisionId: RevisionId,
    domain: Domain = None,
) -> str:
    """List the elements of a document revision."""
    params = ListElementsInput(domain=domain, document_id=documentId, revision_id=revisionId)
    return await _forward(ctx, params.domain, ApiRequest("GET", _element_path(params)))


@mcp.tool(
    name="get-element",
    annotations={
        "title": "Get Document Element",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def get_element(
    ctx: Context,
    documentId: DocumentId,
    revisionId: RevisionId,
    elementId: Annotated[int, Field(description="Element ID to retrieve")],
    domain: Domain = None,
) -> str:
    """Get a single element of a document revision."""
    params = GetElementInput(
        domain=domain, document_id=documentId, revision_id=revisionId, element_id=elementId
    )
    return await _forward(
        ctx, params.domain, ApiRequest("GET", _element_path(params, params.element_id))
    )


@mcp.tool(
    name="create-element",
    annotations={
        "title": "Create Document Element",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def create_element(
    ctx: Context,
    documentId: DocumentId,
    revisionId: RevisionId,
    type: Annotated[ElementType, Field(description="Type of element to create")],
    data: ElementDataParam,
    domain: Domain = None,
    parentElementId: ParentElementId = None,
    rank: Annotated[int, Field(description="Display order of the element")] = 1,
) -> str:
    """Add an element (page, header, text, color, color-row, embed) to a document.

    The element lands in the given revision; publish the revision afterwards
    with publish-document-revision.

    Returns:
        str: The created element as returned by BrandCloud.
    """
    params = CreateElementInput(
        domain=domain,
        document_id=documentId,
        revision_id=revisionId,
        parent_element_id=parentElementId,
        rank=rank,
        type=type,
        data=data,
    )
    request = ApiRequest("POST", _element_path(params), body=_element_body(params))
    return await _forward(ctx, params.domain, request)


@mcp.tool(
    name="update-element",
    annotations={
        "title": "Update Document Element",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def update_element(
    ctx: Context,
    documentId: DocumentId,
    revisionId: RevisionId,
    elementId: Annotated[int, Field(description="Element ID to update")],
    type: Annotated[ElementType, Field(description="Type of element")],
    data: ElementDataParam,
    domain: Domain = None,
    parentElementId: ParentElementId = None,
    rank: Annotated[Optional[int], Field(description="Display order of the element")] = None,
) -> str:
    """Update an existing element in a document revision.

    Returns:
        str: The BrandCloud JSON response, pretty-printed.
    """
    params = UpdateElementInput(
        domain=domain,
        document_id=documentId,
        revision_id=revisionId,
        element_id=elementId,
        parent_element_id=parentElementId,
        rank=rank,
        type=type,
        data=data,
    )
    request = ApiRequest(
        "PUT", _element_path(params, params.element_id), body=_element_body(params)
    )
    return await _forward(ctx, params.domain, request)


@mcp.tool(
    name="delete-element",
    annotations={
        "title": "Delete Document Element",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def delete_element(
    ctx: Context,
    documentId: DocumentId,
    revisionId: RevisionId,
    elementId: Annotated[int, Field(description="Element ID to delete")],
    domain: Domain = None,
) -> str:
    """Delete an element from a document revision."""
    params = DeleteElementInput(
        domain=domain, document_id=documentId, revision_id=revisionId, element_id=elementId
    )
    request = ApiRequest("DELETE", _element_path(params, params.element_id))
    return await _forward(ctx, params.domain, request)


# ─── File & Search Tools ─────────────────────────────────────────────────────


@mcp.tool(
    name="list-files",
    annotations={
        "title": "List BrandCloud Files",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def list_files(
    ctx: Context,
    domain: Domain = None,
    query: Annotated[Optional[str], Field(description="Search text in files")] = None,
    limit: Annotated[int, Field(description="Number of items to return")] = 100,
    offset: Annotated[int, Field(description="Number of items to skip")] = 0,
    order: Annotated[FileOrder, Field(description="Order by column")] = "uploaded",
    dir: Annotated[SortDirection, Field(description="Order direction")] = "desc",
) -> str:
    """List files in BrandCloud storage with optional search and sorting.

    Returns:
        str: File metadata (size, type, upload date, ...) as JSON.
    """
    params = ListFilesInput(
        domain=domain, query=query, limit=limit, offset=offset, order=order, dir=dir
    )
    return await _forward(ctx, params.domain, list_files_request(params))


@mcp.tool(
    name="search-brandcloud",
    annotations={
        "title": "Search BrandCloud",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def search_brandcloud(
    ctx: Context,
    query: Annotated[str, Field(description="Search query text")],
    domain: Domain = None,
) -> str:
    """Search folders, documents and files.

    Returns:
        str: Matching items with breadcrumbs and previews, as JSON.
    """
    params = SearchInput(domain=domain, query=query)
    return await _forward(ctx, params.domain, ApiRequest("GET", ("search", params.query)))


@mcp.tool(
    name="get-file-image",
    annotations={
        "title": "View BrandCloud Image",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def get_file_image(
    ctx: Context,
    fileId: Annotated[int, Field(description="The ID of the file to download")],
    domain: Domain = None,
    size: Annotated[
        ImageSize, Field(description="Size variant to download (original, medium, or small)")
    ] = "medium",
    saveToWorkspace: Annotated[
        bool,
        Field(description="If true, saves to workspace downloads folder instead of temp directory"),
    ] = False,
):
    """Download and view an image file from BrandCloud.

    Useful for logos, photos, brand colors, typography examples and other
    visual assets. The file is also saved locally, either under
    ./downloads or in a temp directory.

    Returns:
        list: The image as base64 content, plus a JSON summary of the download.
    """
    params = GetFileImageInput(
        domain=domain, file_id=fileId, size=size, save_to_workspace=saveToWorkspace
    )
    config = CONFIG
    credential = resolve_credential(transport_context(ctx), config)
    downloaded = await retrieve_file_image(
        config,
        credential,
        config.resolve_domain(params.domain),
        params.file_id,
        size=params.size,
        save_to_workspace=params.save_to_workspace,
    )
    return [
        ImageContent(
            type="image",
            data=base64.b64encode(downloaded.data).decode("ascii"),
            mimeType=downloaded.mime_type,
        ),
        TextContent(type="text", text=json.dumps(downloaded.summary(), indent=2)),
    ]


# ─── Entry Point ─────────────────────────────────────────────────────────────


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="BrandCloud MCP server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "streamable-http"],
        default=os.environ.get("MCP_TRANSPORT", "stdio"),
        help="MCP transport (default: $MCP_TRANSPORT or stdio)",
    )
    args = parser.parse_args(argv)

    # stdout carries the stdio protocol stream, so logs go to stderr
    logging.basicConfig(
        level=CONFIG.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
        force=True,
    )
    if args.transport == "streamable-http":
        logger.info("Serving BrandCloud MCP on http://%s:%s/mcp", CONFIG.host, CONFIG.port)
    mcp.run(transport=args.transport)


if __name__ == "__main__":
    main()
