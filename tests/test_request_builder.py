"""Tests for URL, query and body construction."""

import httpx
import pytest
from pydantic import ValidationError

from brandcloud_mcp_server import (
    ApiRequest,
    BrandCloudConfig,
    CreateDocumentInput,
    CreateElementInput,
    CreateFolderInput,
    DeleteDocumentsInput,
    DeleteFoldersInput,
    ListDocumentsInput,
    ListFilesInput,
    ListFoldersInput,
    UpdateDocumentInput,
    UpdateElementInput,
    UpdateFolderInput,
    _element_body,
    build_request,
    build_url,
    create_document_request,
    create_folder_request,
    list_documents_request,
    list_files_request,
    list_folders_request,
    update_document_request,
    update_folder_request,
)

CONFIG = BrandCloudConfig()


def _query_pairs(url: str):
    return httpx.URL(url).params.multi_items()


class TestBuildUrl:
    def test_base_url_and_credential_first(self):
        url = build_url("acme", ("document",), [("rootId", "3")], "KEY123", CONFIG)
        assert url == "https://acme.brandcloud.pro/api/v2/document?apiKey=KEY123&rootId=3"

    def test_no_credential_no_query(self):
        url = build_url("acme", ("document", 5), [], None, CONFIG)
        assert url == "https://acme.brandcloud.pro/api/v2/document/5"

    def test_nested_element_path(self):
        url = build_url(
            "acme", ("document", 1, "revision", 2, "element", 3), [], None, CONFIG
        )
        assert url.endswith("/api/v2/document/1/revision/2/element/3")

    def test_search_query_is_one_encoded_segment(self):
        url = build_url("acme", ("search", "logo/dark mode?"), [], None, CONFIG)
        assert url == "https://acme.brandcloud.pro/api/v2/search/logo%2Fdark%20mode%3F"

    def test_search_query_keeps_sub_delimiters(self):
        url = build_url("acme", ("search", "it's (new)!*"), [], None, CONFIG)
        assert url == "https://acme.brandcloud.pro/api/v2/search/it's%20(new)!*"


class TestBuildRequest:
    def test_get_has_no_body_or_content_type(self):
        prepared = build_request(CONFIG, "acme", None, ApiRequest("GET", ("file",)))
        assert prepared.method == "GET"
        assert prepared.content is None
        assert prepared.headers == {"Accept": "application/json"}

    def test_body_is_compact_json(self):
        request = ApiRequest("DELETE", ("folder",), body={"ids": [1, 2]})
        prepared = build_request(CONFIG, "acme", "K", request)
        assert prepared.headers["Content-Type"] == "application/json"
        assert prepared.content == b'{"ids":[1,2]}'


class TestQueryFilters:
    def test_array_filters_repeat_the_parameter(self):
        params = ListDocumentsInput(containsElements=["page", "text"], containsFileExts=["pdf"])
        request = list_documents_request(params)
        url = build_url("acme", request.path, request.query, "K", CONFIG)
        assert _query_pairs(url) == [
            ("apiKey", "K"),
            ("containsElements", "page"),
            ("containsElements", "text"),
            ("containsFileExts", "pdf"),
        ]

    def test_zero_ids_are_sent(self):
        request = list_folders_request(ListFoldersInput(rootId=0, bcId=4))
        assert request.query == (("rootId", "0"), ("bcId", "4"))

    def test_unset_filters_are_omitted(self):
        assert list_documents_request(ListDocumentsInput()).query == ()

    def test_list_files_defaults(self):
        request = list_files_request(ListFilesInput())
        assert request.query == (
            ("limit", "100"),
            ("offset", "0"),
            ("order", "uploaded"),
            ("dir", "desc"),
        )

    def test_list_files_search_text_comes_first(self):
        request = list_files_request(ListFilesInput(query="logo", order="name", dir="asc"))
        assert request.query[0] == ("q", "logo")
        assert ("order", "name") in request.query


class TestDocumentBodies:
    def test_create_document_minimal(self):
        params = CreateDocumentInput(name="Brand Guide", bcFolderId=42)
        request = create_document_request(params)
        assert request.method == "POST"
        assert request.path == ("document",)
        assert request.body == {"name": "Brand Guide", "bc_folder_id": 42, "rank": 1}

    def test_create_document_renames_fields(self):
        params = CreateDocumentInput(
            name="Guide",
            bcFolderId=1,
            allowComments=False,
            previewUrl="https://img",
            previewMetaData="{}",
            imageFileId=9,
            filesIds=[1, 2],
            iconText="G",
            iconBgColor="#fff",
            iconTextColor="#000",
        )
        body = create_document_request(params).body
        assert body["allow_comments"] is False
        assert body["preview__url"] == "https://img"
        assert body["preview__meta_data"] == "{}"
        assert body["image__file_id"] == 9
        assert body["files_ids"] == [1, 2]
        assert body["icon_text"] == "G"
        assert body["icon_bg_color"] == "#fff"
        assert body["icon_text_color"] == "#000"

    def test_update_document_omits_unset_fields(self):
        body = update_document_request(UpdateDocumentInput(documentId=7, rank=3)).body
        assert body == {"rank": 3}
        assert None not in body.values()

    def test_update_document_path(self):
        request = update_document_request(UpdateDocumentInput(documentId=7))
        assert request.method == "PUT"
        assert request.path == ("document", 7)
        assert request.body == {}


class TestFalsyPolicy:
    def test_zero_is_sent_by_default(self):
        params = UpdateDocumentInput(documentId=7, imageFileId=0, bcFolderId=0)
        body = update_document_request(params).body
        assert body == {"bc_folder_id": 0, "image__file_id": 0}

    def test_legacy_policy_drops_truthy_guarded_zero(self):
        params = UpdateDocumentInput(documentId=7, imageFileId=0, bcFolderId=0, rank=0)
        body = update_document_request(params, omit_falsy=True).body
        assert body == {"rank": 0}

    def test_legacy_policy_keeps_required_create_fields(self):
        params = CreateFolderInput(name="Logos", parentBcFolderId=0, headerFileId=0, link="")
        body = create_folder_request(params, omit_falsy=True).body
        assert body == {"name": "Logos", "parent__bc_folder_id": 0, "rank": 1}

    def test_legacy_policy_keeps_false_booleans(self):
        params = UpdateDocumentInput(documentId=7, allowComments=False)
        assert update_document_request(params, omit_falsy=True).body == {"allow_comments": False}


class TestFolderBodies:
    def test_create_folder(self):
        params = CreateFolderInput(name="Logos", parentBcFolderId=3, link="https://x", headerFileId=8)
        body = create_folder_request(params).body
        assert body == {
            "name": "Logos",
            "parent__bc_folder_id": 3,
            "rank": 1,
            "link": "https://x",
            "header__file_id": 8,
        }

    def test_update_folder(self):
        request = update_folder_request(UpdateFolderInput(folderId=5, parentBcFolderId=2))
        assert request.path == ("folder", 5)
        assert request.body == {"parent__bc_folder_id": 2}


class TestElementBodies:
    def test_create_color_element(self):
        params = CreateElementInput(
            documentId=1,
            revisionId=2,
            type="color",
            data={"name": "Brand Red", "r": 200, "g": 16, "b": 46},
        )
        assert _element_body(params) == {
            "rank": 1,
            "type": "color",
            "data": {"name": "Brand Red", "r": 200, "g": 16, "b": 46},
        }

    def test_page_data_keeps_remote_key_names(self):
        params = CreateElementInput(
            documentId=1,
            revisionId=2,
            type="page",
            data={"header": "Intro", "showStock": True},
            parentElementId=0,
        )
        body = _element_body(params)
        assert body["data"] == {"header": "Intro", "showStock": True}
        assert body["parent__bc_document_data_rev_id"] == 0

    def test_update_element_without_rank(self):
        params = UpdateElementInput(
            documentId=1, revisionId=2, elementId=3, type="text", data={"html": "<p>Hi</p>"}
        )
        assert _element_body(params) == {"type": "text", "data": {"html": "<p>Hi</p>"}}

    def test_color_channel_out_of_range_is_rejected(self):
        with pytest.raises(ValidationError):
            CreateElementInput(
                documentId=1, revisionId=2, type="color", data={"name": "x", "r": 300, "g": 0, "b": 0}
            )


class TestInputValidation:
    def test_unknown_keys_are_rejected(self):
        with pytest.raises(ValidationError):
            CreateDocumentInput(name="Guide", bcFolderId=1, colour="red")

    def test_snake_case_names_are_accepted(self):
        params = CreateDocumentInput(name="Guide", bc_folder_id=1)
        assert params.bc_folder_id == 1

    def test_unknown_element_type_is_rejected(self):
        with pytest.raises(ValidationError):
            CreateElementInput(documentId=1, revisionId=2, type="video", data={"html": "x"})

    def test_whitespace_is_preserved(self):
        params = CreateDocumentInput(name="  Brand Guide ", bcFolderId=1, iconText=" G")
        body = create_document_request(params).body
        assert body["name"] == "  Brand Guide "
        assert body["icon_text"] == " G"

    def test_list_files_search_text_is_not_trimmed(self):
        request = list_files_request(ListFilesInput(query=" logo "))
        assert request.query[0] == ("q", " logo ")

    def test_empty_delete_lists_are_accepted(self):
        assert DeleteDocumentsInput(documentIds=[]).document_ids == []
        assert DeleteFoldersInput(folderIds=[]).folder_ids == []

    def test_list_files_accepts_zero_limit(self):
        request = list_files_request(ListFilesInput(limit=0))
        assert ("limit", "0") in request.query
