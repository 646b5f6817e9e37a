"""Unit tests for models.confluence_page module."""

from confluence_export.models.confluence_page import Attachment, Page, UserInfo


class TestPage:
    """Test cases for Page.from_api."""

    def test_full_response(self):
        """Body, space and links are read from an expanded response."""
        page = Page.from_api({
            'id': 123,
            'type': 'page',
            'status': 'current',
            'title': 'Release Notes',
            'body': {'storage': {'value': '<p>Hi</p>', 'representation': 'storage'}},
            'space': {'key': 'DOC', 'name': 'Documentation', 'type': 'global'},
            '_links': {'webui': '/spaces/DOC/pages/123', 'self': 'https://x/rest/api/content/123'},
        })

        assert page.id == '123'
        assert page.title == 'Release Notes'
        assert page.storage == '<p>Hi</p>'
        assert page.space.key == 'DOC'
        assert page.space.kind == 'global'
        assert page.links.webui == '/spaces/DOC/pages/123'
        assert page.links.self_link == 'https://x/rest/api/content/123'

    def test_minimal_response(self):
        """Child listings without expansions have no body or space."""
        page = Page.from_api({'id': '7', 'title': 'Child'})

        assert page.storage is None
        assert page.space is None
        assert page.links is None
        assert page.kind == 'page'

    def test_empty_storage_is_kept(self):
        """An empty body is a body, not a missing one."""
        page = Page.from_api({'id': '1', 'title': 'Empty', 'body': {'storage': {'value': ''}}})
        assert page.storage == ''


class TestAttachment:
    """Test cases for Attachment.from_api."""

    def test_attachment_fields(self):
        """Media type, size and download link are extracted."""
        attachment = Attachment.from_api({
            'id': 'att9',
            'type': 'attachment',
            'title': 'diagram.png',
            'extensions': {'mediaType': 'image/png', 'fileSize': 2048},
            '_links': {'download': '/download/attachments/1/diagram.png?version=1'},
        })

        assert attachment.id == 'att9'
        assert attachment.title == 'diagram.png'
        assert attachment.media_type == 'image/png'
        assert attachment.file_size == 2048
        assert attachment.download_link == '/download/attachments/1/diagram.png?version=1'

    def test_missing_links(self):
        """Attachments without links have no download link."""
        assert Attachment.from_api({'id': 'a', 'title': 'x'}).download_link is None


class TestUserInfo:
    """Test cases for UserInfo.from_api."""

    def test_user_fields(self):
        """Account ID, names and e-mail are read."""
        user = UserInfo.from_api({
            'accountId': 'abc',
            'displayName': 'Jane Doe',
            'email': 'jane@example.com',
            'publicName': 'jane',
        })

        assert user == UserInfo(
            account_id='abc',
            display_name='Jane Doe',
            email='jane@example.com',
            public_name='jane',
        )
