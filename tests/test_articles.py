"""Article creation, upload and rendering scenarios."""
import os

import pytest
import pytest_asyncio

from newsdesk.models import safe_article_file_name
from newsdesk.trust import EncodingError, FileField, SessionContext, Unauthenticated

TITLE = 'Příliš žluťoučký kůň'
FILE_NAME = 'prilis-zlutoucky-kun.html'


@pytest_asyncio.fixture
async def editor(controller):
    await controller.db_user().setup_user().username('alice').password('secret').author_name('Alice').create()
    return await controller.login().username('alice').password('secret').authenticate()


def article(controller, session):
    return (
        controller.create_article(session)
        .title(TITLE)
        .category('veda')
        .short_text('Krátký text')
        .text('First paragraph\n\nSecond paragraph')
        .image_desc('Kůň')
        .image_any_png()
    )


class TestCreateArticle:
    @pytest.mark.asyncio
    async def test_create_article_with_image(self, app, controller, editor):
        verifier = await article(controller, editor).main(True).execute()

        verifier.status(303).header_location('/account').verify()
        record = await (
            controller.db_article().must_see(FILE_NAME)
            .title(TITLE)
            .author('Alice')
            .username('alice')
            .category('veda')
            .is_main(True)
            .is_exclusive(False)
            .verify()
        )
        stored = os.path.join(app.config['UPLOAD_FOLDER'], record.image_filename)
        assert os.path.exists(stored)

    @pytest.mark.asyncio
    async def test_article_page_renders_paragraphs(self, controller, editor):
        (await article(controller, editor).execute()).status(303).verify()

        page = await controller.web().get_url(f'/{FILE_NAME}')

        page.status(200).body_contains(TITLE).body_contains('<p>First paragraph</p>').body_contains(
            '<p>Second paragraph</p>'
        ).verify()

    @pytest.mark.asyncio
    async def test_account_lists_own_articles(self, controller, editor):
        (await article(controller, editor).execute()).status(303).verify()

        page = await controller.web(editor).get_url('/account')

        page.status(200).body_contains('My articles').body_contains(FILE_NAME).verify()

    @pytest.mark.asyncio
    async def test_explicit_author_wins(self, controller, editor):
        (await article(controller, editor).author('Guest Writer').execute()).status(303).verify()

        await controller.db_article().must_see(FILE_NAME).author('Guest Writer').verify()

    @pytest.mark.asyncio
    async def test_duplicate_title_is_rejected(self, controller, editor):
        (await article(controller, editor).execute()).status(303).verify()

        (await article(controller, editor).execute()).status(400).verify()

    @pytest.mark.asyncio
    async def test_anonymous_create_needs_session(self, controller):
        with pytest.raises(Unauthenticated):
            await article(controller, SessionContext.empty()).execute()


class TestArticleValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize('field, value', [
        ('title', 'Bad\x01title'),
        ('text', 'Body with \x07 bell'),
        ('short_text', '\x1b[31m'),
    ])
    async def test_control_characters_are_rejected(self, controller, editor, field, value):
        flow = article(controller, editor)
        getattr(flow, field)(value)

        (await flow.execute()).status(400).verify()

    @pytest.mark.asyncio
    async def test_unknown_category_is_rejected(self, controller, editor):
        (await article(controller, editor).category('sport').execute()).status(400).verify()

    @pytest.mark.asyncio
    async def test_non_image_upload_is_rejected(self, controller, editor):
        flow = article(controller, editor).image(FileField('notes.png', b'not an image', 'image/png'))

        (await flow.execute()).status(400).verify()
        await controller.db_article().must_not_see(FILE_NAME).verify()

    @pytest.mark.asyncio
    async def test_missing_image_fails_before_dispatch(self, controller, editor):
        flow = article(controller, editor).image(None)

        with pytest.raises(EncodingError):
            await flow.execute()


class TestArticlePage:
    @pytest.mark.asyncio
    async def test_seeded_article_is_rendered(self, controller):
        await (
            controller.db_article().setup_article()
            .file_name('old-news.html')
            .title('Old news')
            .username('alice')
            .category('republika')
            .text('Body')
            .create()
        )

        (await controller.web().get_url('/old-news.html')).status(200).body_contains('Old news').verify()
        (await controller.web().get_url('/missing.html')).status(404).verify()


def test_file_name_from_title():
    assert safe_article_file_name(TITLE) == 'prilis-zlutoucky-kun'
    assert safe_article_file_name('COVID-19: 2. vlna') == 'covid-19--2--vlna'
