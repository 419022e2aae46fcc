"""Tests for the chainable builders and their snapshots."""
import copy
import io
import threading
from dataclasses import replace

from PIL import Image

from newsdesk.trust import assemble
from newsdesk.trust.data import ArticleData, ArticleFluent, LoginData, LoginFluent, UserData
from newsdesk.trust.media import PNG_SIGNATURE, FileField, png_bytes
from newsdesk.trust.session import LOGIN_SHAPE


class TestSnapshot:
    """Snapshots reflect exactly the fields that were set."""

    def test_unset_fields_are_none(self):
        snapshot = LoginFluent().username('alice').snapshot()

        assert snapshot.username == 'alice'
        assert snapshot.password is None
        assert snapshot.present() == {'username': 'alice'}

    def test_empty_string_is_distinct_from_unset(self):
        snapshot = LoginFluent().username('').snapshot()

        assert snapshot.is_set('username')
        assert not snapshot.is_set('password')
        assert snapshot.present() == {'username': ''}

    def test_none_unsets_a_field(self):
        snapshot = LoginFluent().username('alice').username(None).snapshot()

        assert snapshot.present() == {}

    def test_present_follows_assignment_order(self):
        snapshot = ArticleFluent().text('X').title('T').category('veda').snapshot()

        assert list(snapshot.present()) == ['text', 'title', 'category']

    def test_reassignment_keeps_first_position(self):
        snapshot = ArticleFluent().title('A').text('X').title('B').snapshot()

        assert snapshot.present() == {'title': 'B', 'text': 'X'}

    def test_hand_built_snapshot_uses_declaration_order(self):
        snapshot = UserData(needs_password_change=True, username='alice')

        assert list(snapshot.present()) == ['username', 'needs_password_change']

    def test_replace_with_none_unsets_field(self):
        snapshot = replace(LoginFluent().username('alice').password('secret').snapshot(), password=None)

        assert snapshot.present() == {'username': 'alice'}
        assert assemble(snapshot, LOGIN_SHAPE).body == b'username=alice'

    def test_replace_with_value_sets_field(self):
        snapshot = replace(LoginFluent().username('alice').snapshot(), password='secret')

        assert snapshot.present() == {'username': 'alice', 'password': 'secret'}
        assert assemble(snapshot, LOGIN_SHAPE).body == b'username=alice&password=secret'

    def test_replace_keeps_assignment_order_first(self):
        snapshot = replace(ArticleFluent().text('X').title('T').snapshot(), category='veda')

        assert list(snapshot.present()) == ['text', 'title', 'category']

    def test_assignment_order_does_not_affect_equality(self):
        first = LoginFluent().username('a').password('b').snapshot()
        second = LoginFluent().password('b').username('a').snapshot()

        assert first == second

    def test_snapshot_twice_is_equal(self):
        builder = LoginFluent().username('alice').password('secret')

        assert builder.snapshot() == builder.snapshot()

    def test_later_setters_do_not_change_earlier_snapshot(self):
        builder = LoginFluent().username('alice')
        before = builder.snapshot()

        builder.username('bob').password('secret')

        assert before == LoginData(username='alice')
        assert builder.snapshot().username == 'bob'

    def test_reset_clears_state(self):
        builder = LoginFluent().username('alice')

        assert builder.reset().snapshot().present() == {}


class TestSharedState:
    """All aliases of one builder share one state."""

    def test_setters_return_same_instance(self):
        builder = LoginFluent()

        assert builder.username('alice') is builder
        assert builder.password('secret') is builder

    def test_copy_shares_state(self):
        builder = LoginFluent().username('alice')
        alias = copy.copy(builder)

        alias.password('secret')

        assert builder.snapshot() == LoginData(username='alice', password='secret')

    def test_factory_instances_are_independent(self):
        first = LoginFluent().username('alice')
        second = LoginFluent().username('bob')

        assert first.snapshot().username == 'alice'
        assert second.snapshot().username == 'bob'

    def test_concurrent_writers_never_tear(self):
        builder = ArticleFluent()
        values = [f'title-{n}' for n in range(50)]

        def write(value):
            for _ in range(200):
                builder.title(value).text(value)

        threads = [threading.Thread(target=write, args=(value,)) for value in values]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        snapshot = builder.snapshot()
        assert snapshot.title in values
        assert snapshot.text in values


class TestArticleBuilder:
    def test_image_any_png_attaches_png(self):
        snapshot = ArticleFluent().image_any_png().snapshot()

        assert isinstance(snapshot.image, FileField)
        assert snapshot.image.content_type == 'image/png'
        assert snapshot.image.content.startswith(PNG_SIGNATURE)

    def test_png_bytes_decode_to_requested_size(self):
        with Image.open(io.BytesIO(png_bytes(3, 2, (255, 0, 0)))) as image:
            assert image.size == (3, 2)
            assert image.getpixel((2, 1)) == (255, 0, 0)

    def test_flags_keep_their_values(self):
        snapshot = ArticleFluent().main(True).exclusive(False).snapshot()

        assert snapshot == ArticleData(main=True, exclusive=False)
