import pytest

from content.models import BlogPost, ContactMessage
from content.services import (
    create_blog_post, list_blog_posts, get_blog_post_by_slug, update_blog_post,
    delete_blog_post, publish_blog_post, unpublish_blog_post,
    create_contact_message, mark_message_read, mark_message_unread, get_unread_count,
)
from core.exceptions import Conflict, NotFound

pytestmark = pytest.mark.django_db


def test_create_published_post_sets_published_at(admin_user):
    post = create_blog_post('Launch', 'We are live.', 'launch', admin_user.pk, is_published=True)

    assert post.is_published is True
    assert post.published_at is not None


def test_create_requires_author_and_unique_slug(admin_user):
    with pytest.raises(NotFound):
        create_blog_post('Ghost', 'Body', 'ghost', 999)

    create_blog_post('First', 'Body', 'first', admin_user.pk)
    with pytest.raises(Conflict):
        create_blog_post('First again', 'Body', 'first', admin_user.pk)


def test_slug_lookup_sees_published_posts_only(admin_user):
    post = create_blog_post('Draft', 'Body', 'draft', admin_user.pk)

    assert get_blog_post_by_slug('draft') is None
    publish_blog_post(post.pk)
    assert get_blog_post_by_slug('draft') == post


def test_unpublish_clears_published_at(admin_user):
    post = create_blog_post('News', 'Body', 'news', admin_user.pk, is_published=True)

    post = unpublish_blog_post(post.pk)

    assert (post.is_published, post.published_at) == (False, None)


def test_update_refuses_taken_slug(admin_user):
    create_blog_post('One', 'Body', 'one', admin_user.pk)
    two = create_blog_post('Two', 'Body', 'two', admin_user.pk)

    with pytest.raises(Conflict):
        update_blog_post(two.pk, slug='one')
    with pytest.raises(NotFound, match='Blog post not found'):
        update_blog_post(999, title='Missing')


def test_list_filters(admin_user, user):
    create_blog_post('Published', 'Body', 'published', admin_user.pk, is_published=True)
    create_blog_post('Hidden', 'Body', 'hidden', user.pk)

    assert [p.slug for p in list_blog_posts(is_published=True)] == ['published']
    assert [p.slug for p in list_blog_posts(author_id=user.pk)] == ['hidden']


def test_delete_reports_success_flag(admin_user):
    post = create_blog_post('Bye', 'Body', 'bye', admin_user.pk)

    assert delete_blog_post(post.pk) == {'success': True}
    assert delete_blog_post(post.pk) == {'success': False}
    assert not BlogPost.objects.exists()


def test_contact_read_state_and_count():
    first = create_contact_message('Ann', 'ann@example.com', 'License', 'Where is my key?')
    create_contact_message('Bob', 'bob@example.com', 'Refund', 'Please refund.')

    assert get_unread_count() == {'count': 2}
    mark_message_read(first.pk)
    assert get_unread_count() == {'count': 1}
    mark_message_unread(first.pk)
    assert get_unread_count() == {'count': 2}

    with pytest.raises(NotFound, match='Contact message not found'):
        mark_message_read(999)


def test_contact_procedures(rpc):
    status, body = rpc.post('contact.create', {
        'name': 'Ann',
        'email': 'ann@example.com',
        'subject': 'Hello',
        'message': 'Hi there',
    })
    assert status == 200
    assert body['data']['is_read'] is False

    status, body = rpc.get('contact.list', {'is_read': False})
    assert [m['subject'] for m in body['data']] == ['Hello']
    assert ContactMessage.objects.count() == 1


def test_blog_by_slug_procedure_embeds_author(rpc, admin_user):
    create_blog_post('Launch', 'We are live.', 'launch', admin_user.pk, is_published=True)

    status, body = rpc.get('blog.getBySlug', {'slug': 'launch'})

    assert body['data']['author'] == {'first_name': 'Ada', 'last_name': 'Admin'}
