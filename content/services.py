# content/services.py
import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from core.exceptions import Conflict, NotFound
from users.models import User
from .models import BlogPost, ContactMessage

logger = logging.getLogger(__name__)

BLOG_FIELDS = ('title', 'content', 'excerpt', 'slug', 'featured_image_url')


def _paginate(queryset, limit=None, offset=None):
    offset = offset or 0
    if limit is not None:
        return queryset[offset:offset + limit]
    return queryset[offset:]


# ==================== BLOG ====================

def _ensure_unique_slug(slug, exclude_id=None):
    posts = BlogPost.objects.filter(slug=slug)
    if exclude_id is not None:
        posts = posts.exclude(pk=exclude_id)
    if posts.exists():
        raise Conflict(f"Blog post with slug {slug} already exists")


def _set_published(post, is_published):
    if is_published and not post.is_published:
        post.published_at = timezone.now()
    elif not is_published:
        post.published_at = None
    post.is_published = is_published


def create_blog_post(title, content, slug, author_id, excerpt=None,
                     featured_image_url=None, is_published=False):
    if not User.objects.filter(pk=author_id).exists():
        raise NotFound(f"User with id {author_id} not found")
    _ensure_unique_slug(slug)

    post = BlogPost(
        title=title,
        content=content,
        slug=slug,
        author_id=author_id,
        excerpt=excerpt,
        featured_image_url=featured_image_url,
    )
    _set_published(post, is_published)
    try:
        with transaction.atomic():
            post.save()
    except IntegrityError:
        raise Conflict(f"Blog post with slug {slug} already exists")

    logger.info(f"Blog post created: {post.slug} (published={post.is_published})")
    return post


def list_blog_posts(is_published=None, author_id=None, limit=None, offset=None):
    posts = BlogPost.objects.select_related('author').order_by('-created_at', '-id')
    if is_published is not None:
        posts = posts.filter(is_published=is_published)
    if author_id is not None:
        posts = posts.filter(author_id=author_id)
    return _paginate(posts, limit, offset)


def get_blog_post_by_slug(slug):
    """Published posts only."""
    return BlogPost.objects.select_related('author').filter(slug=slug, is_published=True).first()


def get_blog_post(post_id):
    return BlogPost.objects.filter(pk=post_id).first()


def update_blog_post(post_id, **changes):
    post = get_blog_post(post_id)
    if post is None:
        raise NotFound("Blog post not found")

    if changes.get('slug'):
        _ensure_unique_slug(changes['slug'], exclude_id=post.pk)

    for field in BLOG_FIELDS:
        if field in changes:
            setattr(post, field, changes[field])
    if 'is_published' in changes:
        _set_published(post, changes['is_published'])

    post.save()
    return post


def delete_blog_post(post_id):
    deleted, _ = BlogPost.objects.filter(pk=post_id).delete()
    return {'success': deleted > 0}


def publish_blog_post(post_id):
    return update_blog_post(post_id, is_published=True)


def unpublish_blog_post(post_id):
    return update_blog_post(post_id, is_published=False)


# ==================== CONTACT ====================

def create_contact_message(name, email, subject, message):
    contact = ContactMessage.objects.create(name=name, email=email, subject=subject, message=message)
    logger.info(f"Contact message {contact.pk} received from {email}")
    return contact


def list_contact_messages(is_read=None, limit=None, offset=None):
    messages = ContactMessage.objects.order_by('-created_at', '-id')
    if is_read is not None:
        messages = messages.filter(is_read=is_read)
    return _paginate(messages, limit, offset)


def get_contact_message(message_id):
    return ContactMessage.objects.filter(pk=message_id).first()


def _set_read(message_id, is_read):
    message = get_contact_message(message_id)
    if message is None:
        raise NotFound("Contact message not found")
    message.is_read = is_read
    message.save(update_fields=['is_read'])
    return message


def mark_message_read(message_id):
    return _set_read(message_id, True)


def mark_message_unread(message_id):
    return _set_read(message_id, False)


def delete_contact_message(message_id):
    deleted, _ = ContactMessage.objects.filter(pk=message_id).delete()
    return {'success': deleted > 0}


def get_unread_count():
    return {'count': ContactMessage.objects.filter(is_read=False).count()}
