# content/procedures.py
from core.forms import IdForm
from core.rpc import procedure
from . import services
from .forms import (
    BlogPostCreateForm, BlogPostUpdateForm, BlogListForm, SlugForm,
    ContactCreateForm, ContactListForm,
)


def serialize_post(post):
    if post is None:
        return None
    return {
        'id':                 post.pk,
        'title':              post.title,
        'content':            post.content,
        'excerpt':            post.excerpt,
        'slug':               post.slug,
        'author_id':          post.author_id,
        'featured_image_url': post.featured_image_url,
        'is_published':       post.is_published,
        'published_at':       post.published_at,
        'created_at':         post.created_at,
        'updated_at':         post.updated_at,
    }


def serialize_post_with_author(post):
    if post is None:
        return None
    result = serialize_post(post)
    result['author'] = {'first_name': post.author.first_name, 'last_name': post.author.last_name}
    return result


def serialize_message(message):
    if message is None:
        return None
    return {
        'id':         message.pk,
        'name':       message.name,
        'email':      message.email,
        'subject':    message.subject,
        'message':    message.message,
        'is_read':    message.is_read,
        'created_at': message.created_at,
    }


# ==================== BLOG ====================

@procedure('blog.create', form=BlogPostCreateForm, mutation=True)
def blog_create(data):
    return serialize_post(services.create_blog_post(**data))


@procedure('blog.list', form=BlogListForm)
def blog_list(data):
    return [serialize_post_with_author(p) for p in services.list_blog_posts(**data)]


@procedure('blog.getBySlug', form=SlugForm)
def blog_get_by_slug(data):
    return serialize_post_with_author(services.get_blog_post_by_slug(data['slug']))


@procedure('blog.getById', form=IdForm)
def blog_get_by_id(data):
    return serialize_post(services.get_blog_post(data['id']))


@procedure('blog.update', form=BlogPostUpdateForm, mutation=True)
def blog_update(data):
    post_id = data.pop('id')
    return serialize_post(services.update_blog_post(post_id, **data))


@procedure('blog.delete', form=IdForm, mutation=True)
def blog_delete(data):
    return services.delete_blog_post(data['id'])


@procedure('blog.publish', form=IdForm, mutation=True)
def blog_publish(data):
    return serialize_post(services.publish_blog_post(data['id']))


@procedure('blog.unpublish', form=IdForm, mutation=True)
def blog_unpublish(data):
    return serialize_post(services.unpublish_blog_post(data['id']))


# ==================== CONTACT ====================

@procedure('contact.create', form=ContactCreateForm, mutation=True)
def contact_create(data):
    return serialize_message(services.create_contact_message(**data))


@procedure('contact.list', form=ContactListForm)
def contact_list(data):
    return [serialize_message(m) for m in services.list_contact_messages(**data)]


@procedure('contact.getById', form=IdForm)
def contact_get_by_id(data):
    return serialize_message(services.get_contact_message(data['id']))


@procedure('contact.markRead', form=IdForm, mutation=True)
def contact_mark_read(data):
    return serialize_message(services.mark_message_read(data['id']))


@procedure('contact.markUnread', form=IdForm, mutation=True)
def contact_mark_unread(data):
    return serialize_message(services.mark_message_unread(data['id']))


@procedure('contact.delete', form=IdForm, mutation=True)
def contact_delete(data):
    return services.delete_contact_message(data['id'])


@procedure('contact.getUnreadCount')
def contact_get_unread_count(data):
    return services.get_unread_count()
