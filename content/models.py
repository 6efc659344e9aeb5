# content/models.py
from django.db import models
from django.conf import settings


class BlogPost(models.Model):
    """Blog articles written by store staff"""
    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=200, unique=True, db_index=True)

    content = models.TextField()
    excerpt = models.TextField(null=True, blank=True)
    featured_image_url = models.URLField(max_length=500, null=True, blank=True)

    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='blog_posts')

    is_published = models.BooleanField(default=False)
    published_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'content_blog_posts'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['slug']),
            models.Index(fields=['is_published', '-published_at']),
        ]

    def __str__(self):
        return self.title


class ContactMessage(models.Model):
    """Messages sent through the contact form"""
    name = models.CharField(max_length=200)
    email = models.EmailField()
    subject = models.CharField(max_length=255)
    message = models.TextField()

    is_read = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'content_contact_messages'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['is_read', '-created_at']),
        ]

    def __str__(self):
        return f"{self.name}: {self.subject}"
