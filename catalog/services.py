# catalog/services.py
import logging

from django.db import IntegrityError, transaction
from django.db.models import Avg, Q
from django.utils import timezone

from core.exceptions import Conflict, NotFound
from core.money import to_money
from .models import Category, Product

logger = logging.getLogger(__name__)

CATEGORY_FIELDS = ('name', 'description', 'slug', 'is_active')
PRODUCT_FIELDS = (
    'name', 'description', 'price', 'type', 'image_url',
    'download_url', 'stock_quantity', 'is_active',
)


# ==================== CATEGORIES ====================

def create_category(name, slug, description=None):
    if Category.objects.filter(slug=slug).exists():
        raise Conflict(f"Category with slug {slug} already exists")

    try:
        with transaction.atomic():
            category = Category.objects.create(name=name, slug=slug, description=description)
    except IntegrityError:
        raise Conflict(f"Category with slug {slug} already exists")

    logger.info(f"Category created: {category.slug}")
    return category


def list_categories():
    return Category.objects.all()


def get_category(category_id):
    return Category.objects.filter(pk=category_id).first()


def update_category(category_id, **changes):
    category = get_category(category_id)
    if category is None:
        raise NotFound("Category not found")

    new_slug = changes.get('slug')
    if new_slug and Category.objects.filter(slug=new_slug).exclude(pk=category.pk).exists():
        raise Conflict(f"Category with slug {new_slug} already exists")

    for field in CATEGORY_FIELDS:
        if field in changes:
            setattr(category, field, changes[field])
    category.save()
    return category


def delete_category(category_id):
    """Soft delete; refused while products still point at the category."""
    if Product.objects.filter(category_id=category_id).exists():
        raise Conflict("Cannot delete category that has products")

    updated = Category.objects.filter(pk=category_id).update(is_active=False, updated_at=timezone.now())
    if not updated:
        raise NotFound("Category not found")

    logger.info(f"Category {category_id} deactivated")
    return {'success': True}


# ==================== PRODUCTS ====================

def _require_category(category_id):
    if not Category.objects.filter(pk=category_id).exists():
        raise NotFound(f"Category with id {category_id} not found")


def create_product(name, price, type, category_id, description=None, image_url=None,
                   download_url=None, stock_quantity=None):
    _require_category(category_id)

    product = Product.objects.create(
        name=name,
        description=description,
        price=price,
        type=type,
        category_id=category_id,
        image_url=image_url,
        download_url=download_url,
        stock_quantity=stock_quantity,
    )
    logger.info(f"Product created: {product.pk} {product.name}")
    return product


def list_products(category_id=None, type=None, is_active=None, limit=None, offset=None):
    products = Product.objects.all().order_by('-created_at', '-id')

    if category_id is not None:
        products = products.filter(category_id=category_id)
    if type:
        products = products.filter(type=type)
    if is_active is not None:
        products = products.filter(is_active=is_active)

    offset = offset or 0
    if limit is not None:
        return products[offset:offset + limit]
    return products[offset:]


def get_product(product_id):
    return Product.objects.filter(pk=product_id).first()


def get_product_with_details(product_id):
    """Product plus its category summary and approved reviews."""
    from reviews.models import Review

    product = Product.objects.select_related('category').filter(pk=product_id).first()
    if product is None:
        return None

    reviews = (
        Review.objects.filter(product=product, is_approved=True)
        .select_related('user')
        .order_by('-created_at')
    )
    average_rating = to_money(reviews.aggregate(avg=Avg('rating'))['avg'])

    return {
        'product':  product,
        'category': {'name': product.category.name, 'slug': product.category.slug},
        'reviews': [
            {
                'rating':    review.rating,
                'comment':   review.comment,
                'user_name': review.user.full_name,
            }
            for review in reviews
        ],
        'average_rating': average_rating,
    }


def update_product(product_id, **changes):
    product = get_product(product_id)
    if product is None:
        raise NotFound(f"Product with id {product_id} not found")

    if 'category_id' in changes:
        _require_category(changes['category_id'])
        product.category_id = changes['category_id']

    for field in PRODUCT_FIELDS:
        if field in changes:
            setattr(product, field, changes[field])
    product.save()
    return product


def delete_product(product_id):
    updated = Product.objects.filter(pk=product_id).update(is_active=False, updated_at=timezone.now())
    if not updated:
        raise NotFound(f"Product with id {product_id} not found")

    logger.info(f"Product {product_id} deactivated")
    return {'success': True}


def search_products(query, limit=10):
    return (
        Product.objects.filter(is_active=True)
        .filter(Q(name__icontains=query) | Q(description__icontains=query))
        .order_by('name')[:limit]
    )
